from __future__ import annotations

import functools
import operator
import warnings
from dataclasses import dataclass
from typing import Any, FrozenSet, List, Tuple

from formulaterms.errors import FormulaSyntaxError, InteractionLiteralWarning

from .base import Term, as_term
from .basic import Constant, Intercept


@dataclass(frozen=True, repr=False)
class Interaction(Term):
    """
    The row-wise product of two or more terms.

    Nested interactions are flattened on construction, and components are
    ordered by degree (stably, so that terms of equal degree keep the order
    in which they were written).
    """

    terms: Tuple[Term, ...]

    def __post_init__(self) -> None:
        flattened: List[Term] = []
        for term in self.terms:
            if isinstance(term, Interaction):
                flattened.extend(term.terms)
            else:
                flattened.append(term)
        if len(flattened) < 2:
            raise ValueError("Interactions must have at least two components.")
        object.__setattr__(
            self, "terms", tuple(sorted(flattened, key=lambda term: term.degree))
        )

    @property
    def degree(self) -> int:
        return sum(term.degree for term in self.terms)

    @property
    def width(self) -> int:
        return functools.reduce(operator.mul, (term.width for term in self.terms), 1)

    @property
    def has_schema(self) -> bool:
        return all(term.has_schema for term in self.terms)

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset().union(*(term.term_syms() for term in self.terms))

    def describe(self) -> str:
        return " & ".join(term.describe() for term in self.terms)

    def __repr__(self) -> str:
        return " & ".join(repr(term) for term in self.terms)


def interact(*terms: Any) -> Term:
    """
    Interact the nominated terms.

    Interactions distribute over unions, so `(a + b) & c` is `a & c + b & c`.
    Constants are dropped (with a warning for any value other than 1), and an
    interaction left with a single component is that component.
    """
    from .group import Group, union

    terms = tuple(as_term(term) for term in terms)

    for i, term in enumerate(terms):
        if isinstance(term, Group):
            return union(
                *(interact(*terms[:i], member, *terms[i + 1 :]) for member in term.terms)
            )

    components = []
    for term in terms:
        if isinstance(term, Constant) or isinstance(term, Intercept):
            if term.term_syms() != frozenset((1,)):
                warnings.warn(
                    f"Number {term!r} removed from interaction term "
                    f"{' & '.join(repr(t) for t in terms)}.",
                    InteractionLiteralWarning,
                )
            continue
        components.append(term)

    if not components:
        raise FormulaSyntaxError(
            "Interactions must involve at least one term that is not a number."
        )
    if len(components) == 1:
        return components[0]
    return Interaction(tuple(components))
