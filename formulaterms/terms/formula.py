from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Tuple, Union

from .base import Term, as_term, iter_terms
from .basic import Constant, Intercept
from .group import Group
from .interaction import Interaction


@dataclass(frozen=True, repr=False)
class FormulaTerm(Term):
    """
    A complete model formula: a response (`lhs`) described by predictors
    (`rhs`).

    Once a schema has been applied, `rhs` may be a tuple whose first member is
    the `MatrixGroup` of matrix terms, followed by any terms that produce
    their own outputs.
    """

    lhs: Any
    rhs: Any

    is_matrix_term = False

    @property
    def degree(self) -> int:
        return max(
            (term.degree for term in iter_terms(self.lhs) + iter_terms(self.rhs)),
            default=0,
        )

    @property
    def has_schema(self) -> bool:
        return all(
            term.has_schema for term in iter_terms(self.lhs) + iter_terms(self.rhs)
        )

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset().union(
            *(term.term_syms() for term in iter_terms(self.lhs) + iter_terms(self.rhs))
        )

    def describe(self) -> str:
        return f"{_describe(self.lhs)} ~ {_describe(self.rhs)}"

    def __repr__(self) -> str:
        return f"{_format(self.lhs)} ~ {_format(self.rhs)}"


def _format(terms: Any) -> str:
    return " + ".join(repr(term) for term in iter_terms(terms)) or "0"


def _describe(terms: Any) -> str:
    return " + ".join(term.describe() for term in iter_terms(terms)) or "0"


def tilde(lhs: Any, rhs: Any) -> FormulaTerm:
    """
    Pair the response `lhs` with the predictors `rhs`.
    """
    return FormulaTerm(_as_side(lhs), _as_side(rhs))


def _as_side(terms: Any) -> Any:
    if isinstance(terms, tuple):
        return tuple(as_term(term) for term in terms)
    return as_term(terms)


def term(value: Union[str, int, float]) -> Term:
    """
    Construct a single term: a `Placeholder` for a name, or a `Constant` for a
    number.
    """
    return as_term(value)


def terms(*values: Union[str, int, float]) -> Tuple[Term, ...]:
    """
    Construct a tuple of terms, one per nominated name or number.
    """
    return tuple(as_term(value) for value in values)


def has_intercept(terms: Union[Term, Iterable[Term]]) -> bool:
    """
    Whether any top-level term requests an intercept (`1` or
    `Intercept(True)`).
    """
    return any(
        (isinstance(term, Intercept) and term.present)
        or (isinstance(term, Constant) and term.value == 1)
        for term in _top_level_terms(terms)
    )


def omits_intercept(terms: Union[Term, Iterable[Term]]) -> bool:
    """
    Whether any top-level term explicitly suppresses the intercept (`0`, `-1`
    or `Intercept(False)`).
    """
    return any(
        (isinstance(term, Intercept) and not term.present)
        or (isinstance(term, Constant) and term.value in (0, -1))
        for term in _top_level_terms(terms)
    )


def drop_term(context: Term, term: Term) -> Term:
    """
    The term that `context` reduces to once `term` is removed from it: the
    intercept if `context` is `term` itself, otherwise the interaction of the
    remaining components.
    """
    if context.alias_equal(term) or not isinstance(context, Interaction):
        return Intercept(True)
    remaining = tuple(
        component for component in context.terms if not component.alias_equal(term)
    )
    if len(remaining) == 1:
        return remaining[0]
    return Interaction(remaining)


def _top_level_terms(terms: Union[Term, Iterable[Term]]) -> Tuple[Term, ...]:
    members = []
    for term in iter_terms(terms):
        members.extend(iter_terms(term) if isinstance(term, Group) else (term,))
    return tuple(members)
