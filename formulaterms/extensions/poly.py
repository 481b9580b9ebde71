from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Mapping

import numpy

from formulaterms.columns import coef_names, term_columns
from formulaterms.errors import ResolutionError
from formulaterms.model_context import StatisticalModel
from formulaterms.resolve import ResolutionContext, register_call_handler, resolve_term
from formulaterms.terms import Categorical, Constant, FunctionCall, Term


class PolynomialModel(StatisticalModel):
    """
    A model context in which `poly(x, degree)` expands `x` into the columns
    `x^1, ..., x^degree`.
    """


@dataclass(frozen=True, repr=False)
class PolynomialTerm(Term):
    """
    The raw powers of a (resolved) term, from 1 to `power`.
    """

    term: Term
    power: int

    @property
    def width(self) -> int:
        return self.power

    @property
    def has_schema(self) -> bool:
        return self.term.has_schema

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((repr(self),))

    def describe(self) -> str:
        return f"{self!r} (polynomial of degree {self.power})"

    def __repr__(self) -> str:
        return f"poly({self.term!r}, {self.power})"


@register_call_handler("poly", PolynomialModel)
def resolve_poly(
    call: FunctionCall, schema: Mapping[str, Term], context: ResolutionContext
) -> PolynomialTerm:
    if len(call.args) != 2:
        raise ResolutionError(
            f"`poly` takes a term and a degree, but got {len(call.args)} arguments "
            f"in `{call!r}`."
        )
    term, degree = call.args
    if not (
        isinstance(degree, Constant)
        and isinstance(degree.value, int)
        and degree.value >= 1
    ):
        raise ResolutionError(
            f"The degree of `{call!r}` must be a positive integer, not `{degree!r}`."
        )
    resolved = resolve_term(term, schema, context.protect())
    if isinstance(resolved, Categorical) or resolved.width != 1:
        raise ResolutionError(
            f"`poly` can only expand a single numeric column, but `{term!r}` in "
            f"`{call!r}` resolved to `{resolved.describe()}`."
        )
    return PolynomialTerm(resolved, degree.value)


@term_columns.register
def _(term: PolynomialTerm, columns: Dict[str, Any]) -> numpy.ndarray:
    values = term_columns(term.term, columns)
    return numpy.hstack([values**power for power in range(1, term.power + 1)])


@coef_names.register
def _(term: PolynomialTerm) -> List[str]:
    (name,) = coef_names(term.term)
    return [f"{name}^{power}" for power in range(1, term.power + 1)]
