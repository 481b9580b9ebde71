from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Optional, Tuple

from .base import Term
from .basic import Constant


@dataclass(frozen=True, repr=False)
class FunctionCall(Term):
    """
    A call to a function (or host operator) that is not part of the formula
    language, lifted into the term domain. The result is evaluated
    element-wise over the values of its (resolved) arguments.

    Attributes:
        head: The name of the function (or the operator symbol).
        args: The arguments of the call, as terms.
        expr: The source text of the call, which also serves as its identity
            for the purposes of aliasing.
        evaluator: The callable implementing the call, if it could be found
            when the call was captured.
    """

    head: str
    args: Tuple[Term, ...]
    expr: str
    evaluator: Optional[Callable[..., Any]] = field(default=None, compare=False)

    @property
    def width(self) -> int:
        return 1

    @property
    def has_schema(self) -> bool:
        return all(
            isinstance(arg, Constant) or arg.has_schema for arg in self.args
        )

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((self.expr,))

    def __repr__(self) -> str:
        return self.expr
