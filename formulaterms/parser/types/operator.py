from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, Union

from .token import Token


class Operator:
    """
    Specification for how an operator in a formula string should behave.

    Attributes:
        symbol: The operator for which the configuration applies.
        arity: The number of arguments that this operator consumes.
        precedence: How tightly this operator binds its arguments (the higher
            the number, the more tightly it binds). Operators with higher
            precedence will be evaluated first.
        associativity: One of 'left', 'right', or 'none'; indicating how
            operators of the same precedence should be evaluated in the absence
            of explicit grouping parentheses. If left associative, groups are
            formed from the left [e.g. a - b - c -> ((a - b) - c)]; and
            similarly for right.
        fixity: One of 'prefix' or 'infix'; indicating how the operator is
            positioned relative to its arguments.
        accepts_context: A callable that will receive a list of Operator and
            Token instances that describe the context in which the operator
            would be applied. The operator is only used if this callable
            returns `True`.
        disabled: Whether this operator is disabled and should not be used.
    """

    class Associativity(Enum):
        LEFT = "left"
        RIGHT = "right"
        NONE = "none"

    class Fixity(Enum):
        PREFIX = "prefix"
        INFIX = "infix"

    def __init__(
        self,
        symbol: str,
        *,
        arity: int,
        precedence: float,
        associativity: Union[None, str, Associativity] = Associativity.NONE,
        fixity: Union[str, Fixity] = Fixity.INFIX,
        accepts_context: Optional[
            Callable[[List[Union[Token, Operator]]], bool]
        ] = None,
        disabled: bool = False,
    ):
        self.symbol = symbol
        self.arity = arity
        self.precedence = precedence
        self.associativity = associativity  # type: ignore
        self.fixity = fixity  # type: ignore
        self._accepts_context = accepts_context
        self.disabled = disabled

    @property
    def associativity(self) -> Operator.Associativity:
        return self._associativity

    @associativity.setter
    def associativity(self, associativity: Union[str, Operator.Associativity]) -> None:
        self._associativity = Operator.Associativity(associativity or "none")

    @property
    def fixity(self) -> Operator.Fixity:
        return self._fixity

    @fixity.setter
    def fixity(self, fixity: Union[str, Operator.Fixity]) -> None:
        self._fixity = Operator.Fixity(fixity)

    def accepts_context(self, context: List[Union[Token, Operator]]) -> bool:
        if self._accepts_context:
            # Only tokens and operators binding no tighter than ourselves are
            # relevant, since all others are evaluated before us.
            return self._accepts_context(
                [
                    c
                    for c in context
                    if isinstance(c, Token) or c.precedence <= self.precedence
                ]
            )
        return True

    def __repr__(self) -> str:
        return self.symbol
