from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Union

from .base import Term, quote_name


@dataclass(frozen=True, repr=False)
class Placeholder(Term):
    """
    An unresolved reference to the column `name` of the data.
    """

    name: str

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((self.name,))

    def __repr__(self) -> str:
        return quote_name(self.name)


@dataclass(frozen=True, repr=False)
class Constant(Term):
    """
    A numeric literal. In formulae, `1` requests an intercept while `0` and
    `-1` suppress it; inside function calls any number may be used.
    """

    value: Union[int, float]

    @property
    def degree(self) -> int:
        return 0

    @property
    def width(self) -> int:
        return 1

    @property
    def has_schema(self) -> bool:
        return True

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((self.value,))

    def __repr__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, repr=False)
class Intercept(Term):
    """
    The resolved form of an intercept literal: a column of ones when
    `present`, or an explicit marker for its absence.
    """

    present: bool = True

    @property
    def degree(self) -> int:
        return 0

    @property
    def width(self) -> int:
        return 1 if self.present else 0

    @property
    def has_schema(self) -> bool:
        return True

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((1,)) if self.present else frozenset()

    def __repr__(self) -> str:
        return "1" if self.present else "0"
