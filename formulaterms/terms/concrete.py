from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, FrozenSet

from .base import Term, quote_name

if TYPE_CHECKING:  # pragma: no cover
    from formulaterms.contrasts import ContrastsMatrix


@dataclass(frozen=True, repr=False)
class Continuous(Term):
    """
    A numeric column, together with summary statistics computed over the
    data from which the schema was built.

    Attributes:
        name: The name of the column.
        mean: The mean of the column.
        var: The (sample) variance of the column.
        min: The smallest value in the column.
        max: The largest value in the column.
    """

    name: str
    mean: float
    var: float
    min: float
    max: float

    @property
    def width(self) -> int:
        return 1

    @property
    def has_schema(self) -> bool:
        return True

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((self.name,))

    def describe(self) -> str:
        return f"{quote_name(self.name)} (continuous)"

    def __repr__(self) -> str:
        return quote_name(self.name)


@dataclass(frozen=True, repr=False)
class Categorical(Term):
    """
    A categorical column, coded numerically by a `ContrastsMatrix`.

    Attributes:
        name: The name of the column.
        contrasts: The contrasts matrix mapping each level onto a row of
            numeric values.
    """

    name: str
    contrasts: ContrastsMatrix

    @property
    def width(self) -> int:
        return self.contrasts.matrix.shape[1]

    @property
    def has_schema(self) -> bool:
        return True

    @property
    def levels(self) -> tuple:
        return self.contrasts.levels

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset((self.name,))

    def full_rank(self) -> Categorical:
        """
        This term coded with one column per level.
        """
        return replace(self, contrasts=self.contrasts.full_rank())

    def reduced(self) -> Categorical:
        """
        This term coded with its scheme's ordinary (reduced rank) coding.
        """
        return replace(self, contrasts=self.contrasts.reduced())

    def describe(self) -> str:
        return f"{quote_name(self.name)} ({len(self.levels)} levels): {self.contrasts}"

    def __repr__(self) -> str:
        return quote_name(self.name)
