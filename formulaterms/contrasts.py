from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Sequence, Tuple, Union

import numpy
import pandas
from interface_meta import InterfaceMeta

from formulaterms.errors import CodingError


class Contrasts(metaclass=InterfaceMeta):
    """
    The base class for all contrast implementations.

    A `Contrasts` instance describes *how* a categorical variable should be
    coded; binding it to the levels observed in the data (see `bind`) yields
    the concrete `ContrastsMatrix` used to generate model matrix columns.

    All contrasts accept an optional `levels` attribute, which fixes the order
    of the levels (it must name exactly the levels present in the data).
    """

    INTERFACE_RAISE_ON_VIOLATION = True

    levels: Optional[Sequence[Hashable]] = None

    def bind(
        self, levels: Sequence[Hashable], reduced_rank: bool = True
    ) -> ContrastsMatrix:
        """
        Bind these contrasts to the levels of a categorical variable.

        Args:
            levels: The names of the levels/categories in the data.
            reduced_rank: Whether to generate the reduced rank coding (with one
                fewer column than there are levels), or the full rank coding
                (one column per level).
        """
        return ContrastsMatrix(self, tuple(levels), reduced_rank=reduced_rank)

    # Coding matrix methods

    def get_coding_matrix(
        self, levels: Sequence[Hashable], reduced_rank: bool = True
    ) -> pandas.DataFrame:
        """
        Generate the coding matrix; i.e. the matrix with rows representing the
        encoding to use for the corresponding level.

        Args:
            levels: The names of the levels/categories in the data.
            reduced_rank: Whether to output a reduced rank matrix. When this is
                `False`, the identity (dummy) encoding is used.
        """
        contrasts = self.bind(levels, reduced_rank=reduced_rank)
        return pandas.DataFrame(
            contrasts.matrix,
            columns=list(contrasts.column_names),
            index=list(contrasts.levels),
        )

    @abstractmethod
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        """
        Subclasses must override this method to implement the generation of the
        reduced rank coding matrix, with one row per level and one fewer
        column.

        Args:
            levels: The names of the levels/categories in the data.
        """

    @abstractmethod
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        """
        Generate the names for the columns of the reduced rank coding matrix.

        Args:
            levels: The names of the levels/categories in the data.
        """

    def _validate_levels(self, levels: Sequence[Hashable]) -> None:
        """
        Subclasses may override this method to check that their configuration
        is compatible with `levels`, raising a `CodingError` otherwise.
        """


def _find_base_index(contrasts: Contrasts, levels: Sequence[Hashable]) -> int:
    base = getattr(contrasts, "base", None)
    if base is None:
        return contrasts.DEFAULT_BASE_INDEX % len(levels)  # type: ignore[attr-defined]
    for i, level in enumerate(levels):
        if level == base:
            return i
    raise CodingError(f"Base level {base!r} not found in levels {list(levels)!r}.")


@dataclass
class TreatmentContrasts(Contrasts):
    """
    Treatment (aka. dummy) coding.

    This contrast leads to comparisons of the mean of the dependent variable for
    each level with some reference level. If not specified, the reference level
    is taken to be the first level.
    """

    DEFAULT_BASE_INDEX = 0

    base: Optional[Hashable] = None
    levels: Optional[Sequence[Hashable]] = None

    @Contrasts.override
    def _validate_levels(self, levels: Sequence[Hashable]) -> None:
        _find_base_index(self, levels)

    @Contrasts.override
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        base_index = _find_base_index(self, levels)
        matrix = numpy.eye(len(levels))
        return matrix[:, [i for i in range(len(levels)) if i != base_index]]

    @Contrasts.override
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        base_index = _find_base_index(self, levels)
        return [level for i, level in enumerate(levels) if i != base_index]


@dataclass
class SumContrasts(Contrasts):
    """
    Sum (or Deviation) coding.

    These contrasts compare the mean of the dependent variable for each level
    (except the base level, which is redundant) to the global average of all
    levels. If not specified, the base level is taken to be the last level.
    """

    DEFAULT_BASE_INDEX = -1

    base: Optional[Hashable] = None
    levels: Optional[Sequence[Hashable]] = None

    @Contrasts.override
    def _validate_levels(self, levels: Sequence[Hashable]) -> None:
        _find_base_index(self, levels)

    @Contrasts.override
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        base_index = _find_base_index(self, levels)
        n = len(levels)
        contr = numpy.eye(n)[:, [i for i in range(n) if i != base_index]]
        contr[base_index, :] = -1
        return contr

    @Contrasts.override
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        base_index = _find_base_index(self, levels)
        return [level for i, level in enumerate(levels) if i != base_index]


@dataclass
class HelmertContrasts(Contrasts):
    """
    Helmert coding.

    These contrasts compare the mean of the dependent variable for each
    successive level to the average all previous levels. The default
    attribute values are chosen to match the R implementation, which
    corresponds to a reversed and unscaled Helmert coding.

    Attributes:
        reverse: Whether to iterate over successive levels in reverse order.
        scale: Whether to scale the encoding to simplify interpretation of
            coefficients.
    """

    reverse: bool = True
    scale: bool = False
    levels: Optional[Sequence[Hashable]] = None

    @Contrasts.override
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        n = len(levels)
        contr = numpy.zeros((n, n - 1))
        for i in range(n - 1):
            if self.reverse:
                contr[i + 1, i] = i + 1
            else:
                contr[i, i] = n - i - 1
        contr[
            numpy.triu_indices(n - 1) if self.reverse else numpy.tril_indices(n, k=-1)
        ] = -1
        if self.scale:
            for i in range(n - 1):
                contr[:, i] /= i + 2 if self.reverse else n - i
        return contr

    @Contrasts.override
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        return list(levels[1:] if self.reverse else levels[:-1])


@dataclass
class DiffContrasts(Contrasts):
    """
    Difference coding.

    These contrasts compare the mean of the dependent variable for each level
    with that of the previous level. The default attribute values correspond to
    a backward difference coding.

    Attributes:
        backward: Whether to reverse the sign of the difference (e.g. Level 2 -
            Level 1 cf. Level 1 - Level 2).
    """

    backward: bool = True
    levels: Optional[Sequence[Hashable]] = None

    @Contrasts.override
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        n = len(levels)
        contr = numpy.repeat([numpy.arange(1, n)], n, axis=0) / n
        contr[numpy.triu_indices(n, m=n - 1)] -= 1
        if not self.backward:
            contr *= -1
        return contr

    @Contrasts.override
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        return list(levels[1:] if self.backward else levels[:-1])


@dataclass
class PolyContrasts(Contrasts):
    """
    (Orthogonal) Polynomial coding.

    These "contrasts" represent a categorical variable that is assumed to have
    equal (or known) spacing/scores, and allow us to model non-linear polynomial
    behaviour of the dependent variable with respect to the ordered levels.

    Attributes:
        scores: The "scores" of the categorical variable. If provided, it must
            have the same cardinality as the categories being coded.
    """

    NAME_ALIASES = {
        1: ".L",
        2: ".Q",
        3: ".C",
    }

    scores: Optional[Sequence[float]] = None
    levels: Optional[Sequence[Hashable]] = None

    @Contrasts.override
    def _validate_levels(self, levels: Sequence[Hashable]) -> None:
        if self.scores is not None and len(self.scores) != len(levels):
            raise CodingError(
                "`PolyContrasts.scores` must have the same cardinality as the categories."
            )

    @Contrasts.override
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        scores = numpy.arange(len(levels)) if self.scores is None else self.scores
        return orthonormal_poly(scores, degree=len(levels) - 1)

    @Contrasts.override
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        return [
            self.NAME_ALIASES[d] if d in self.NAME_ALIASES else f"^{d}"
            for d in range(1, len(levels))
        ]


@dataclass(init=False, eq=False)
class CustomContrasts(Contrasts):
    """
    Handle the custom contrast case when users pass in hand-coded contrast
    matrices. The matrix must have one row per level and one fewer column.
    """

    matrix: numpy.ndarray
    names: Optional[Sequence[Hashable]] = None
    levels: Optional[Sequence[Hashable]] = None

    def __init__(
        self,
        matrix: Union[
            Dict[Hashable, Sequence[float]], Sequence[Sequence[float]], numpy.ndarray
        ],
        names: Optional[Sequence[Hashable]] = None,
        levels: Optional[Sequence[Hashable]] = None,
    ):
        if isinstance(matrix, dict):
            if names is None:
                names = list(matrix)
            matrix = numpy.array([*matrix.values()], dtype=float).T
        else:
            matrix = numpy.array(matrix, dtype=float)
        if matrix.ndim != 2:
            raise CodingError("Custom contrasts must be a two-dimensional matrix.")
        if names is not None and len(names) != matrix.shape[1]:
            raise CodingError(
                "Names must be aligned with the columns of the contrast matrix."
            )
        self.matrix = matrix
        self.names = names
        self.levels = levels

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CustomContrasts):
            return NotImplemented
        return (
            numpy.array_equal(self.matrix, other.matrix)
            and self.names == other.names
            and self.levels == other.levels
        )

    @Contrasts.override
    def _validate_levels(self, levels: Sequence[Hashable]) -> None:
        n = len(levels)
        if self.matrix.shape != (n, n - 1):
            raise CodingError(
                f"Contrasts matrix wrong size for {n} levels. Expected "
                f"{(n, n - 1)}, got {self.matrix.shape}."
            )

    @Contrasts.override
    def _get_coding_matrix(self, levels: Sequence[Hashable]) -> numpy.ndarray:
        return self.matrix

    @Contrasts.override
    def get_coding_column_names(
        self, levels: Sequence[Hashable]
    ) -> Sequence[Hashable]:
        if self.names:
            return list(self.names)
        return list(range(1, self.matrix.shape[1] + 1))


class ContrastsRegistry(type):
    """
    The registry of contrast implementations, by short name.
    """

    # Same as R
    helmert = HelmertContrasts
    poly = PolyContrasts
    sum = SumContrasts
    treatment = TreatmentContrasts

    # Extra
    diff = DiffContrasts
    custom = CustomContrasts

    @classmethod
    def get(mcs, name: str) -> type:
        contrasts = getattr(mcs, name, None)
        if not (isinstance(contrasts, type) and issubclass(contrasts, Contrasts)):
            raise CodingError(f"No contrasts registered under the name `{name}`.")
        return contrasts


@dataclass(frozen=True, eq=False)
class ContrastsMatrix:
    """
    A `Contrasts` instance bound to the levels of a categorical variable.

    Attributes:
        contrasts: The contrasts used to generate `matrix`.
        levels: The levels of the variable, in the order of the rows of
            `matrix`. If `contrasts` specifies its own levels, their order is
            used.
        reduced_rank: Whether `matrix` is the reduced rank coding (with
            `len(levels) - 1` columns) or the full rank coding (one column per
            level).
        matrix: The coding matrix, with one row per level.
        column_names: The names of the columns of `matrix`.
    """

    contrasts: Contrasts
    levels: Tuple[Hashable, ...]
    reduced_rank: bool = True
    matrix: numpy.ndarray = field(init=False, repr=False)
    column_names: Tuple[Hashable, ...] = field(init=False)
    _index: Dict[Hashable, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.contrasts, type):
            raise CodingError(
                f"Contrast types must be instantiated (use `{self.contrasts.__name__}()` "
                f"instead of `{self.contrasts.__name__}`)."
            )
        data_levels = tuple(self.levels)
        levels = (
            data_levels
            if self.contrasts.levels is None
            else tuple(self.contrasts.levels)
        )

        if len(set(levels)) != len(levels):
            duplicates = sorted(
                {str(level) for level in levels if levels.count(level) > 1}
            )
            raise CodingError(f"Duplicate levels found: {duplicates}.")
        mismatched = [level for level in levels if level not in data_levels] + [
            level for level in data_levels if level not in levels
        ]
        if mismatched:
            raise CodingError(
                f"Contrasts levels not found in data or vice-versa: {mismatched}."
                f"\n  Data levels: {list(data_levels)}."
                f"\n  Contrast levels: {list(levels)}."
            )
        if not levels:
            raise CodingError(
                "Empty set of levels found (need at least two to compute contrasts)."
            )
        if len(levels) == 1 and self.reduced_rank:
            raise CodingError(
                f"Only one level found: {levels[0]!r} (need at least two to compute "
                "contrasts)."
            )
        self.contrasts._validate_levels(levels)

        if self.reduced_rank:
            matrix = numpy.asarray(
                self.contrasts._get_coding_matrix(levels), dtype=float
            )
            column_names = tuple(self.contrasts.get_coding_column_names(levels))
        else:
            matrix = numpy.eye(len(levels))
            column_names = levels

        object.__setattr__(self, "levels", levels)
        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "column_names", column_names)
        object.__setattr__(
            self, "_index", {level: i for i, level in enumerate(levels)}
        )

    def index_of(self, level: Hashable) -> int:
        """
        The row of `matrix` corresponding to `level`.
        """
        try:
            return self._index[level]
        except (KeyError, TypeError):
            raise CodingError(
                f"There are levels in data that are not in the contrasts: {level!r}."
                f"\n  Contrast levels: {list(self.levels)}."
            ) from None

    def full_rank(self) -> ContrastsMatrix:
        if not self.reduced_rank:
            return self
        return ContrastsMatrix(self.contrasts, self.levels, reduced_rank=False)

    def reduced(self) -> ContrastsMatrix:
        if self.reduced_rank:
            return self
        return ContrastsMatrix(self.contrasts, self.levels, reduced_rank=True)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ContrastsMatrix):
            return NotImplemented
        return (
            self.levels == other.levels
            and self.column_names == other.column_names
            and numpy.array_equal(self.matrix, other.matrix)
        )

    def __hash__(self) -> int:
        return hash((self.levels, self.column_names))

    def __str__(self) -> str:
        return f"{type(self.contrasts).__name__}({self.matrix.shape[1]})"


def orthonormal_poly(x: Sequence[float], degree: int) -> numpy.ndarray:
    """
    Generate an orthonormal basis for the polynomials of `x` of degree 1 to
    `degree`, using the monic three-term recurrence relation.

    Returns:
        A two-dimensional numpy array with `len(x)` rows and `degree` columns.
    """
    x = numpy.array(x, dtype=numpy.float64)

    P = numpy.empty((x.shape[0], degree + 1))
    P[:, 0] = 1
    norms2 = [numpy.sum(P[:, 0] ** 2)]

    for i in range(1, degree + 1):
        alpha = numpy.sum(x * P[:, i - 1] ** 2) / norms2[i - 1]
        P[:, i] = (x - alpha) * P[:, i - 1]
        if i >= 2:
            P[:, i] -= norms2[i - 1] / norms2[i - 2] * P[:, i - 2]
        norms2.append(numpy.sum(P[:, i] ** 2))

    # Renormalize so we provide an orthonormal basis.
    P /= numpy.sqrt(numpy.array(norms2))
    return P[:, 1:]
