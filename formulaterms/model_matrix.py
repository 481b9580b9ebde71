from __future__ import annotations

import copy
from typing import Any, Callable, Generic, NamedTuple, Optional, Sequence, Tuple, TypeVar

import numpy
import wrapt
from typing_extensions import SupportsIndex

from .terms import Term

MatrixType = TypeVar("MatrixType")


class ModelMatrix(Generic[MatrixType], wrapt.ObjectProxy):
    """
    A wrapper around arbitrary model matrix output representations.

    This wrapper allows for `isinstance(..., ModelMatrix)` checks, and allows
    one to access the resolved term from which it was generated (via
    `<model_matrix>.term`), along with the names of its columns and the
    index of the term member that generated each column (`.assign`). All
    other instance attributes and methods of the wrapped object are directly
    accessible as if the object were unwrapped.
    """

    def __init__(
        self,
        matrix: Any,
        term: Optional[Term] = None,
        column_names: Optional[Sequence[str]] = None,
        assign: Optional[Sequence[int]] = None,
    ):
        wrapt.ObjectProxy.__init__(self, matrix)
        self._self_term = term
        self._self_column_names = tuple(column_names or ())
        self._self_assign = (
            numpy.asarray(assign, dtype=int) if assign is not None else None
        )

    @property
    def term(self) -> Optional[Term]:
        """
        The resolved term used to generate this model matrix.

        Passing this term to `model_cols` with new data generates columns that
        respect all the choices (including the levels and coding of
        categorical variables) made when this matrix was generated.
        """
        return self._self_term

    @property
    def column_names(self) -> Tuple[str, ...]:
        return self._self_column_names

    @property
    def assign(self) -> Optional[numpy.ndarray]:
        return self._self_assign

    def __repr__(self) -> str:
        return self.__wrapped__.__repr__()  # pragma: no cover

    # Handle copying behaviour

    def __copy__(self) -> ModelMatrix[MatrixType]:
        return type(self)(
            copy.copy(self.__wrapped__),
            term=self._self_term,
            column_names=self._self_column_names,
            assign=self._self_assign,
        )

    def __deepcopy__(self, memo: Any = None) -> ModelMatrix[MatrixType]:
        return type(self)(
            copy.deepcopy(self.__wrapped__, memo),
            term=copy.deepcopy(self._self_term, memo),
            column_names=self._self_column_names,
            assign=copy.deepcopy(self._self_assign, memo),
        )

    # Handle pickling behaviour

    def __reduce_ex__(
        self, protocol: SupportsIndex
    ) -> Tuple[Callable[..., ModelMatrix], Tuple[Any, ...]]:
        return ModelMatrix, (
            self.__wrapped__,
            self._self_term,
            self._self_column_names,
            self._self_assign,
        )


class ModelMatrices(NamedTuple):
    """
    The model matrices generated for the left and right hand sides of a
    formula.
    """

    lhs: ModelMatrix
    rhs: ModelMatrix
