from functools import singledispatch
from typing import Any, Sequence, Set

import numpy
import pandas


@singledispatch
def find_nulls(values: Any) -> Set[int]:
    """
    Find the indices of rows in `values` that have null/nan values.

    Args:
        values: The values in which to find nulls.
    """
    raise ValueError(
        f"No implementation of `find_nulls()` for type `{repr(type(values))}`."
    )


@find_nulls.register
def _(values: list) -> Set[int]:
    return find_nulls(pandas.Series(values, dtype=object))


@find_nulls.register
def _(values: tuple) -> Set[int]:
    return find_nulls(list(values))


@find_nulls.register
def _(values: dict) -> Set[int]:
    indices = set()
    for vs in values.values():
        indices.update(find_nulls(vs))
    return indices


@find_nulls.register
def _(values: pandas.Series) -> Set[int]:
    return set(numpy.flatnonzero(values.isnull().values))


@find_nulls.register
def _(values: numpy.ndarray) -> Set[int]:
    if values.ndim == 1:
        return set(numpy.flatnonzero(pandas.isnull(values)))
    raise ValueError("Cannot check for null indices for arrays of more than 1 dimension.")


@singledispatch
def drop_rows(values: Any, indices: Sequence[int]) -> Any:
    """
    Drop rows corresponding to the given indices in `values`.

    Args:
        values: The vector from which to drop rows with the given `indices`.
        indices: The indices of the rows to be dropped.
    """
    raise ValueError(
        f"No implementation of `drop_rows()` for values of type `{repr(type(values))}`."
    )


@drop_rows.register
def _(values: list, indices: Sequence[int]) -> list:
    indices = set(indices)
    return [value for i, value in enumerate(values) if i not in indices]


@drop_rows.register
def _(values: tuple, indices: Sequence[int]) -> list:
    return drop_rows(list(values), indices)


@drop_rows.register
def _(values: pandas.Series, indices: Sequence[int]) -> pandas.Series:
    return values.drop(index=values.index[list(indices)])


@drop_rows.register
def _(values: numpy.ndarray, indices: Sequence[int]) -> numpy.ndarray:
    return numpy.delete(values, list(indices), axis=0)
