import warnings
from collections.abc import Mapping
from enum import Enum
from functools import singledispatch
from typing import Any, Dict, Iterable, Iterator, Set, Union

import numpy
import pandas

from formulaterms.errors import (
    ColumnNotFoundError,
    DataMismatchWarning,
    FormulaMaterializationError,
)
from formulaterms.utils.fuzzy import format_suggestions, fuzzy_match
from formulaterms.utils.null_handling import drop_rows, find_nulls


class NAAction(Enum):
    DROP = "drop"
    RAISE = "raise"
    IGNORE = "ignore"


@singledispatch
def as_columns(data: Any) -> Dict[str, Any]:
    """
    Get the named columns of `data`, as a dictionary from column name to
    column values.

    Supported inputs are `pandas.DataFrame`s, mappings of names to columns,
    and structured (or record) `numpy.ndarray`s.
    """
    raise TypeError(
        f"Do not know how to extract named columns from data of type `{type(data)}`."
    )


@as_columns.register
def _(data: pandas.DataFrame) -> Dict[str, Any]:
    return dict(data.items())


@as_columns.register
def _(data: Mapping) -> Dict[str, Any]:
    return dict(data)


@as_columns.register
def _(data: numpy.ndarray) -> Dict[str, Any]:
    if data.dtype.names is None:
        raise TypeError(
            "Only structured (or record) numpy arrays have named columns."
        )
    return {name: data[name] for name in data.dtype.names}


def column_values(values: Any) -> numpy.ndarray:
    """
    The values of a single column as a one-dimensional numpy array.
    """
    if isinstance(values, (pandas.Series, pandas.Index)):
        return values.to_numpy()
    return numpy.asarray(values)


def get_column(columns: Dict[str, Any], name: str) -> Any:
    """
    Look up the column called `name`, raising a `ColumnNotFoundError` that
    suggests the nearest available names if it is not present.
    """
    if name not in columns:
        raise ColumnNotFoundError(
            format_suggestions(name, columns),
            name=name,
            suggestions=fuzzy_match(name, columns),
        )
    return columns[name]


def nrows(columns: Dict[str, Any]) -> int:
    for values in columns.values():
        return len(values)
    return 0


def iter_rows(data: Any) -> Iterator[Dict[str, Any]]:
    """
    Iterate over the rows of `data`, yielding a dictionary from column name to
    the (scalar) value of that column in each row.
    """
    columns = {
        name: column_values(values) for name, values in as_columns(data).items()
    }
    for i in range(nrows(columns)):
        yield {name: values[i] for name, values in columns.items()}


def complete_cases(
    data: Any,
    names: Iterable[str],
    na_action: Union[str, NAAction] = NAAction.DROP,
) -> Dict[str, Any]:
    """
    Return the columns of `data`, having handled the rows in which any of the
    nominated columns have missing values.

    Args:
        data: The data from which columns should be extracted.
        names: The names of the columns that are checked for missing values.
            Names not present in the data are ignored here (and reported when
            the formula is resolved).
        na_action: What to do with rows with missing values: "drop" them (with
            a `DataMismatchWarning`), "raise" an error, or "ignore" them.
    """
    na_action = NAAction(na_action)
    columns = as_columns(data)
    if na_action is NAAction.IGNORE:
        return columns

    null_indices: Set[int] = set()
    for name in names:
        if name not in columns:
            continue
        try:
            nulls = find_nulls(columns[name])
        except ValueError as e:
            raise FormulaMaterializationError(
                f"Error encountered while checking for nulls in `{name}`: {e}"
            ) from e
        if nulls and na_action is NAAction.RAISE:
            raise FormulaMaterializationError(f"`{name}` contains null values.")
        null_indices.update(nulls)

    if not null_indices:
        return columns
    warnings.warn(
        f"Dropped {len(null_indices)} of {nrows(columns)} rows with missing values.",
        DataMismatchWarning,
    )
    indices = sorted(null_indices)
    return {name: drop_rows(values, indices) for name, values in columns.items()}
