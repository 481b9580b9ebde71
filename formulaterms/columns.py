from __future__ import annotations

import functools
import itertools
import operator
from functools import singledispatch
from typing import Any, Dict, List, Mapping, Tuple

import numpy
import pandas

from formulaterms.data import as_columns, column_values, get_column, nrows
from formulaterms.errors import FormulaMaterializationError
from formulaterms.terms import (
    Categorical,
    Constant,
    Continuous,
    FormulaTerm,
    FunctionCall,
    Group,
    Intercept,
    Interaction,
    Term,
    quote_name,
)


def model_cols(term: Any, data: Any) -> Any:
    """
    Generate the columns of the model matrix for the resolved `term`.

    Args:
        term: A resolved term; a `FormulaTerm` yields a tuple of the columns of
            its left and right hand sides, and a tuple of terms yields a tuple
            of their columns.
        data: The data from which columns are generated (see `as_columns`).

    Returns:
        A two-dimensional float `numpy.ndarray` with one row per row in `data`
        and `term.width` columns (or a tuple thereof).
    """
    columns = as_columns(data)
    if isinstance(term, FormulaTerm):
        return (model_cols(term.lhs, columns), model_cols(term.rhs, columns))
    if isinstance(term, tuple):
        return tuple(model_cols(t, columns) for t in term)
    return term_columns(term, columns)


def model_cols_with_assign(term: Term, data: Any) -> Tuple[numpy.ndarray, numpy.ndarray]:
    """
    Generate the columns for `term` (as `model_cols`), together with the
    "assign" vector mapping each column to the index of the member of `term`
    (if it is a group) that generated it.
    """
    columns = as_columns(data)
    members = term.terms if isinstance(term, Group) else (term,)
    blocks = [term_columns(member, columns) for member in members]
    assign = numpy.concatenate(
        [numpy.full(block.shape[1], i, dtype=int) for i, block in enumerate(blocks)]
        or [numpy.zeros(0, dtype=int)]
    )
    return _hstack(blocks, nrows(columns)), assign


def model_row(term: Any, row: Mapping[str, Any]) -> Any:
    """
    Evaluate the resolved `term` for a single row of data (a mapping from
    column name to scalar value), returning a vector of length `term.width`.
    """
    if isinstance(term, FormulaTerm):
        return (model_row(term.lhs, row), model_row(term.rhs, row))
    if isinstance(term, tuple):
        return tuple(model_row(t, row) for t in term)
    if isinstance(term, Interaction):
        return kron_insideout(*(model_row(t, row) for t in term.terms))
    if isinstance(term, Group):
        return numpy.concatenate(
            [model_row(t, row) for t in term.terms] or [numpy.zeros(0)]
        )
    return term_columns(term, {name: [value] for name, value in row.items()})[0]


# Kronecker products


def kron_insideout(*vectors: numpy.ndarray) -> numpy.ndarray:
    """
    The Kronecker product of `vectors`, ordered such that the elements of the
    first vector vary fastest.
    """
    return functools.reduce(
        lambda out, vector: numpy.kron(vector, out),
        (numpy.asarray(vector, dtype=float) for vector in vectors),
    )


def row_kron_insideout(*matrices: numpy.ndarray) -> numpy.ndarray:
    """
    The row-wise Kronecker product of `matrices`, each with one row per
    observation, ordered such that the columns of the first matrix vary
    fastest.

    Each matrix is reshaped so that its columns occupy their own dimension of
    an `(nrows, k_1, k_2, ..., k_n)` tensor, the matrices are multiplied with
    broadcasting, and the result is flattened back into
    `(nrows, k_1 * k_2 * ... * k_n)` columns.
    """
    n = matrices[0].shape[0]
    ndim = len(matrices)
    tensors = [
        numpy.asarray(matrix, dtype=float).reshape(
            (n, *([1] * i), matrix.shape[1], *([1] * (ndim - i - 1)))
        )
        for i, matrix in enumerate(matrices)
    ]
    width = functools.reduce(operator.mul, (matrix.shape[1] for matrix in matrices), 1)
    return functools.reduce(operator.mul, tensors).reshape((n, width), order="F")


# Column generation


def _hstack(blocks: List[numpy.ndarray], n: int) -> numpy.ndarray:
    if not blocks:
        return numpy.zeros((n, 0))
    return numpy.hstack(blocks)


@singledispatch
def term_columns(term: Term, columns: Dict[str, Any]) -> numpy.ndarray:
    """
    Generate the columns for a single resolved term. Extensions providing new
    kinds of terms should register implementations with
    `@term_columns.register`.
    """
    raise FormulaMaterializationError(
        f"Cannot generate columns for `{term!r}` of type {type(term)}; has a "
        "schema been applied?"
    )


@term_columns.register
def _(term: Intercept, columns: Dict[str, Any]) -> numpy.ndarray:
    return numpy.ones((nrows(columns), 1 if term.present else 0))


@term_columns.register
def _(term: Constant, columns: Dict[str, Any]) -> numpy.ndarray:
    return numpy.full((nrows(columns), 1), term.value, dtype=float)


@term_columns.register
def _(term: Continuous, columns: Dict[str, Any]) -> numpy.ndarray:
    return _as_float(term.name, get_column(columns, term.name)).reshape((-1, 1))


@term_columns.register
def _(term: Categorical, columns: Dict[str, Any]) -> numpy.ndarray:
    values = column_values(get_column(columns, term.name))
    codes = pandas.Categorical(values, categories=list(term.levels)).codes
    if (codes < 0).any():
        # Raises a `CodingError` naming the first unknown level.
        term.contrasts.index_of(values[codes < 0].tolist()[0])
    return term.contrasts.matrix[codes, :]


@term_columns.register
def _(term: Interaction, columns: Dict[str, Any]) -> numpy.ndarray:
    return row_kron_insideout(*(term_columns(t, columns) for t in term.terms))


@term_columns.register
def _(term: Group, columns: Dict[str, Any]) -> numpy.ndarray:
    return _hstack([term_columns(t, columns) for t in term.terms], nrows(columns))


@term_columns.register
def _(term: FunctionCall, columns: Dict[str, Any]) -> numpy.ndarray:
    return _as_float(term.expr, _evaluate(term, columns)).reshape((-1, 1))


def _as_float(name: str, values: Any) -> numpy.ndarray:
    try:
        return numpy.asarray(column_values(values), dtype=float)
    except (TypeError, ValueError) as e:
        raise FormulaMaterializationError(
            f"Values of `{name}` could not be interpreted as numbers: {e}"
        ) from e


def _argument_values(arg: Term, columns: Dict[str, Any]) -> Any:
    if isinstance(arg, Constant):
        return arg.value
    if isinstance(arg, Continuous):
        return _as_float(arg.name, get_column(columns, arg.name))
    if isinstance(arg, Categorical):
        return column_values(get_column(columns, arg.name))
    if isinstance(arg, FunctionCall):
        return _evaluate(arg, columns)
    values = term_columns(arg, columns)
    return values[:, 0] if values.shape[1] == 1 else values


def _evaluate(term: FunctionCall, columns: Dict[str, Any]) -> numpy.ndarray:
    if term.evaluator is None:
        raise FormulaMaterializationError(
            f"No function is available to evaluate `{term!r}`."
        )
    args = [_argument_values(arg, columns) for arg in term.args]
    try:
        values = term.evaluator(*args)
    except Exception as e:
        raise FormulaMaterializationError(
            f"Unable to evaluate `{term!r}`: {e}"
        ) from e

    values = column_values(values)
    n = nrows(columns)
    if values.ndim == 2 and values.shape[1] == 1:
        values = values[:, 0]
    if values.shape != (n,):
        raise FormulaMaterializationError(
            f"`{term!r}` must evaluate to one value per row ({n}), but its result "
            f"has shape {values.shape}."
        )
    return values


# Coefficient names


@singledispatch
def coef_names(term: Term) -> Any:
    """
    The names of the columns generated for the resolved `term`.
    """
    if term.width == 1:
        return [repr(term)]
    return [f"{term!r}[{i}]" for i in range(1, term.width + 1)]


@coef_names.register
def _(term: tuple) -> Tuple[List[str], ...]:
    return tuple(coef_names(t) for t in term)


@coef_names.register
def _(term: FormulaTerm) -> Tuple[Any, Any]:
    return (coef_names(term.lhs), coef_names(term.rhs))


@coef_names.register
def _(term: Intercept) -> List[str]:
    return ["(Intercept)"] if term.present else []


@coef_names.register
def _(term: Continuous) -> List[str]:
    return [quote_name(term.name)]


@coef_names.register
def _(term: Categorical) -> List[str]:
    return [f"{quote_name(term.name)}: {name}" for name in term.contrasts.column_names]


@coef_names.register
def _(term: Interaction) -> List[str]:
    names = [coef_names(t) for t in term.terms]
    return [
        " & ".join(reversed(combination))
        for combination in itertools.product(*reversed(names))
    ]


@coef_names.register
def _(term: Group) -> List[str]:
    return [name for t in term.terms for name in coef_names(t)]


@coef_names.register
def _(term: FunctionCall) -> List[str]:
    return [term.expr]
