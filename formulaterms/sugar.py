from typing import Any, Dict, Mapping, NamedTuple, Optional, Type, Union

import pandas
import scipy.sparse as spsparse

from .columns import coef_names, model_cols_with_assign
from .data import NAAction, complete_cases
from .errors import FormulaMaterializationError
from .model_context import StatisticalModel
from .model_matrix import ModelMatrices, ModelMatrix
from .parser import parse_formula
from .resolve import apply_schema
from .schema import referenced_names, schema
from .terms import FormulaTerm, Term
from .utils.context import capture_context

OUTPUT_TYPES = ("pandas", "numpy", "sparse")


class ModelFrame(NamedTuple):
    """
    A resolved formula together with the (complete) data it was resolved
    against.
    """

    term: FormulaTerm
    data: Dict[str, Any]


def model_frame(
    formula: Union[str, FormulaTerm],
    data: Any,
    *,
    context: Union[int, Mapping[str, Any]] = 0,
    model: Type = StatisticalModel,
    hints: Optional[Mapping[str, Any]] = None,
    na_action: Union[str, NAAction] = NAAction.DROP,
) -> ModelFrame:
    """
    Parse `formula` (if necessary), remove the rows of `data` with missing
    values in the variables it references, and resolve it against the schema
    of the remaining data.

    Args:
        formula: The formula string (or unresolved `FormulaTerm`).
        data: The raw data (see `as_columns` for the supported types).
        context: The context from which functions used by the formula should
            be inherited. When specified as an integer, it is interpreted as a
            frame offset from the caller's frame (i.e. 0, the default, means
            that all names in the caller's scope are accessible). Otherwise, a
            mapping from name to value is expected.
        model: The model context tag class for which the formula is resolved.
        hints: Schema hints for the variables in the data (see `schema`).
        na_action: How rows with missing values are handled (see
            `complete_cases`).
    """
    _context = capture_context(context + 1) if isinstance(context, int) else context
    term = (
        formula
        if isinstance(formula, FormulaTerm)
        else parse_formula(formula, context=_context)
    )
    columns = complete_cases(
        data, [*referenced_names(term), *(hints or {})], na_action=na_action
    )
    return ModelFrame(
        apply_schema(term, schema(columns, hints, terms=term), model), columns
    )


def model_matrix(
    formula: Union[str, FormulaTerm],
    data: Any,
    *,
    context: Union[int, Mapping[str, Any]] = 0,
    model: Type = StatisticalModel,
    hints: Optional[Mapping[str, Any]] = None,
    output: str = "pandas",
    na_action: Union[str, NAAction] = NAAction.DROP,
) -> ModelMatrices:
    """
    Generate the model matrices for the response and predictors of a formula
    directly from data.

    This method is syntactic sugar for:
    ```
    term = apply_schema(parse_formula(formula), schema(data), model)
    lhs, rhs = model_cols(term, data)
    ```
    with rows containing missing values handled as nominated by `na_action`,
    and the results wrapped into `ModelMatrix` instances of the nominated
    `output` type.

    Args:
        formula: The formula string (or unresolved `FormulaTerm`).
        data: The raw data (see `as_columns` for the supported types).
        context: The context from which functions used by the formula should
            be inherited (see `model_frame`).
        model: The model context tag class for which the formula is resolved.
        hints: Schema hints for the variables in the data (see `schema`).
        output: The type of the generated matrices: "pandas" (a
            `pandas.DataFrame` with named columns), "numpy" (a
            `numpy.ndarray`) or "sparse" (a `scipy.sparse.csc_matrix`).
        na_action: How rows with missing values are handled (see
            `complete_cases`).

    Returns:
        The `ModelMatrices` for the left and right hand sides of the formula.
    """
    if output not in OUTPUT_TYPES:
        raise FormulaMaterializationError(
            f"Unknown output type `{output}`; expected one of: "
            f"{', '.join(OUTPUT_TYPES)}."
        )
    _context = capture_context(context + 1) if isinstance(context, int) else context
    term, columns = model_frame(
        formula,
        data,
        context=_context,
        model=model,
        hints=hints,
        na_action=na_action,
    )
    return ModelMatrices(
        lhs=_get_model_matrix(term.lhs, columns, output),
        rhs=_get_model_matrix(term.rhs, columns, output),
    )


def _get_model_matrix(term: Any, columns: Dict[str, Any], output: str) -> ModelMatrix:
    if not isinstance(term, Term):
        raise FormulaMaterializationError(
            f"`{term!r}` contains terms that cannot be combined into a single "
            "model matrix; use `model_cols` to generate their columns separately."
        )
    values, assign = model_cols_with_assign(term, columns)
    names = coef_names(term)

    if output == "sparse":
        matrix = spsparse.csc_matrix(values)
    elif output == "numpy":
        matrix = values
    else:
        matrix = pandas.DataFrame(values, columns=names, index=_get_index(columns))
    return ModelMatrix(matrix, term=term, column_names=names, assign=assign)


def _get_index(columns: Dict[str, Any]) -> Optional[pandas.Index]:
    for values in columns.values():
        if isinstance(values, pandas.Series):
            return values.index
    return None
