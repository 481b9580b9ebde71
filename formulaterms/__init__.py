from . import extensions
from .columns import coef_names, model_cols, model_cols_with_assign, model_row
from .contrasts import Contrasts, ContrastsMatrix, ContrastsRegistry
from .model_context import ModelContext, RegressionModel, StatisticalModel
from .model_matrix import ModelMatrices, ModelMatrix
from .parser import parse_formula
from .resolve import apply_schema, register_call_handler
from .schema import Schema, schema
from .sugar import model_frame, model_matrix
from .terms import (
    Categorical,
    Constant,
    Continuous,
    FormulaTerm,
    FunctionCall,
    Intercept,
    Interaction,
    Placeholder,
    Term,
    term,
    terms,
)

from ._version import __author__, __author_email__, __version__, __version_tuple__

__all__ = [
    "__author__",
    "__author_email__",
    "__version__",
    "__version_tuple__",
    "extensions",
    "parse_formula",
    "schema",
    "Schema",
    "apply_schema",
    "register_call_handler",
    "model_cols",
    "model_cols_with_assign",
    "model_row",
    "coef_names",
    "model_frame",
    "model_matrix",
    "ModelMatrix",
    "ModelMatrices",
    "ModelContext",
    "StatisticalModel",
    "RegressionModel",
    "Contrasts",
    "ContrastsMatrix",
    "ContrastsRegistry",
    "Term",
    "Placeholder",
    "Constant",
    "Intercept",
    "Continuous",
    "Categorical",
    "Interaction",
    "FunctionCall",
    "FormulaTerm",
    "term",
    "terms",
]
