from .base import (
    Term,
    alias_equal,
    as_term,
    format_terms,
    has_schema,
    iter_terms,
    quote_name,
    term_syms,
    width,
)
from .basic import Constant, Intercept, Placeholder
from .concrete import Categorical, Continuous
from .formula import (
    FormulaTerm,
    drop_term,
    has_intercept,
    omits_intercept,
    term,
    terms,
    tilde,
)
from .function_call import FunctionCall
from .group import Group, MatrixGroup, collect_matrix_terms, union
from .interaction import Interaction, interact

__all__ = [
    "Term",
    "Placeholder",
    "Constant",
    "Intercept",
    "Continuous",
    "Categorical",
    "Interaction",
    "FunctionCall",
    "Group",
    "MatrixGroup",
    "FormulaTerm",
    "alias_equal",
    "as_term",
    "collect_matrix_terms",
    "drop_term",
    "format_terms",
    "has_intercept",
    "has_schema",
    "interact",
    "iter_terms",
    "omits_intercept",
    "quote_name",
    "term",
    "term_syms",
    "terms",
    "tilde",
    "union",
    "width",
]
