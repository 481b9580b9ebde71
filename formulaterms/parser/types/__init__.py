from .ast_node import ASTNode, format_expr
from .formula_parser import FormulaParser
from .operator import Operator
from .operator_resolver import OperatorResolver
from .token import Token

__all__ = [
    "ASTNode",
    "FormulaParser",
    "Operator",
    "OperatorResolver",
    "Token",
    "format_expr",
]
