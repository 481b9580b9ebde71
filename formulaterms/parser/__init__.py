from .parser import DefaultFormulaParser, DefaultOperatorResolver, parse_formula

__all__ = [
    "DefaultFormulaParser",
    "DefaultOperatorResolver",
    "parse_formula",
]
