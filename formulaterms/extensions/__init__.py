from .poly import PolynomialModel, PolynomialTerm

__all__ = [
    "PolynomialModel",
    "PolynomialTerm",
]
