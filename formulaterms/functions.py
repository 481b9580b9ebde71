import operator
from typing import Any

import numpy


def identity(data: Any) -> Any:
    """
    Performs the identity/trivial transform of mapping data to itself. Use
    `I(...)` to protect arithmetic from formula interpretation.
    """
    return data


def poly(x: Any, degree: int) -> numpy.ndarray:
    """
    Raise `x` to the power of `degree`. Models with the `PolynomialModel`
    context expand `poly(x, degree)` into all powers up to `degree` instead.
    """
    return numpy.power(x, degree)


FUNCTIONS = {
    "np": numpy,
    "log": numpy.log,
    "log10": numpy.log10,
    "log2": numpy.log2,
    "log1p": numpy.log1p,
    "exp": numpy.exp,
    "exp2": numpy.exp2,
    "sqrt": numpy.sqrt,
    "abs": numpy.abs,
    "sin": numpy.sin,
    "cos": numpy.cos,
    "I": identity,
    "identity": identity,
    "poly": poly,
}

# Operators evaluated by the host when they appear in protected contexts (for
# example, inside the arguments of a function call), keyed by symbol and
# arity.
HOST_OPERATORS = {
    ("+", 2): numpy.add,
    ("-", 2): numpy.subtract,
    ("*", 2): numpy.multiply,
    ("/", 2): numpy.true_divide,
    ("^", 2): numpy.power,
    ("&", 2): operator.and_,
    ("-", 1): numpy.negative,
    ("+", 1): numpy.positive,
}
