import re

import numpy
import pytest

from formulaterms.errors import FormulaSyntaxError
from formulaterms.parser import DefaultFormulaParser, parse_formula
from formulaterms.terms import (
    Constant,
    FormulaTerm,
    FunctionCall,
    Group,
    Interaction,
    Placeholder,
)

PARSER_TESTS = {
    "y ~ a": "y ~ a",
    "y ~ a + b": "y ~ a + b",
    "y ~ a + a": "y ~ a",
    "y ~ a * b": "y ~ a + b + a & b",
    "y ~ a * b * c": "y ~ a + b + c + a & b + a & c + b & c + a & b & c",
    "y ~ (a + b) & c": "y ~ a & c + b & c",
    "y ~ a & b + b & a": "y ~ a & b",
    "y ~ 1 + a": "y ~ 1 + a",
    "y ~ a - 1": "y ~ -1 + a",
    "y ~ 0 + a": "y ~ 0 + a",
    "y ~ 0": "y ~ 0",
    "y1 + y2 ~ x": "y1 + y2 ~ x",
    "y ~ `my col` + b": "y ~ `my col` + b",
    "y ~ log(x)": "y ~ log(x)",
    "y ~ log(x + 1)": "y ~ log(x + 1)",
    "y ~ x / z": "y ~ x / z",
    "y ~ -x": "y ~ -x",
    "y ~ x ^ 2": "y ~ x ^ 2",
    "y ~ a & log(x)": "y ~ a & log(x)",
    "y ~ np.log(x)": "y ~ np.log(x)",
    "y ~ log(unprotect(a + b))": "y ~ log(unprotect(a + b))",
}

PARSER_ERRORS = {
    "": "Formulae must have a response and predictors separated by a top-level `~`",
    "a + b": "Formulae must have a response and predictors separated by a top-level `~`",
    "y ~ ": "Operator `~` has insuffient arguments and/or is misplaced.",
    "y ~ a ~ b": "Operator `~` is incorrectly used.",
    "y ~ a - b": "Subtraction is only supported for removing the intercept (`- 1`).",
    "y ~ 2 + x": "Numeric literal `2` is not valid here",
}


class TestDefaultFormulaParser:
    @pytest.fixture
    def parser(self):
        return DefaultFormulaParser()

    @pytest.mark.parametrize("formula,expected", PARSER_TESTS.items())
    def test_to_terms(self, parser, formula, expected):
        terms = parser.get_terms(formula)
        assert isinstance(terms, FormulaTerm)
        assert repr(terms) == expected

    @pytest.mark.parametrize("formula", PARSER_TESTS)
    def test_display_form_round_trips(self, parser, formula):
        terms = parser.get_terms(formula)
        assert parser.get_terms(repr(terms)) == terms

    @pytest.mark.parametrize("formula,message", PARSER_ERRORS.items())
    def test_invalid_formulae(self, parser, formula, message):
        with pytest.raises(FormulaSyntaxError, match=re.escape(message)):
            parser.get_terms(formula)

    def test_term_structure(self, parser):
        terms = parser.get_terms("y ~ 1 + a * b + log(x + 1)")
        assert terms.lhs == Placeholder("y")
        assert terms.rhs == Group(
            (
                Constant(1),
                Placeholder("a"),
                Placeholder("b"),
                FunctionCall(
                    "log",
                    (
                        FunctionCall(
                            "+", (Placeholder("x"), Constant(1)), expr="x + 1"
                        ),
                    ),
                    expr="log(x + 1)",
                ),
                Interaction((Placeholder("a"), Placeholder("b"))),
            )
        )

    def test_evaluators(self, parser):
        assert parser.get_terms("y ~ log(x)").rhs.evaluator is numpy.log
        assert parser.get_terms("y ~ np.log(x)").rhs.evaluator is numpy.log
        assert parser.get_terms("y ~ x / z").rhs.evaluator is numpy.true_divide
        assert parser.get_terms("y ~ -x").rhs.evaluator is numpy.negative
        assert parser.get_terms("y ~ log(x + 1)").rhs.args[0].evaluator is numpy.add
        assert parser.get_terms("y ~ missing(x)").rhs.evaluator is None
        assert parser.get_terms("y ~ np.missing(x)").rhs.evaluator is None


def test_parse_formula():
    def local_function(x):
        return x

    assert parse_formula("y ~ a + b") == DefaultFormulaParser().get_terms("y ~ a + b")
    assert parse_formula("y ~ local_function(x)").rhs.evaluator is local_function
    assert (
        parse_formula("y ~ local_function(x)", context={}).rhs.evaluator is None
    )
    assert (
        parse_formula("y ~ f(x)", context={"f": local_function}).rhs.evaluator
        is local_function
    )

    def nested():
        return parse_formula("y ~ local_function(x)", context=1)

    assert nested().rhs.evaluator is local_function
