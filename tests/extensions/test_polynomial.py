import pandas
import pytest

from formulaterms import apply_schema, model_matrix, model_row, parse_formula, schema
from formulaterms.errors import ResolutionError
from formulaterms.extensions import PolynomialModel, PolynomialTerm
from formulaterms.model_context import StatisticalModel
from formulaterms.terms import Continuous


@pytest.fixture
def data():
    return pandas.DataFrame({"y": [0.0, 1.0, 0.0], "x": [1.0, 2.0, 3.0]})


class TestPolynomialTerm:
    @pytest.fixture
    def term(self):
        return PolynomialTerm(Continuous("x", mean=2.0, var=1.0, min=1.0, max=3.0), 3)

    def test_attributes(self, term):
        assert term.width == 3
        assert term.degree == 1
        assert term.has_schema
        assert repr(term) == "poly(x, 3)"
        assert term.describe() == "poly(x, 3) (polynomial of degree 3)"
        assert term.alias_equal(
            PolynomialTerm(Continuous("x", mean=0.0, var=0.0, min=0.0, max=0.0), 3)
        )
        assert not term.alias_equal(term.term)

    def test_row(self, term):
        assert model_row(term, {"x": 2.0}).tolist() == [2.0, 4.0, 8.0]


class TestPolynomialModel:
    def test_resolution(self, data):
        resolved = apply_schema(
            parse_formula("y ~ poly(x, 2)"), schema(data), PolynomialModel
        )
        _, poly = resolved.rhs
        assert poly == PolynomialTerm(schema(data)["x"], 2)
        assert resolved.rhs.width == 3

        # Resolution is idempotent.
        assert apply_schema(resolved, schema(data), PolynomialModel) == resolved

    def test_model_matrix(self, data):
        _, rhs = model_matrix("y ~ poly(x, 3)", data, model=PolynomialModel)
        assert list(rhs.columns) == ["(Intercept)", "x^1", "x^2", "x^3"]
        assert rhs.values.tolist() == [
            [1.0, 1.0, 1.0, 1.0],
            [1.0, 2.0, 4.0, 8.0],
            [1.0, 3.0, 9.0, 27.0],
        ]
        assert rhs.assign.tolist() == [0, 1, 1, 1]

    def test_other_models(self, data):
        _, rhs = model_matrix("y ~ poly(x, 3)", data, model=StatisticalModel)
        assert list(rhs.columns) == ["(Intercept)", "poly(x, 3)"]
        assert list(rhs["poly(x, 3)"]) == [1.0, 8.0, 27.0]

    def test_protected_calls(self, data):
        _, rhs = model_matrix("y ~ log(poly(x, 2))", data, model=PolynomialModel)
        assert list(rhs.columns) == ["(Intercept)", "log(poly(x, 2))"]

    @pytest.mark.parametrize(
        "formula,message",
        [
            ("y ~ poly(x)", "`poly` takes a term and a degree, but got 1 arguments"),
            ("y ~ poly(x, 1, 2)", "but got 3 arguments"),
            ("y ~ poly(x, 0)", "must be a positive integer, not `0`"),
            ("y ~ poly(x, 1.5)", "must be a positive integer, not `1.5`"),
            ("y ~ poly(x, y)", "must be a positive integer, not `y`"),
        ],
    )
    def test_invalid(self, data, formula, message):
        with pytest.raises(ResolutionError, match=message):
            model_matrix(formula, data, model=PolynomialModel)

    @pytest.mark.parametrize("levels", [["p", "q", "p"], ["p", "q", "r"]])
    def test_categorical(self, data, levels):
        data["g"] = levels
        with pytest.raises(
            ResolutionError, match="`poly` can only expand a single numeric column"
        ):
            model_matrix("y ~ poly(g, 2)", data, model=PolynomialModel)

    def test_function_call_argument(self, data):
        _, rhs = model_matrix("y ~ poly(log(x), 2)", data, model=PolynomialModel)
        assert list(rhs.columns) == ["(Intercept)", "log(x)^1", "log(x)^2"]
