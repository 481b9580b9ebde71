import itertools
import re

import numpy
import pandas
import pytest

from formulaterms.columns import (
    coef_names,
    kron_insideout,
    model_cols,
    model_cols_with_assign,
    model_row,
    row_kron_insideout,
)
from formulaterms.data import iter_rows
from formulaterms.errors import (
    CodingError,
    ColumnNotFoundError,
    FormulaMaterializationError,
)
from formulaterms.model_context import StatisticalModel
from formulaterms.parser import parse_formula
from formulaterms.resolve import apply_schema
from formulaterms.schema import schema
from formulaterms.terms import (
    Constant,
    FunctionCall,
    Intercept,
    Interaction,
    Placeholder,
)

DATA = pandas.DataFrame(
    {
        "y": [0.5, 1.5, 2.5, 3.5],
        "x": [1.0, 2.0, 3.0, 4.0],
        "a": ["p", "q", "p", "q"],
        "b": ["p", "p", "q", "q"],
        "c": ["u", "v", "w", "u"],
        "my var": [10, 20, 30, 40],
    }
)

SCHEMA = schema(DATA)

WIDTH_FORMULAE = [
    "y ~ 1",
    "y ~ 0 + x",
    "y ~ a",
    "y ~ 0 + a",
    "y ~ a*b",
    "y ~ a*b*c",
    "y ~ 0 + a&b&c",
    "y ~ x + a&x + log(x)",
    "y ~ a + b&c + `my var`",
]


def resolve(formula, data=DATA, model=StatisticalModel, hints=None):
    return apply_schema(parse_formula(formula), schema(data, hints), model)


def nested_loop_kron(*matrices):
    n = matrices[0].shape[0]
    columns = []
    for indices in itertools.product(*(range(m.shape[1]) for m in reversed(matrices))):
        column = numpy.ones(n)
        for matrix, i in zip(reversed(matrices), indices):
            column = column * matrix[:, i]
        columns.append(column)
    return numpy.column_stack(columns)


class TestKron:
    def test_kron_insideout(self):
        assert list(kron_insideout([1, 2], [10, 100])) == [10, 20, 100, 200]
        assert list(kron_insideout([1, 2])) == [1, 2]
        assert list(kron_insideout([1, 2], [1], [3, 5])) == [3, 6, 5, 10]

    def test_row_kron_insideout(self):
        random = numpy.random.RandomState(42)
        matrices = [random.normal(size=(5, k)) for k in (2, 3, 2)]
        assert row_kron_insideout(*matrices).shape == (5, 12)
        assert numpy.allclose(
            row_kron_insideout(*matrices), nested_loop_kron(*matrices)
        )
        assert numpy.allclose(row_kron_insideout(matrices[0]), matrices[0])

    def test_rows_match_kron_insideout(self):
        random = numpy.random.RandomState(0)
        matrices = [random.normal(size=(3, k)) for k in (3, 2)]
        product = row_kron_insideout(*matrices)
        for i in range(3):
            assert numpy.allclose(
                product[i], kron_insideout(*(m[i] for m in matrices))
            )


class TestModelCols:
    def test_leaves(self):
        x = model_cols(SCHEMA["x"], DATA)
        assert x.shape == (4, 1)
        assert x.dtype == float
        assert list(x[:, 0]) == [1.0, 2.0, 3.0, 4.0]

        a = model_cols(SCHEMA["a"], DATA)
        assert a.tolist() == [[0.0], [1.0], [0.0], [1.0]]
        assert model_cols(SCHEMA["a"].full_rank(), DATA).tolist() == [
            [1.0, 0.0],
            [0.0, 1.0],
            [1.0, 0.0],
            [0.0, 1.0],
        ]

        assert model_cols(Intercept(True), DATA).tolist() == [[1.0]] * 4
        assert model_cols(Intercept(False), DATA).shape == (4, 0)
        assert model_cols(Constant(2), DATA).tolist() == [[2.0]] * 4

    def test_interactions(self):
        columns = model_cols(
            Interaction((SCHEMA["a"].full_rank(), SCHEMA["x"])), DATA
        )
        assert columns.tolist() == [
            [1.0, 0.0],
            [0.0, 2.0],
            [3.0, 0.0],
            [0.0, 4.0],
        ]

        columns = model_cols(
            Interaction((SCHEMA["a"].full_rank(), SCHEMA["b"].full_rank())), DATA
        )
        assert columns.tolist() == [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]

    @pytest.mark.parametrize("formula", WIDTH_FORMULAE)
    def test_width(self, formula):
        term = resolve(formula)
        lhs, rhs = model_cols(term, DATA)
        assert lhs.shape == (4, term.lhs.width)
        assert rhs.shape == (4, term.rhs.width)
        assert len(coef_names(term.rhs)) == term.rhs.width

    def test_formula(self):
        lhs, rhs = model_cols(resolve("y ~ a + x"), DATA)
        assert lhs.tolist() == [[0.5], [1.5], [2.5], [3.5]]
        assert rhs.tolist() == [
            [1.0, 0.0, 1.0],
            [1.0, 1.0, 2.0],
            [1.0, 0.0, 3.0],
            [1.0, 1.0, 4.0],
        ]

    def test_contrasts(self):
        _, rhs = model_cols(resolve("y ~ a", hints={"a": "sum"}), DATA)
        assert rhs[:, 1].tolist() == [1.0, -1.0, 1.0, -1.0]

    def test_function_calls(self):
        _, rhs = model_cols(resolve("y ~ log(x + 2)"), DATA)
        assert numpy.allclose(rhs[:, 1], numpy.log(DATA["x"] + 2))

        _, rhs = model_cols(resolve("y ~ 0 + I(x ^ 2)"), DATA)
        assert rhs[:, 0].tolist() == [1.0, 4.0, 9.0, 16.0]

    def test_new_data(self):
        term = resolve("y ~ a + x")
        _, rhs = model_cols(term, {"y": [0.0, 0.0], "a": ["q", "q"], "x": [7, 8]})
        assert rhs.tolist() == [[1.0, 1.0, 7.0], [1.0, 1.0, 8.0]]

        records = numpy.array(
            [(1.0, "p", 2.0)], dtype=[("y", float), ("a", "U1"), ("x", float)]
        )
        _, rhs = model_cols(term, records)
        assert rhs.tolist() == [[1.0, 0.0, 2.0]]

    def test_tuples(self):
        x, a = model_cols((SCHEMA["x"], SCHEMA["a"]), DATA)
        assert x.shape == (4, 1)
        assert a.shape == (4, 1)

    def test_assign(self):
        term = resolve("y ~ a + x + a&b")
        values, assign = model_cols_with_assign(term.rhs, DATA)
        assert values.shape == (4, 5)
        assert assign.tolist() == [0, 1, 2, 3, 3]

        values, assign = model_cols_with_assign(SCHEMA["c"], DATA)
        assert values.shape == (4, 2)
        assert assign.tolist() == [0, 0]

    def test_errors(self):
        with pytest.raises(
            CodingError,
            match=re.escape("There are levels in data that are not in the contrasts: 'r'."),
        ):
            model_cols(SCHEMA["a"], {"a": ["p", "r"]})

        with pytest.raises(
            ColumnNotFoundError, match="There isn't a variable called 'x' in your data"
        ):
            model_cols(SCHEMA["x"], {"xx": [1.0]})

        with pytest.raises(
            FormulaMaterializationError,
            match="Values of `x` could not be interpreted as numbers",
        ):
            model_cols(SCHEMA["x"], {"x": ["one", "two"]})

        with pytest.raises(
            FormulaMaterializationError, match="has a schema been applied?"
        ):
            model_cols(Placeholder("x"), DATA)

    def test_function_call_errors(self):
        def explode(values):
            raise ValueError("boom")

        term = apply_schema(
            parse_formula(
                "y ~ total(x) + explode(x)",
                context={"total": numpy.sum, "explode": explode},
            ),
            SCHEMA,
        )
        total, exploding = term.rhs

        with pytest.raises(
            FormulaMaterializationError,
            match=re.escape("`total(x)` must evaluate to one value per row (4)"),
        ):
            model_cols(total, DATA)

        with pytest.raises(
            FormulaMaterializationError,
            match=re.escape("Unable to evaluate `explode(x)`: boom"),
        ):
            model_cols(exploding, DATA)

        with pytest.raises(
            FormulaMaterializationError,
            match=re.escape("No function is available to evaluate `f(x)`."),
        ):
            model_cols(FunctionCall("f", (SCHEMA["x"],), "f(x)"), DATA)


class TestModelRow:
    def test_rows_match_columns(self):
        term = resolve("y ~ a*b + x + log(x) + c&x")
        columns = model_cols(term.rhs, DATA)
        for i, row in enumerate(iter_rows(DATA)):
            values = model_row(term.rhs, row)
            assert values.shape == (term.rhs.width,)
            assert numpy.allclose(values, columns[i])

    def test_formula(self):
        term = resolve("y ~ a")
        lhs, rhs = model_row(term, {"y": 3.0, "a": "q"})
        assert lhs.tolist() == [3.0]
        assert rhs.tolist() == [1.0, 1.0]

        x, a = model_row((SCHEMA["x"], SCHEMA["a"]), {"x": 2.0, "a": "p"})
        assert x.tolist() == [2.0]
        assert a.tolist() == [0.0]

    def test_unknown_level(self):
        with pytest.raises(CodingError):
            model_row(SCHEMA["a"], {"a": "z"})


class TestCoefNames:
    def test_names(self):
        term = resolve("y ~ a + x + a&b + log(x) + `my var`")
        assert coef_names(term.lhs) == ["y"]
        assert coef_names(term.rhs) == [
            "(Intercept)",
            "a: q",
            "x",
            "log(x)",
            "`my var`",
            "a: p & b: q",
            "a: q & b: q",
        ]
        assert coef_names(term) == (["y"], coef_names(term.rhs))

    def test_intercepts(self):
        assert coef_names(Intercept(True)) == ["(Intercept)"]
        assert coef_names(Intercept(False)) == []
        assert coef_names(resolve("y ~ 0 + a").rhs) == ["a: p", "a: q"]

    def test_tuples(self):
        assert coef_names((SCHEMA["x"], SCHEMA["c"])) == (["x"], ["c: v", "c: w"])

    def test_order_matches_columns(self):
        term = Interaction((SCHEMA["a"].full_rank(), SCHEMA["c"]))
        names = coef_names(term)
        columns = model_cols(term, DATA)
        assert names == [
            "a: p & c: v",
            "a: q & c: v",
            "a: p & c: w",
            "a: q & c: w",
        ]
        # Row 1 has a = q and c = v.
        assert columns[1].tolist() == [0.0, 1.0, 0.0, 0.0]

