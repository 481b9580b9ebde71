import pytest

from formulaterms.errors import ResolutionError
from formulaterms.terms import (
    Constant,
    Continuous,
    Intercept,
    Placeholder,
    alias_equal,
    as_term,
    format_terms,
    has_schema,
    quote_name,
    term,
    terms,
    width,
)


class TestPlaceholder:
    @pytest.fixture
    def placeholder(self):
        return Placeholder("a")

    def test_attributes(self, placeholder):
        assert placeholder.name == "a"
        assert placeholder.degree == 1
        assert placeholder.has_schema is False
        assert placeholder.is_matrix_term is True
        assert placeholder.term_syms() == {"a"}

    def test_width(self, placeholder):
        with pytest.raises(
            ResolutionError, match="The width of `a` is unknown until a schema"
        ):
            placeholder.width

    def test_repr(self, placeholder):
        assert repr(placeholder) == "a"
        assert str(placeholder) == "a"
        assert repr(Placeholder("my col")) == "`my col`"

    def test_immutable(self, placeholder):
        with pytest.raises(AttributeError):
            placeholder.name = "b"


class TestConstant:
    def test_attributes(self):
        assert Constant(1).degree == 0
        assert Constant(1).width == 1
        assert Constant(1).has_schema is True
        assert Constant(1).term_syms() == {1}
        assert Constant(0).term_syms() == {0}
        assert repr(Constant(-1)) == "-1"
        assert repr(Constant(1.5)) == "1.5"


class TestIntercept:
    def test_attributes(self):
        assert Intercept().present is True
        assert Intercept(True).width == 1
        assert Intercept(False).width == 0
        assert Intercept(True).degree == 0
        assert Intercept(True).term_syms() == {1}
        assert Intercept(False).term_syms() == set()
        assert repr(Intercept(True)) == "1"
        assert repr(Intercept(False)) == "0"

    def test_alias_equal(self):
        assert Intercept(True).alias_equal(Constant(1))
        assert not Intercept(False).alias_equal(Constant(0))
        assert Intercept(False).alias_equal(Intercept(False))


def test_as_term():
    assert as_term("a") == Placeholder("a")
    assert as_term(1) == Constant(1)
    assert as_term(0.5) == Constant(0.5)
    assert as_term(Placeholder("a")) == Placeholder("a")

    with pytest.raises(TypeError, match="Cannot interpret `True`"):
        as_term(True)
    with pytest.raises(TypeError, match="Cannot interpret `None`"):
        as_term(None)


def test_term_constructors():
    assert term("a") == Placeholder("a")
    assert term(1) == Constant(1)
    assert terms("a", "b", 0) == (Placeholder("a"), Placeholder("b"), Constant(0))
    assert terms() == ()


def test_quote_name():
    assert quote_name("a") == "a"
    assert quote_name("a.b_c1") == "a.b_c1"
    assert quote_name("my col") == "`my col`"
    assert quote_name("a+b") == "`a+b`"
    assert quote_name("1a") == "`1a`"


def test_helpers():
    x = Continuous("x", mean=0, var=1, min=-1, max=1)

    assert alias_equal(term("a") + term("b"), term("b") + term("a"))
    assert alias_equal((term("a"), term("b")), term("a") & term("b"))
    assert not alias_equal(term("a"), term("b"))

    assert has_schema(x)
    assert has_schema((x, Intercept(True)))
    assert not has_schema((x, term("a")))

    assert width((x, Intercept(True), Intercept(False))) == 2
    assert width(x) == 1

    assert format_terms((x, Intercept(True))) == "x + 1"
    assert format_terms(()) == "0"
