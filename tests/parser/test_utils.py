import pytest

from formulaterms.errors import FormulaSyntaxError, ResolutionError
from formulaterms.parser.types import ASTNode, Token
from formulaterms.parser.utils import exc_for_missing_operator, exc_for_token

SOURCE = "y ~ a b"


@pytest.fixture
def tokens():
    return [
        Token("a", kind="name", source=SOURCE, source_start=4, source_end=4),
        Token("b", kind="name", source=SOURCE, source_start=6, source_end=6),
    ]


def test_exc_for_token(tokens):
    with pytest.raises(FormulaSyntaxError, match="Hello World"):
        raise exc_for_token(Token("1", kind="value"), "Hello World")

    exc = exc_for_token(tokens[0], "Hello World")
    assert isinstance(exc, FormulaSyntaxError)
    assert str(exc) == "Hello World\n\ny ~ ⧛\x1b[1;31ma\x1b[0m⧚ b"

    assert isinstance(
        exc_for_token(tokens[0], "Hello World", errcls=ResolutionError),
        ResolutionError,
    )


def test_exc_for_ast_node(tokens):
    exc = exc_for_token(ASTNode("+", tokens), "Hello World")
    assert str(exc) == "Hello World\n\ny ~ ⧛\x1b[1;31ma b\x1b[0m⧚"


def test_exc_for_missing_operator(tokens):
    exc = exc_for_missing_operator(*tokens)
    assert str(exc).startswith("Missing operator between `a` and `b`.")
    assert "⧛\x1b[1;31ma b\x1b[0m⧚" in str(exc)

    exc = exc_for_missing_operator(*tokens, extra="Extra information.")
    assert str(exc).startswith(
        "Missing operator between `a` and `b`. Extra information."
    )
