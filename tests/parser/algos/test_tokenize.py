import re

import pytest

from formulaterms.errors import FormulaSyntaxError
from formulaterms.parser.algos.tokenize import tokenize

TOKEN_TESTS = {
    "": [],
    "a": ["name:a"],
    "a+b": ["name:a", "operator:+", "name:b"],
    "a + b": ["name:a", "operator:+", "name:b"],
    "y ~ a & b": ["name:y", "operator:~", "name:a", "operator:&", "name:b"],
    "a * (b + c)": [
        "name:a",
        "operator:*",
        "context:(",
        "name:b",
        "operator:+",
        "name:c",
        "context:)",
    ],
    "1 + 1.5 + -1": [
        "value:1",
        "operator:+",
        "value:1.5",
        "operator:+",
        "operator:-",
        "value:1",
    ],
    "x1 + x_2 + a.b": ["name:x1", "operator:+", "name:x_2", "operator:+", "name:a.b"],
    "log(x)": ["call:log", "context:(", "name:x", "context:)"],
    "np.log(x)": ["call:np.log", "context:(", "name:x", "context:)"],
    "f(a, 2)": [
        "call:f",
        "context:(",
        "name:a",
        "context:,",
        "value:2",
        "context:)",
    ],
    "log (x)": ["name:log", "context:(", "name:x", "context:)"],
    "`my col` + b": ["name:my col", "operator:+", "name:b"],
    "`a+b`(x)": ["name:a+b", "context:(", "name:x", "context:)"],
    "a^2": ["name:a", "operator:^", "value:2"],
    "a--b": ["name:a", "operator:-", "operator:-", "name:b"],
}

TOKEN_ERRORS = {
    'a + "hello"': [FormulaSyntaxError, "String literals are not valid in formulae."],
    "a + 'b'": [FormulaSyntaxError, "String literals are not valid in formulae."],
    "`a": [
        FormulaSyntaxError,
        "Formula ended before quote context was closed. Expected: `",
    ],
}


@pytest.mark.parametrize("formula,tokens", TOKEN_TESTS.items())
def test_tokenize(formula, tokens):
    assert [
        f"{token.kind.value}:{token.token}" for token in tokenize(formula)
    ] == tokens


@pytest.mark.parametrize("formula,exception_info", TOKEN_ERRORS.items())
def test_tokenize_exceptions(formula, exception_info):
    with pytest.raises(exception_info[0], match=re.escape(exception_info[1])):
        list(tokenize(formula))


def test_token_source_locations():
    tokens = list(tokenize("a + log(bb)"))
    assert [token.source_loc for token in tokens] == [
        (0, 0),
        (2, 2),
        (4, 6),
        (7, 7),
        (8, 9),
        (10, 10),
    ]
    assert all(token.source == "a + log(bb)" for token in tokens)
