import re
from typing import Iterable, List, Pattern

from ..types import Token
from ..utils import exc_for_token


def tokenize(
    formula: str,
    word_chars: Pattern = re.compile(r"[\.\_\w]"),
    numeric_chars: Pattern = re.compile(r"[0-9\.]"),
    whitespace_chars: Pattern = re.compile(r"\s"),
) -> Iterable[Token]:
    """
    Convert a formula string into a generator of tokens.

    This tokenizer is intentionally very simple, and it makes no attempt to
    validate incoming tokens beyond ensuring that they are complete. Changes
    like adding support for a new operator therefore do not require changes to
    this tokenizer, and can be done entirely within the operator resolver.

    Tokens outputted will have one of five kinds:
      - operator: a single non-word character to be applied to other
            surrounding tokens.
      - name: a name of a variable to be lifted from the data.
      - value: a numeric literal.
      - call: the name of a function immediately followed by `(`.
      - context: one of `(`, `)` and the argument separator `,`.

    The basic logic of this tokenizer is to loop over each character in the
    formula string and:
      - group portions quoted by backticks into a single name token (allowing
        arbitrary column names).
      - ignore unquoted whitespace.
      - distinguish uses of `(` as a grouping operator from function calls.
      - output each contiguous portion of the formula string that belongs to
        the same token type as a token.

    Args:
        formula: The formula string to tokenize.
        word_chars: The regex pattern used to recognize "word" characters
            (basically non-operator characters).
        numeric_chars: The regex pattern used to recognize numeric characters.
        whitespace_chars: The regex pattern use to recognize (ignored)
            whitespace characters.

    Returns:
        A generator over the tokens found in the formula string.
    """
    quote_context: List[str] = []

    token = Token(source=formula)

    for i, char in enumerate(formula):
        if quote_context:
            if char == quote_context[-1]:
                quote_context.pop(-1)
                yield token
                token = Token(source=formula)
            else:
                token.update(char, i)
            continue

        if char == "`":
            if token:
                yield token
            token = Token(source=formula, kind="name", source_start=i)
            quote_context.append("`")
            continue
        if char == "(":
            if token.kind is Token.Kind.NAME:
                token.kind = Token.Kind.CALL
                yield token
            elif token:
                yield token
            token = Token(source=formula)
            yield Token(source=formula).update(char, i, kind="context")
            continue
        if char in "),":
            if token:
                yield token
                token = Token(source=formula)
            yield Token(source=formula).update(char, i, kind="context")
            continue

        if whitespace_chars.match(char):
            if token:
                yield token
                token = Token(source=formula)
            continue

        if char in ('"', "'"):
            raise exc_for_token(
                Token(source=formula, source_start=i, source_end=i),
                "String literals are not valid in formulae.",
            )

        if word_chars.match(char):
            if token and token.kind is Token.Kind.OPERATOR:
                yield token
                token = Token(source=formula)
            if numeric_chars.match(char) and token.kind in (None, Token.Kind.VALUE):
                kind = "value"
            else:
                kind = "name"
            token.update(char, i, kind=kind)
            continue

        # Operators are always single characters.
        if token:
            yield token
        yield Token(source=formula).update(char, i, kind="operator")
        token = Token(source=formula)

    if quote_context:
        raise exc_for_token(
            token,
            message=f"Formula ended before quote context was closed. Expected: {quote_context[-1]}",
        )
    if token:
        yield token
