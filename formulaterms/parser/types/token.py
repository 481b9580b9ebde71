from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple, Union


class Token:
    """
    The atomic unit into which formula strings are split by the tokenizer.

    Attributes:
        token: The string content of the token.
        kind: The kind of token (see `Token.Kind`).
        source: The source string from which the token was extracted.
        source_start: The index of the first character of the token in the
            source string.
        source_end: The index of the last character of the token in the
            source string.
    """

    class Kind(Enum):
        OPERATOR = "operator"
        VALUE = "value"
        NAME = "name"
        CALL = "call"
        CONTEXT = "context"

    __slots__ = ("token", "_kind", "source", "source_start", "source_end")

    def __init__(
        self,
        token: str = "",
        *,
        kind: Optional[Union[str, Kind]] = None,
        source_start: Optional[int] = None,
        source_end: Optional[int] = None,
        source: Optional[str] = None,
    ):
        self.token = token
        self.kind = kind  # type: ignore
        self.source = source
        self.source_start = source_start
        self.source_end = source_end or source_start

    @property
    def kind(self) -> Optional[Token.Kind]:
        return self._kind

    @kind.setter
    def kind(self, kind: Optional[Union[str, Token.Kind]]) -> None:
        self._kind = self.Kind(kind) if kind else None

    def __bool__(self) -> bool:
        return bool(self.token)

    def update(
        self, char: str, source_index: int, kind: Optional[Union[str, Kind]] = None
    ) -> Token:
        self.token += char
        if self.source_start is None:
            self.source_start = source_index
        self.source_end = source_index
        if kind is not None:
            self.kind = kind  # type: ignore
        return self

    def copy_with_attrs(self, **attrs: Any) -> Token:
        """
        Return a copy of this token with the nominated attributes replaced.
        """
        return Token(
            **{
                "token": self.token,
                "kind": self.kind,
                "source": self.source,
                "source_start": self.source_start,
                "source_end": self.source_end,
                **attrs,
            }
        )

    @property
    def is_number(self) -> bool:
        return self.kind is Token.Kind.VALUE

    @property
    def value(self) -> Union[int, float]:
        """
        The numeric value of a `VALUE` token.
        """
        if self.kind is not Token.Kind.VALUE:
            raise ValueError(f"Token `{self.token}` is not a numeric literal.")
        number = float(self.token)
        return int(number) if number.is_integer() and "." not in self.token else number

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, str):
            return self.token == other
        if isinstance(other, Token):
            return self.token == other.token and self.kind == other.kind
        return NotImplemented

    def __hash__(self) -> int:
        return self.token.__hash__()

    @property
    def source_loc(self) -> Tuple[Optional[int], Optional[int]]:
        return (self.source_start, self.source_end)

    def flatten(self, str_args: bool = False) -> Union[str, Token]:
        return str(self) if str_args else self

    def get_source_context(self, colorize: bool = False) -> Optional[str]:
        """
        Render the source string with this token marked by `⧛` and `⧚`, or
        `None` if the token does not know where it came from.

        Args:
            colorize: Whether to highlight the token using ANSI escape codes.
        """
        if not self.source or self.source_start is None or self.source_end is None:
            return None
        if colorize:
            RED_BOLD = "\x1b[1;31m"
            RESET = "\x1b[0m"
            return f"{self.source[:self.source_start]}⧛{RED_BOLD}{self.source[self.source_start:self.source_end+1]}{RESET}⧚{self.source[self.source_end+1:]}"
        return f"{self.source[:self.source_start]}⧛{self.source[self.source_start:self.source_end+1]}⧚{self.source[self.source_end+1:]}"

    def __repr__(self) -> str:
        return self.token
