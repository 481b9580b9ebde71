from __future__ import annotations

import re
from numbers import Number
from typing import Any, FrozenSet, Iterable, Tuple, Union

from formulaterms.errors import ResolutionError

NAME_PATTERN = re.compile(r"^[\.\_\w]+$")


def quote_name(name: str) -> str:
    """
    Render a variable name such that it is tokenized back into a single name
    (wrapping it in backticks when it contains non-word characters).
    """
    if NAME_PATTERN.match(name) and not name[0].isdigit():
        return name
    return f"`{name}`"


class Term:
    """
    The base class for all nodes of a (resolved or unresolved) formula term
    tree.

    Terms are immutable. They can be combined using `+` (union) and `&`
    (interaction); `tilde()` pairs a response with its predictors. Integers
    and strings are promoted to `Constant` and `Placeholder` terms
    respectively when used as operands.
    """

    # Whether this term can be concatenated with others into a single matrix.
    is_matrix_term: bool = True

    @property
    def degree(self) -> int:
        return 1

    @property
    def width(self) -> int:
        raise ResolutionError(
            f"The width of `{self!r}` is unknown until a schema has been applied."
        )

    @property
    def has_schema(self) -> bool:
        return False

    def term_syms(self) -> FrozenSet[Any]:
        """
        The symbols used to decide whether two terms alias one another: the
        names of the variables they reference, `1` for a present intercept,
        and the source text of function calls.
        """
        raise NotImplementedError  # pragma: no cover

    def alias_equal(self, other: Term) -> bool:
        return self.term_syms() == as_term(other).term_syms()

    def describe(self) -> str:
        return repr(self)

    # Algebra

    def __add__(self, other: Any) -> Term:
        from .group import union

        return union(self, as_term(other))

    def __radd__(self, other: Any) -> Term:
        from .group import union

        return union(as_term(other), self)

    def __and__(self, other: Any) -> Term:
        from .interaction import interact

        return interact(self, as_term(other))

    def __rand__(self, other: Any) -> Term:
        from .interaction import interact

        return interact(as_term(other), self)

    def __str__(self) -> str:
        return repr(self)


TermOrTerms = Union[Term, Tuple[Term, ...]]


def as_term(value: Any) -> Term:
    """
    Promote `value` to a `Term`: strings become `Placeholder`s and numbers
    become `Constant`s.
    """
    from .basic import Constant, Placeholder

    if isinstance(value, Term):
        return value
    if isinstance(value, str):
        return Placeholder(value)
    if isinstance(value, Number) and not isinstance(value, bool):
        return Constant(value)
    raise TypeError(f"Cannot interpret `{value!r}` of type {type(value)} as a term.")


def iter_terms(terms: Union[Term, Iterable[Term]]) -> Tuple[Term, ...]:
    """
    Return the members of a union (or tuple of terms) as a tuple; other terms
    are returned as a tuple of one.
    """
    from .group import Group

    if isinstance(terms, Group):
        return terms.terms
    if isinstance(terms, (tuple, list)):
        return tuple(terms)
    return (terms,)


def term_syms(terms: Union[Term, Iterable[Term]]) -> FrozenSet[Any]:
    return frozenset().union(*(term.term_syms() for term in iter_terms(terms)))


def alias_equal(a: Union[Term, Iterable[Term]], b: Union[Term, Iterable[Term]]) -> bool:
    """
    Whether `a` and `b` reference the same set of variables (and agree on the
    presence of an intercept), regardless of their surface form.
    """
    return term_syms(a) == term_syms(b)


def has_schema(terms: Union[Term, Iterable[Term]]) -> bool:
    return all(term.has_schema for term in iter_terms(terms))


def width(terms: Union[Term, Iterable[Term]]) -> int:
    return sum(term.width for term in iter_terms(terms))


def format_terms(terms: Union[Term, Iterable[Term]]) -> str:
    members = iter_terms(terms)
    if not members:
        return "0"
    return " + ".join(repr(term) for term in members)
