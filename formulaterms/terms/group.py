from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Iterator, List, Tuple, Union

from .base import Term, as_term, iter_terms


@dataclass(frozen=True, repr=False)
class Group(Term):
    """
    A union of terms (the result of `+`).

    Groups are flattened on construction, and members that alias an earlier
    member are dropped, so that the first occurrence of each term is kept in
    order.
    """

    terms: Tuple[Term, ...]

    def __post_init__(self) -> None:
        members: List[Term] = []
        for term in self.terms:
            term = as_term(term)
            for member in term.terms if isinstance(term, Group) else (term,):
                if not any(member.alias_equal(seen) for seen in members):
                    members.append(member)
        object.__setattr__(self, "terms", tuple(members))

    @property
    def degree(self) -> int:
        return max((term.degree for term in self.terms), default=0)

    @property
    def width(self) -> int:
        return sum(term.width for term in self.terms)

    @property
    def has_schema(self) -> bool:
        return all(term.has_schema for term in self.terms)

    def term_syms(self) -> FrozenSet[Any]:
        return frozenset().union(*(term.term_syms() for term in self.terms))

    def describe(self) -> str:
        return " + ".join(term.describe() for term in self.terms)

    def __iter__(self) -> Iterator[Term]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __getitem__(self, index: int) -> Term:
        return self.terms[index]

    def __repr__(self) -> str:
        return " + ".join(repr(term) for term in self.terms) or "0"


@dataclass(frozen=True, repr=False)
class MatrixGroup(Group):
    """
    A block of resolved terms whose columns are concatenated into one
    contiguous matrix.
    """

    is_matrix_term = False


def union(*terms: Any) -> Term:
    """
    The union of the nominated terms; a union of a single term is that term.
    """
    group = Group(tuple(as_term(term) for term in terms))
    if len(group.terms) == 1:
        return group.terms[0]
    return group


def collect_matrix_terms(
    terms: Union[Term, Iterable[Term]]
) -> Union[Term, Tuple[Term, ...]]:
    """
    Gather the terms that can be concatenated into a single matrix into a
    `MatrixGroup`.

    If all of the nominated terms are matrix terms, a single `MatrixGroup` is
    returned. If only some of them are, a tuple is returned whose first
    element is the `MatrixGroup` and whose remaining elements are the other
    terms, in order. If none of them are, the terms are returned unchanged.
    """
    if isinstance(terms, Term) and not isinstance(terms, Group):
        return MatrixGroup((terms,)) if terms.is_matrix_term else terms
    members = iter_terms(terms)
    matrix_terms = tuple(term for term in members if term.is_matrix_term)
    if len(matrix_terms) == len(members):
        return MatrixGroup(matrix_terms)
    if not matrix_terms:
        return members
    return (
        MatrixGroup(matrix_terms),
        *(term for term in members if not term.is_matrix_term),
    )
