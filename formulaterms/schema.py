from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import numpy
import pandas

from formulaterms.contrasts import Contrasts, ContrastsRegistry, TreatmentContrasts
from formulaterms.data import as_columns, column_values, get_column
from formulaterms.errors import ResolutionError
from formulaterms.terms import (
    Categorical,
    Continuous,
    FormulaTerm,
    FunctionCall,
    Group,
    Interaction,
    Placeholder,
    Term,
)


class Schema(Mapping):
    """
    An immutable mapping from variable name to the concrete term (`Continuous`
    or `Categorical`) describing that variable in some data.

    Two schemas are equal if they have the same names and every entry compares
    equal.
    """

    def __init__(self, terms: Optional[Mapping] = None):
        self._terms: Dict[str, Term] = dict(terms or {})

    def __getitem__(self, name: str) -> Term:
        return self._terms[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def update(self, other: Mapping) -> Schema:
        """
        Return a new `Schema` with the entries of `other` added (replacing any
        entries of the same name).
        """
        return Schema({**self._terms, **other})

    def describe(self) -> str:
        return "\n".join(term.describe() for term in self._terms.values())

    def __repr__(self) -> str:
        entries = ", ".join(
            f"{name!r}: {term.describe()}" for name, term in self._terms.items()
        )
        return f"Schema({{{entries}}})"


def schema(
    data: Any,
    hints: Optional[Mapping[str, Any]] = None,
    *,
    terms: Optional[Union[Term, Iterable[Term]]] = None,
) -> Schema:
    """
    Compute the schema of `data`: a concrete term for each of its columns.

    Numeric (and boolean) columns are described by `Continuous` terms
    (storing their mean, sample variance, minimum and maximum), and all other
    columns by `Categorical` terms with `TreatmentContrasts` over their sorted
    levels (pandas categoricals keep the order of their categories).

    Args:
        data: The data to describe (see `as_columns` for supported types).
        hints: An optional mapping from column name to a hint as to how that
            column should be described: a `Contrasts` instance (or the name of
            one in `ContrastsRegistry`), the `Continuous` or `Categorical`
            classes, or a concrete term to be used as is.
        terms: If provided, only the columns referenced by these terms (and
            the hints) are described.
    """
    columns = as_columns(data)
    hints = dict(hints or {})

    if terms is None:
        names = list(columns)
    else:
        names = referenced_names(terms)
    names.extend(name for name in hints if name not in names)

    return Schema(
        {
            name: concrete_term(name, get_column(columns, name), hints.get(name))
            for name in names
        }
    )


def concrete_term(name: str, values: Any, hint: Any = None) -> Term:
    """
    Describe the column `values` (called `name`) as a concrete term.

    Args:
        name: The name of the column.
        values: The values of the column.
        hint: How to describe the column (see `schema`).
    """
    if isinstance(hint, Term):
        if not hint.has_schema:
            raise ResolutionError(
                f"The hint for `{name}` must be a concrete term, not `{hint!r}`."
            )
        return hint
    if isinstance(hint, str):
        hint = ContrastsRegistry.get(hint)()
    if isinstance(hint, type) and issubclass(hint, Contrasts):
        hint = hint()

    if isinstance(hint, Contrasts):
        return Categorical(name, hint.bind(levels(values)))
    if hint is Categorical:
        return Categorical(name, TreatmentContrasts().bind(levels(values)))
    if hint is Continuous:
        return continuous(name, values)
    if hint is not None:
        raise ResolutionError(f"Unknown hint for `{name}`: {hint!r}.")

    if is_numeric(values):
        return continuous(name, values)
    return Categorical(name, TreatmentContrasts().bind(levels(values)))


def is_numeric(values: Any) -> bool:
    if not isinstance(values, (pandas.Series, pandas.Categorical, numpy.ndarray)):
        values = numpy.asarray(values)
    return pandas.api.types.is_numeric_dtype(values)


def continuous(name: str, values: Any) -> Continuous:
    try:
        series = pandas.Series(column_values(values), dtype=float)
    except (TypeError, ValueError) as e:
        raise ResolutionError(
            f"Column `{name}` cannot be treated as continuous: {e}"
        ) from e
    return Continuous(
        name,
        mean=float(series.mean()),
        var=float(series.var(ddof=1)),
        min=float(series.min()),
        max=float(series.max()),
    )


def levels(values: Any) -> List[Any]:
    """
    The levels of a categorical column: the categories of pandas categoricals,
    or else the distinct values, sorted where they can be (and otherwise in
    order of first appearance).
    """
    if isinstance(values, pandas.Categorical):
        return list(values.categories)
    if isinstance(values, pandas.Series) and isinstance(
        values.dtype, pandas.CategoricalDtype
    ):
        return list(values.cat.categories)
    distinct = pandas.unique(pandas.Series(column_values(values), dtype=object)).tolist()
    try:
        return sorted(distinct)
    except TypeError:
        return distinct


def referenced_names(terms: Union[Term, Iterable[Term]]) -> List[str]:
    """
    The names of the variables referenced anywhere in `terms`, in order of
    first reference.
    """
    names: List[str] = []

    def visit(term: Any) -> None:
        if isinstance(term, (tuple, list)):
            for member in term:
                visit(member)
        elif isinstance(term, FormulaTerm):
            visit(term.lhs)
            visit(term.rhs)
        elif isinstance(term, (Group, Interaction)):
            visit(term.terms)
        elif isinstance(term, FunctionCall):
            visit(term.args)
        elif isinstance(term, (Placeholder, Continuous, Categorical)):
            if term.name not in names:
                names.append(term.name)
        elif hasattr(term, "term"):
            visit(term.term)

    visit(terms)
    return names
