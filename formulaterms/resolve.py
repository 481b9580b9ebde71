from __future__ import annotations

import functools
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

from formulaterms.errors import (
    ColumnNotFoundError,
    InterceptForbiddenError,
    ResolutionError,
    SchemaMismatchError,
)
from formulaterms.functions import FUNCTIONS
from formulaterms.model_context import (
    ModelContext,
    as_context_type,
    drop_intercept,
    implicit_intercept,
)
from formulaterms.terms import (
    Categorical,
    Constant,
    Continuous,
    FormulaTerm,
    FunctionCall,
    Group,
    Intercept,
    Interaction,
    MatrixGroup,
    Placeholder,
    Term,
    collect_matrix_terms,
    drop_term,
    has_intercept,
    iter_terms,
    omits_intercept,
    union,
)
from formulaterms.utils.fuzzy import format_suggestions, fuzzy_match

CallHandler = Callable[[FunctionCall, Mapping[str, Term], "ResolutionContext"], Term]

CALL_HANDLERS: Dict[Tuple[str, Type], CallHandler] = {}


def register_call_handler(
    head: str, context: Type = ModelContext, handler: Optional[CallHandler] = None
) -> Any:
    """
    Register a custom resolution for calls to the function `head` when
    resolving for the model context `context` (or any of its subclasses).

    The handler is called with the (unresolved) `FunctionCall`, the schema and
    the active `ResolutionContext`, and should return a resolved term. It can
    be used as a decorator:

        @register_call_handler("poly", PolynomialModel)
        def resolve_poly(call, schema, context):
            ...

    Handlers are not consulted for calls nested inside the arguments of other
    function calls (unless `unprotect`ed).
    """

    def register(handler: CallHandler) -> CallHandler:
        CALL_HANDLERS[(head, as_context_type(context))] = handler
        return handler

    if handler is None:
        return register
    return register(handler)


def get_call_handler(head: str, context: Type) -> Optional[CallHandler]:
    for cls in as_context_type(context).__mro__:
        if (head, cls) in CALL_HANDLERS:
            return CALL_HANDLERS[(head, cls)]
    return None


@dataclass(frozen=True)
class ResolutionContext:
    """
    The (immutable) context in which a term is being resolved.

    Attributes:
        model: The model context tag class.
        protected: Whether formula operators are currently being treated as
            calls to be evaluated by the host (as they are within the arguments
            of function calls).
    """

    model: Type = ModelContext
    protected: bool = False

    def protect(self) -> ResolutionContext:
        return self if self.protected else replace(self, protected=True)

    def unprotect(self) -> ResolutionContext:
        return replace(self, protected=False) if self.protected else self


@dataclass
class FullRankState:
    """
    The terms seen so far while resolving the right-hand side of a formula,
    used to decide which categorical terms must be coded with full rank.
    """

    seen: List[Term] = field(default_factory=list)

    def __contains__(self, term: Term) -> bool:
        return any(term.alias_equal(seen) for seen in self.seen)

    def push(self, term: Term) -> None:
        if term not in self:
            self.seen.append(term)


def apply_schema(
    term: Any, schema: Mapping[str, Term], context: Type = ModelContext
) -> Any:
    """
    Resolve `term` against `schema`, replacing placeholders with the concrete
    terms they refer to.

    When `term` is a `FormulaTerm`, the categorical variables on its right
    hand side are coded with full rank whenever their reduced rank coding
    would leave the model matrix unable to represent their contribution (that
    is, when the term they alias is not otherwise present), and the
    intercept is added (or forbidden) according to the traits of `context`.

    Args:
        term: The term (or tuple of terms) to resolve.
        schema: The mapping from variable name to concrete term.
        context: The model context tag class (or an instance thereof).
    """
    return resolve_term(term, schema, ResolutionContext(model=as_context_type(context)))


def resolve_term(
    term: Any,
    schema: Mapping[str, Term],
    context: ResolutionContext,
    state: Optional[FullRankState] = None,
) -> Any:
    if isinstance(term, tuple):
        return tuple(resolve_term(t, schema, context, state) for t in term)
    if isinstance(term, FormulaTerm):
        return _resolve_formula(term, schema, context)
    if isinstance(term, Group):
        resolved = tuple(resolve_term(t, schema, context, state) for t in term.terms)
        if isinstance(term, MatrixGroup):
            return MatrixGroup(resolved)
        return union(*resolved)
    if state is not None:
        return _resolve_full_rank(term, schema, context, state)
    return _resolve(term, schema, context)


def _resolve_formula(
    term: FormulaTerm, schema: Mapping[str, Term], context: ResolutionContext
) -> FormulaTerm:
    state = FullRankState()
    rhs = term.rhs

    if drop_intercept(context.model):
        if has_intercept(rhs):
            raise InterceptForbiddenError(
                f"Model type `{context.model.__name__}` does not support an "
                f"intercept, but one was specified in the formula `{term!r}`."
            )
        state.push(Intercept(True))
    elif (
        implicit_intercept(context.model)
        and not has_intercept(rhs)
        and not omits_intercept(rhs)
    ):
        rhs = (Intercept(True), *iter_terms(rhs))

    lhs = resolve_term(term.lhs, schema, context)
    if isinstance(rhs, tuple):
        members = tuple(resolve_term(t, schema, context, state) for t in rhs)
    else:
        members = iter_terms(resolve_term(rhs, schema, context, state))
    return FormulaTerm(lhs, collect_matrix_terms(Group(members)))


def _resolve_full_rank(
    term: Term,
    schema: Mapping[str, Term],
    context: ResolutionContext,
    state: FullRankState,
) -> Term:
    if isinstance(term, Interaction):
        state.push(term)
        components = [_resolve(t, schema, context) for t in term.terms]
        return Interaction(
            tuple(_repair(t, state, term) for t in components)
        )
    if isinstance(term, (Constant, Intercept)):
        state.push(term)
        return _resolve(term, schema, context)

    state.push(term)
    return _repair(_resolve(term, schema, context), state, term)


def _repair(term: Term, state: FullRankState, context: Term) -> Term:
    """
    Code `term` with full rank if the term it aliases within `context` has not
    been seen.
    """
    if not isinstance(term, Categorical):
        return term
    aliased = drop_term(context, term)
    if aliased in state:
        return term
    state.push(aliased)
    return term.full_rank()


@functools.singledispatch
def _resolve(term: Term, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    if term.has_schema:
        return term
    raise ResolutionError(f"Don't know how to resolve `{term!r}` of type {type(term)}.")


@_resolve.register
def _(term: Placeholder, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    if term.name not in schema:
        raise ColumnNotFoundError(
            format_suggestions(term.name, schema),
            name=term.name,
            suggestions=fuzzy_match(term.name, schema),
        )
    resolved = schema[term.name]
    if isinstance(resolved, Categorical):
        return resolved.reduced()
    return resolved


@_resolve.register
def _(term: Constant, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    if context.protected:
        return term
    if term.value == 1:
        return Intercept(True)
    if term.value in (0, -1):
        return Intercept(False)
    raise ResolutionError(
        f"The number {term!r} cannot be used as a term; only `1`, `0` and `-1` "
        "may be used to include or remove the intercept."
    )


@_resolve.register
def _(term: Continuous, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    _check_concrete(term, schema)
    return term


@_resolve.register
def _(term: Categorical, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    _check_concrete(term, schema)
    return term.reduced()


def _check_concrete(term: Term, schema: Mapping[str, Term]) -> None:
    expected = schema.get(term.name)
    if expected is None:
        return
    if type(expected) is not type(term):
        raise SchemaMismatchError(
            f"`{term.name}` is {_kind(term)} in the term, but {_kind(expected)} "
            "in the schema."
        )
    if isinstance(term, Categorical) and term.levels != expected.levels:
        raise SchemaMismatchError(
            f"The levels of `{term.name}` do not match those in the schema: "
            f"{list(term.levels)} vs. {list(expected.levels)}."
        )


def _kind(term: Term) -> str:
    return "categorical" if isinstance(term, Categorical) else "continuous"


@_resolve.register
def _(term: FunctionCall, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    if term.head in ("protect", "unprotect"):
        if len(term.args) != 1:
            raise ResolutionError(
                f"`{term.head}` takes exactly one argument, but got {len(term.args)} "
                f"in `{term!r}`."
            )
        if term.head == "protect":
            return resolve_term(term.args[0], schema, context.protect())
        if not context.protected:
            raise ResolutionError(
                f"`{term!r}` can only be used within the arguments of a function "
                "call (or `protect`)."
            )
        return resolve_term(term.args[0], schema, context.unprotect())

    if not context.protected:
        handler = get_call_handler(term.head, context.model)
        if handler is not None:
            return handler(term, schema, context)

    if term.evaluator is None:
        suggestions = fuzzy_match(term.head, FUNCTIONS, max_distance=2)
        raise ResolutionError(
            f"There is no function called `{term.head}` available to evaluate "
            f"`{term!r}`."
            + (f" Did you mean: {', '.join(suggestions)}?" if suggestions else "")
        )

    return replace(
        term,
        args=tuple(
            resolve_term(arg, schema, context.protect()) for arg in term.args
        ),
    )


@_resolve.register
def _(term: Interaction, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    return Interaction(tuple(_resolve(t, schema, context) for t in term.terms))


@_resolve.register
def _(term: FormulaTerm, schema: Mapping[str, Term], context: ResolutionContext) -> Term:
    return _resolve_formula(term, schema, context)
