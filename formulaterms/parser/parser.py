from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from formulaterms.functions import FUNCTIONS, HOST_OPERATORS
from formulaterms.terms import (
    Constant,
    FormulaTerm,
    FunctionCall,
    Placeholder,
    Term,
    interact,
    tilde,
    union,
)
from formulaterms.utils.context import capture_context
from formulaterms.utils.layered_mapping import LayeredMapping

from .types import ASTNode, FormulaParser, Operator, OperatorResolver, Token, format_expr
from .utils import exc_for_token


@dataclass
class DefaultOperatorResolver(OperatorResolver):
    """
    The default operator resolver implementation.

    This class implements the operators of the formula language: `~` (which
    separates the response from the predictors, and is only valid at the top
    level), `+` (term union), `-` (only to remove the intercept via `- 1`),
    `*` (main effects and their interaction) and `&` (interaction). The
    remaining operators (`/`, `^` and unary `-`/`+`) are parsed so that they
    can be evaluated by the host on the values of their operands.
    """

    @property
    def operators(self) -> List[Operator]:
        return [
            Operator(
                "~",
                arity=2,
                precedence=-100,
                associativity=None,
                accepts_context=lambda context: len(context) == 0,
            ),
            Operator("+", arity=2, precedence=100, associativity="left"),
            Operator("-", arity=2, precedence=100, associativity="left"),
            Operator("*", arity=2, precedence=200, associativity="left"),
            Operator("/", arity=2, precedence=200, associativity="left"),
            Operator("&", arity=2, precedence=300, associativity="left"),
            Operator(
                "+", arity=1, precedence=400, associativity="right", fixity="prefix"
            ),
            Operator(
                "-", arity=1, precedence=400, associativity="right", fixity="prefix"
            ),
            Operator("^", arity=2, precedence=500, associativity="right"),
        ]


@dataclass
class DefaultFormulaParser(FormulaParser):
    """
    The default parser for formulae.

    It extends `FormulaParser` by defaulting the operator resolver to
    `DefaultOperatorResolver`, and by building the `Term` tree from the
    rewritten abstract syntax tree: names become `Placeholder`s, numbers become
    `Constant`s, `+`, `&` and `~` become unions, interactions and formula terms
    respectively, and all other calls (including operators captured in
    protected contexts) become `FunctionCall`s.

    Attributes:
        operator_resolver: The operator resolver to use when parsing the formula
            string and generating the abstract syntax tree. If not specified,
            it will default to `DefaultOperatorResolver`.
        context: A mapping in which functions referenced by formulae are looked
            up (shadowing the functions provided by this package).
    """

    operator_resolver: OperatorResolver = field(
        default_factory=lambda: DefaultOperatorResolver()  # pylint: disable=unnecessary-lambda
    )

    def get_terms_from_ast(
        self, ast: Union[None, Token, ASTNode], *, context: Mapping[str, Any]
    ) -> FormulaTerm:
        if not (isinstance(ast, ASTNode) and ast.is_operator("~") and len(ast.args) == 2):
            raise exc_for_token(
                ast if ast is not None else Token(),
                "Formulae must have a response and predictors separated by a "
                "top-level `~` (e.g. `y ~ a + b`).",
            )
        return self._build_terms(ast, LayeredMapping(context, FUNCTIONS))

    def _build_terms(
        self, ast: Union[Token, ASTNode], context: Mapping[str, Any]
    ) -> Term:
        if isinstance(ast, Token):
            if ast.kind is Token.Kind.VALUE:
                return Constant(ast.value)
            if ast.kind is Token.Kind.NAME:
                return Placeholder(ast.token)
            raise exc_for_token(ast, f"Unexpected token `{ast.token}`.")

        args = [self._build_terms(arg, context) for arg in ast.args]
        if ast.call:
            return FunctionCall(
                head=ast.head,
                args=tuple(args),
                expr=format_expr(ast),
                evaluator=self._get_evaluator(ast, context),
            )
        if ast.head == "~":
            return tilde(*args)
        if ast.head == "+":
            return union(*args)
        if ast.head == "&":
            return interact(*args)
        raise exc_for_token(
            ast, f"Operator `{ast.head}` was not normalized during rewriting."
        )

    @staticmethod
    def _get_evaluator(ast: ASTNode, context: Mapping[str, Any]) -> Optional[Any]:
        if (ast.head, len(ast.args)) in HOST_OPERATORS:
            return HOST_OPERATORS[(ast.head, len(ast.args))]
        name, *attrs = ast.head.split(".")
        evaluator = context.get(name)
        for attr in attrs:
            evaluator = getattr(evaluator, attr, None)
        return evaluator if callable(evaluator) else None


def parse_formula(
    formula: str,
    *,
    context: Optional[Union[int, Mapping[str, Any]]] = 0,
    parser: Optional[FormulaParser] = None,
) -> FormulaTerm:
    """
    Parse a formula string into an (unresolved) `FormulaTerm`.

    Args:
        formula: The formula to parse, e.g. `"y ~ 1 + a * b"`.
        context: The context in which functions referenced by the formula are
            looked up. When specified as an integer, it is interpreted as a
            frame offset from the caller's frame (see `capture_context`).
        parser: The parser to use (defaults to `DefaultFormulaParser`).
    """
    if isinstance(context, int):
        context = capture_context(context + 1)
    return (parser or DefaultFormulaParser()).get_terms(formula, context=context)
