from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, Mapping, Optional, Union

from formulaterms.utils.layered_mapping import LayeredMapping

from .ast_node import ASTNode
from .operator_resolver import OperatorResolver
from .token import Token


@dataclass
class FormulaParser:
    """
    The base formula parser API.

    The role of subclasses of this class is to transform a string representation
    of a formula into a tree of `Term` instances that can be resolved against
    a schema and ultimately rendered into model matrices.

    This class can be subclassed to customize this behavior. The four phases of
    formula parsing are split out into separate methods to make this easier.
    They are:
        - get_tokens_from_formula: Which returns an iterable of `Token`
            instances. By default this uses `tokenize()`.
        - get_ast_from_tokens: Which converts the iterable of `Token`s into an
            abstract syntax tree. By default this uses `tokens_to_ast()` and the
            nominated `OperatorResolver` instance.
        - get_rewritten_ast: Which normalizes the abstract syntax tree into its
            canonical form. By default this uses `rewrite()`.
        - get_terms_from_ast: Which builds the `Term` tree described by the
            rewritten abstract syntax tree.
    Only the `get_terms_from_ast()` method must be provided by subclasses.
    """

    class Target(IntEnum):
        FORMULA = 0
        TOKENS = 1
        AST = 2
        REWRITTEN = 3
        TERMS = 4

    operator_resolver: OperatorResolver
    context: Optional[Mapping[str, Any]] = None

    def parse(
        self,
        formula: str,
        *,
        target: Union[Target, str, int] = Target.TERMS,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Parse the nominated `formula` string to the nominated `target`.

        Args:
            formula: The formula string to be parsed.
            target: The stage of the parsing pipeline at which to stop.
            context: An optional mapping in which the functions referenced by
                the formula are looked up (in addition to `.context`).
        """
        if isinstance(target, int):
            target = self.Target(target)
        elif isinstance(target, str):
            target = self.Target[target.upper()]

        out: Any = formula
        layered_context = LayeredMapping(context, self.context)
        if target >= self.Target.TOKENS:
            out = tokens = self.get_tokens_from_formula(formula)
        if target >= self.Target.AST:
            out = ast = self.get_ast_from_tokens(tokens)
        if target >= self.Target.REWRITTEN:
            out = ast = self.get_rewritten_ast(ast)
        if target >= self.Target.TERMS:
            out = self.get_terms_from_ast(ast, context=layered_context)
        return out

    def get_tokens_from_formula(self, formula: str) -> Iterable[Token]:
        """
        Return an iterable of `Token` instances for the nominated `formula`
        string.

        Args:
            formula: The formula string to be tokenized.
        """
        from ..algos.tokenize import tokenize

        return list(tokenize(formula))

    def get_ast_from_tokens(
        self, tokens: Iterable[Token]
    ) -> Union[None, Token, ASTNode]:
        """
        Assemble an abstract syntax tree for the nominated `tokens`.

        Args:
            tokens: The tokens for which an AST should be generated.
        """
        from ..algos.tokens_to_ast import tokens_to_ast

        return tokens_to_ast(tokens, operator_resolver=self.operator_resolver)

    def get_rewritten_ast(
        self, ast: Union[None, Token, ASTNode]
    ) -> Union[None, Token, ASTNode]:
        """
        Normalize the nominated abstract syntax tree.

        Args:
            ast: The abstract syntax tree to rewrite.
        """
        from ..algos.rewrite import rewrite

        if ast is None:
            return None
        return rewrite(ast)

    def get_terms_from_ast(
        self, ast: Union[None, Token, ASTNode], *, context: Mapping[str, Any]
    ) -> Any:
        """
        Build the `Term` tree for the nominated (rewritten) AST.

        Args:
            ast: The rewritten abstract syntax tree.
            context: The mapping in which functions referenced by the formula
                should be looked up.
        """
        raise NotImplementedError  # pragma: no cover

    # Convenience methods for common use-cases.

    def get_tokens(self, formula: str) -> Iterable[Token]:
        return self.parse(formula, target=self.Target.TOKENS)

    def get_ast(self, formula: str) -> Union[None, Token, ASTNode]:
        return self.parse(formula, target=self.Target.AST)

    def get_rewritten(self, formula: str) -> Union[None, Token, ASTNode]:
        return self.parse(formula, target=self.Target.REWRITTEN)

    def get_terms(
        self, formula: str, *, context: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """
        Parse the nominated `formula` string and return the resulting terms.

        Args:
            formula: The formula string to be parsed.
            context: An optional mapping in which functions referenced by the
                formula are looked up.
        """
        return self.parse(formula, target=self.Target.TERMS, context=context)
