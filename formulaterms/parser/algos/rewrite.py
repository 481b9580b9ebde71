import functools
import warnings
from typing import List, Union

from formulaterms.errors import InteractionLiteralWarning

from ..types import ASTNode, Token, format_expr
from ..utils import exc_for_token

ASSOCIATIVE = ("+", "&", "*")
INTERCEPT_LITERALS = (-1, 0, 1)


def rewrite(
    ast: Union[Token, ASTNode], *, protected: bool = False
) -> Union[Token, ASTNode]:
    """
    Normalize an abstract syntax tree into its canonical form.

    The following rules are applied depth first, with each node's arguments
    re-checked after any rule fires:
        - `a * b` is expanded to `a + b + a & b` (pairwise, from the left);
        - nested `+`, `&` and `*` nodes are spliced into a parent with the same
          operator;
        - `&` distributes over `+`, so `(a + b) & c` becomes `a & c + b & c`;
        - `x - 1` becomes `x + -1` (other subtractions are not supported);
        - numeric literals are removed from interactions (warning for any
          value other than `1`), and an interaction left with one argument is
          replaced by that argument;
        - the arguments of `+` and `&` are stably sorted by degree.

    The arguments of any other function call are rewritten in "protected"
    mode, in which operators are captured as calls to be evaluated by the
    host rather than interpreted as formula operators; `unprotect(...)`
    resumes normal interpretation for its argument, and `protect(...)` can be
    used to enter protected mode explicitly.

    Args:
        ast: The abstract syntax tree to rewrite.
        protected: Whether to rewrite `ast` in protected mode.
    """
    return _rewrite(ast, protected=protected, top_level=True)


def _rewrite(
    ast: Union[Token, ASTNode], *, protected: bool, top_level: bool = False
) -> Union[Token, ASTNode]:
    if isinstance(ast, Token):
        return ast

    if ast.call:
        return ast.with_args(
            _rewrite(arg, protected=ast.head != "unprotect") for arg in ast.args
        )

    if ast.head == "~":
        if protected or not top_level:
            raise exc_for_token(
                ast, "The `~` operator is only valid at the top level of a formula."
            )
        node = ast.with_args(_rewrite(arg, protected=False) for arg in ast.args)
        _check_literals(node)
        return node

    if len(ast.args) == 1 and ast.head in "+-":
        operand = _rewrite(ast.args[0], protected=protected)
        if isinstance(operand, Token) and operand.is_number:
            return _negate(operand) if ast.head == "-" else operand
        if ast.head == "+" and not protected:
            return operand
        return ASTNode(
            ast.head,
            [_rewrite(ast.args[0], protected=True)],
            call=True,
            token=ast.token,
        )

    if protected or ast.head not in (*ASSOCIATIVE, "-"):
        return ASTNode(
            ast.head,
            [_rewrite(arg, protected=True) for arg in ast.args],
            call=True,
            token=ast.token,
        )

    if ast.head == "-":
        rhs = _rewrite(ast.args[1], protected=False)
        if not (isinstance(rhs, Token) and rhs.is_number and rhs.value == 1):
            raise exc_for_token(
                ast,
                "Subtraction is only supported for removing the intercept (`- 1`).",
            )
        return _rewrite(
            ASTNode("+", [ast.args[0], _negate(rhs)], token=ast.token),
            protected=False,
        )

    return _rewrite_operator(ast)


def _rewrite_operator(node: ASTNode) -> Union[Token, ASTNode]:
    head = node.head
    args: List[Union[Token, ASTNode]] = list(node.args)

    i = 0
    while i < len(args):
        child = args[i] = _rewrite(args[i], protected=False)
        if isinstance(child, ASTNode) and child.is_operator(head):
            args[i : i + 1] = child.args
            continue
        if head == "&" and isinstance(child, ASTNode) and child.is_operator("+"):
            return _rewrite(
                ASTNode(
                    "+",
                    [
                        node.with_args([*args[:i], arg, *args[i + 1 :]])
                        for arg in child.args
                    ],
                    token=child.token,
                ),
                protected=False,
            )
        if head == "&" and isinstance(child, Token) and child.is_number:
            if child.value != 1:
                warnings.warn(
                    f"Number {child.token} removed from interaction term "
                    f"{format_expr(node.with_args(args))}.",
                    InteractionLiteralWarning,
                )
            del args[i]
            continue
        i += 1

    if head == "*":
        return _rewrite(functools.reduce(_expand_star, args), protected=False)

    if head == "&":
        if not args:
            raise exc_for_token(
                node,
                "Interactions must involve at least one term that is not a number.",
            )
        if len(args) == 1:
            return args[0]

    node = node.with_args(sorted(args, key=degree))
    _check_literals(node)
    return node


def _expand_star(
    lhs: Union[Token, ASTNode], rhs: Union[Token, ASTNode]
) -> ASTNode:
    return ASTNode("+", [lhs, rhs, ASTNode("&", [lhs, rhs])])


def _negate(token: Token) -> Token:
    if token.token.startswith("-"):
        return token.copy_with_attrs(token=token.token[1:])
    return token.copy_with_attrs(token=f"-{token.token}")


def _check_literals(node: ASTNode) -> None:
    for arg in node.args:
        if (
            isinstance(arg, Token)
            and arg.is_number
            and arg.value not in INTERCEPT_LITERALS
        ):
            raise exc_for_token(
                arg,
                f"Numeric literal `{arg.token}` is not valid here; only `1`, `0` and "
                "`-1` may be used to include or remove the intercept.",
            )


def degree(node: Union[Token, ASTNode]) -> int:
    """
    The degree of an argument of `+` or `&`: 0 for numbers, the number of
    arguments of an interaction, and 1 for anything else.
    """
    if isinstance(node, Token):
        return 0 if node.is_number else 1
    if node.is_operator("&"):
        return len(node.args)
    return 1
