from typing import Optional, Tuple, Type, Union

from formulaterms.errors import FormulaSyntaxError

from .types.ast_node import ASTNode
from .types.token import Token

# Exception handling


def exc_for_token(
    token: Union[Token, ASTNode],
    message: str,
    errcls: Type[Exception] = FormulaSyntaxError,
) -> Exception:
    """
    Return an exception ready to be raised with a helpful token/source context.

    Args:
        token: The `Token` or `ASTNode` instance about which an exception should
            be raised.
        message: The message to be included in the exception.
        errcls: The type of the exception to be returned.
    """
    token = __get_token_for_ast(token)
    token_context = token.get_source_context(colorize=True)
    if token_context:
        return errcls(f"{message}\n\n{token_context}")
    return errcls(message)


def exc_for_missing_operator(
    lhs: Union[Token, ASTNode],
    rhs: Union[Token, ASTNode],
    errcls: Type[Exception] = FormulaSyntaxError,
    extra: Optional[str] = None,
) -> Exception:
    """
    Return an exception ready to be raised about a missing operator token
    between the `lhs` and `rhs` tokens/ast-nodes.

    Args:
        lhs: The `Token` or `ASTNode` instance to the left of where an operator
            should be placed.
        rhs: The `Token` or `ASTNode` instance to the right of where an operator
            should be placed.
        errcls: The type of the exception to be returned.
        extra: Any additional information to be included in the exception message.
    """
    lhs_token, rhs_token, error_token = __get_tokens_for_gap(lhs, rhs)
    return exc_for_token(
        error_token,
        f"Missing operator between `{lhs_token.token}` and `{rhs_token.token}`.{f' {extra}' if extra else ''}",
        errcls=errcls,
    )


def __leftmost_token(ast: Union[Token, ASTNode]) -> Token:
    while isinstance(ast, ASTNode):
        if ast.call or not ast.args:
            return ast.token or Token(ast.head)
        ast = ast.args[0]
    return ast


def __rightmost_token(ast: Union[Token, ASTNode]) -> Token:
    while isinstance(ast, ASTNode):
        if not ast.args:
            return ast.token or Token(ast.head)
        ast = ast.args[-1]
    return ast


def __span(lhs_token: Token, rhs_token: Token) -> Token:
    """
    Generate a token spanning from `lhs_token` to `rhs_token` for debugging
    purposes (note that this token will not be a valid `Token` for use other
    than in reporting errors).
    """
    return Token(
        (
            lhs_token.source[lhs_token.source_start : rhs_token.source_end + 1]
            if lhs_token.source
            and lhs_token.source_start is not None
            and rhs_token.source_end is not None
            else ""
        ),
        source=lhs_token.source,
        source_start=lhs_token.source_start,
        source_end=rhs_token.source_end,
    )


def __get_token_for_ast(ast: Union[Token, ASTNode]) -> Token:
    """
    Ensure that incoming `ast` is a `Token`, or else generate one spanning the
    source of the nominated node.
    """
    if isinstance(ast, Token):
        return ast
    return __span(__leftmost_token(ast), __rightmost_token(ast))


def __get_tokens_for_gap(
    lhs: Union[Token, ASTNode], rhs: Union[Token, ASTNode]
) -> Tuple[Token, Token, Token]:
    """
    Three tokens are returned: the left-hand side token, the right-hand-side
    token, and the token spanning the gap where an operator should have been
    placed.
    """
    lhs_token = __rightmost_token(lhs)
    rhs_token = __leftmost_token(rhs or lhs)
    return lhs_token, rhs_token, __span(lhs_token, rhs_token)
