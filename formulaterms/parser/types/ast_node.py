from __future__ import annotations

from typing import Any, Iterable, List, Optional, Union

from .token import Token


class ASTNode:
    """
    Represents a node in an Abstract Syntax Tree (AST).

    An `ASTNode` is either the application of an operator to its operands
    (e.g. `a + b` has head "+" and arguments `a` and `b`), or a function call
    (`log(a)` has head "log", is flagged with `call=True` and has argument `a`).
    Leaves of the tree are `Token` instances.

    Attributes:
        head: The operator symbol or function name.
        args: The arguments associated with this node.
        call: Whether this node is a function call rather than an operator.
        token: The token from which this node was generated (used when
            reporting errors).
    """

    def __init__(
        self,
        head: str,
        args: Iterable[Union[ASTNode, Token]],
        *,
        call: bool = False,
        token: Optional[Token] = None,
    ):
        self.head = head
        self.args = list(args)
        self.call = call
        self.token = token

    def is_operator(self, *symbols: str) -> bool:
        """
        Whether this node is an operator node with one of the nominated
        symbols as its head.
        """
        return not self.call and self.head in symbols

    def with_args(
        self, args: Iterable[Union[ASTNode, Token]], head: Optional[str] = None
    ) -> ASTNode:
        """
        Return a copy of this node with new arguments (and optionally a new
        head).
        """
        return ASTNode(
            self.head if head is None else head, args, call=self.call, token=self.token
        )

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ASTNode):
            return (
                self.head == other.head
                and self.call == other.call
                and self.args == other.args
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.head, self.call, len(self.args)))

    def __repr__(self) -> str:
        try:
            return f"<ASTNode {self.head}: {self.args}>"
        except RecursionError:
            return f"<ASTNode {self.head}: ...>"

    def __str__(self) -> str:
        return format_expr(self)

    def flatten(self, str_args: bool = False) -> List[Any]:
        """
        Flatten this `ASTNode` instance into a list of form: [<head>, *<args>].

        This is primarily useful during debugging and unit testing, since it
        provides a human readable summary of the entire AST. Function calls
        are flattened with a trailing "()" on their head.

        Args:
            str_args: Whether to cast every element of the flattened object to
                a string.
        """
        return [
            f"{self.head}()" if self.call else self.head,
            *[
                (
                    arg.flatten(str_args=str_args)
                    if isinstance(arg, ASTNode)
                    else (str(arg) if str_args else arg)
                )
                for arg in self.args
            ],
        ]


def format_expr(node: Union[ASTNode, Token]) -> str:
    """
    Render an AST (or token) as source code that parses back into the same
    tree.
    """
    if not isinstance(node, ASTNode):
        name = node.token
        if node.kind is Token.Kind.NAME and not all(
            c.isalnum() or c in "._" for c in name
        ):
            return f"`{name}`"
        return name

    def format_operand(arg: Union[ASTNode, Token]) -> str:
        if isinstance(arg, ASTNode) and not _is_named_call(arg):
            return f"({format_expr(arg)})"
        return format_expr(arg)

    if _is_named_call(node):
        return f"{node.head}({', '.join(format_expr(arg) for arg in node.args)})"
    if len(node.args) == 1:
        return f"{node.head}{format_operand(node.args[0])}"
    return f" {node.head} ".join(format_operand(arg) for arg in node.args)


def _is_named_call(node: ASTNode) -> bool:
    # Operator heads are captured as calls when they are evaluated by the host.
    return node.call and any(c.isalnum() or c in "._" for c in node.head)
