from collections import namedtuple
from typing import Iterable, List, Optional, Set, Union

from ..types import ASTNode, Operator, OperatorResolver, Token
from ..utils import exc_for_missing_operator, exc_for_token

OrderedOperator = namedtuple("OrderedOperator", ("operator", "token", "index"))


def tokens_to_ast(
    tokens: Iterable[Token], operator_resolver: OperatorResolver
) -> Union[None, Token, ASTNode]:
    """
    Convert a iterable of `Token` instances into an abstract syntax tree.

    This implementation is intentionally as simple and abstract as possible, and
    makes few assumptions about the form of the operators that will be present
    in the token sequence. Instead, it relies on the `OperatorResolver` instance
    to evaluate based on the context which operator should be invoked to handle
    surrounding tokens based on their arity/etc. This means that changes to the
    formula syntax (such as the addition of new operators) should not require
    any changes to this abstract syntax tree generator.

    The algorithm employed here is a slightly enriched [Shunting Yard
    Algorithm](https://en.wikipedia.org/wiki/Shunting-yard_algorithm), where we
    have added additional support for operator arities, fixities,
    associativities and function calls with comma separated arguments.

    Args:
        tokens: The tokens for which an abstract syntax tree should be
            generated.
        operator_resolver: The `OperatorResolver` instance to be used to lookup
            operators (only the `.resolve()` method is used).

    Returns:
        The generated abstract syntax tree as a nested `ASTNode` instance.
    """
    output_queue: List[Union[Token, ASTNode]] = []
    operator_stack: List[OrderedOperator] = []
    disabled_operators: Set[Token] = set()
    pending_call: Optional[Token] = None
    expect_operand = True

    def stack_operator(operator: Union[Token, Operator], token: Token) -> None:
        operator_stack.append(OrderedOperator(operator, token, len(output_queue)))

    def operate(
        ordered_operator: OrderedOperator, output_queue: List[Union[Token, ASTNode]]
    ) -> List[Union[Token, ASTNode]]:
        operator, token, index = ordered_operator

        if operator.fixity is Operator.Fixity.INFIX:
            if operator.arity != 2:
                raise exc_for_token(  # pragma: no cover
                    token,
                    f"Infix operator `{token.token}` must have an arity of 2 (got: {operator.arity}).",
                )
            min_index = index - 1
            max_index = index + 1
        else:  # Operator.Fixity.PREFIX
            min_index = index
            max_index = index + operator.arity

        lower_bound = operator_stack[-1].index if operator_stack else 0
        if min_index < lower_bound or max_index > len(output_queue):
            raise exc_for_token(
                token,
                f"Operator `{token.token}` has insuffient arguments and/or is misplaced.",
            )

        return [
            *output_queue[:min_index],
            ASTNode(operator.symbol, output_queue[min_index:max_index], token=token),
            *output_queue[max_index:],
        ]

    def reduce_context() -> None:
        nonlocal output_queue
        while operator_stack and operator_stack[-1].token.kind is not Token.Kind.CONTEXT:
            output_queue = operate(operator_stack.pop(), output_queue)

    def close_argument(token: Token) -> None:
        """
        Check that exactly one operand has been collected since the opening
        parenthesis or last argument separator.
        """
        count = len(output_queue) - operator_stack[-1].index
        if count == 0:
            raise exc_for_token(token, "Function call arguments cannot be empty.")
        if count > 1:
            raise exc_for_missing_operator(
                output_queue[operator_stack[-1].index],
                output_queue[operator_stack[-1].index + 1],
            )

    def in_call() -> bool:
        return (
            bool(operator_stack)
            and isinstance(operator_stack[-1].operator, Token)
            and operator_stack[-1].operator.kind is Token.Kind.CALL
        )

    for token in tokens:
        if token.kind is Token.Kind.CALL:
            pending_call = token
            continue
        if token.kind is Token.Kind.CONTEXT:
            if token.token == "(":
                stack_operator(pending_call or token, token)
                pending_call = None
                expect_operand = True
            elif token.token == ",":
                reduce_context()
                if operator_stack and operator_stack[-1].operator == ",":
                    close_argument(token)
                    operator_stack.pop()
                elif in_call():
                    close_argument(token)
                if not in_call():
                    raise exc_for_token(
                        token, "Argument separators are only valid within function calls."
                    )
                stack_operator(token, token)
                expect_operand = True
            elif token.token == ")":
                reduce_context()
                separated = False
                if operator_stack and operator_stack[-1].operator == ",":
                    close_argument(token)
                    operator_stack.pop()
                    separated = True
                if not operator_stack:
                    raise exc_for_token(token, "Could not find matching parenthesis.")
                if in_call():
                    if not separated and len(output_queue) - operator_stack[-1].index > 1:
                        close_argument(token)
                    opener = operator_stack.pop()
                    output_queue = [
                        *output_queue[: opener.index],
                        ASTNode(
                            opener.operator.token,
                            output_queue[opener.index :],
                            call=True,
                            token=opener.operator,
                        ),
                    ]
                else:
                    operator_stack.pop()
                expect_operand = False
            else:  # pragma: no cover
                raise exc_for_token(
                    token,
                    f"Context token `{token.token}` is unrecognized.",
                )
        elif token.kind is Token.Kind.OPERATOR:
            for operator_token, operators in operator_resolver.resolve(token):
                for operator in operators:
                    if not operator.accepts_context(
                        [s.operator for s in operator_stack]
                    ):
                        continue
                    if operator.disabled:
                        disabled_operators.add(operator_token)
                        continue
                    # Prefix operators are only valid where an operand is
                    # expected, and infix operators only where one is not.
                    if (operator.fixity is Operator.Fixity.PREFIX) is not expect_operand:
                        continue
                    # Apply all operators with precedence greater than the current operator
                    while (
                        operator.fixity is Operator.Fixity.INFIX
                        and operator_stack
                        and operator_stack[-1].token.kind is not Token.Kind.CONTEXT
                        and (
                            operator_stack[-1].operator.precedence > operator.precedence
                            or operator_stack[-1].operator.precedence
                            == operator.precedence
                            and operator.associativity is Operator.Associativity.LEFT
                        )
                    ):
                        output_queue = operate(operator_stack.pop(), output_queue)
                    stack_operator(operator, token)
                    expect_operand = True
                    break
                else:
                    if operator_token in disabled_operators:
                        raise exc_for_token(
                            token,
                            f"Operator `{operator_token}` is at least partially disabled by parser configuration, and/or is incorrectly used.",
                        )
                    raise exc_for_token(
                        token, f"Operator `{operator_token}` is incorrectly used."
                    )
        else:
            output_queue.append(token)
            expect_operand = False

    while operator_stack:
        if operator_stack[-1].token.kind is Token.Kind.CONTEXT:
            raise exc_for_token(
                operator_stack[-1].token, "Could not find matching parenthesis."
            )
        output_queue = operate(operator_stack.pop(), output_queue)

    if output_queue:
        if len(output_queue) > 1:
            raise exc_for_missing_operator(
                output_queue[0],
                output_queue[1],
                extra=(
                    "This may be due to the following operators being at least "
                    f"partially disabled by parser configuration: {disabled_operators}."
                    if disabled_operators
                    else None
                ),
            )
        return output_queue[0]

    return None
