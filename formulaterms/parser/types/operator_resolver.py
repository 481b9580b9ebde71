import abc
from collections import defaultdict
from functools import cached_property
from typing import Dict, Generator, Iterable, List, Tuple

from ..utils import exc_for_token
from .operator import Operator
from .token import Token


class OperatorResolver(metaclass=abc.ABCMeta):
    """
    Resolves which `Operator` instance should be used for a given operator
    `Token`.

    This class should be subclassed and have `.operators` and/or `.resolve()`
    overridden in order to achieve the desired formula grammar. Most users
    will want to extend `DefaultOperatorResolver` instead.

    Attributes:
        operator_table: A cache of the mapping from operator symbol to
            `Operator` instances implementing it.
    """

    @property
    @abc.abstractmethod
    def operators(self) -> List[Operator]:
        """
        The `Operator` instance pool which can be matched to tokens by
        `.resolve()`.
        """

    @cached_property
    def operator_table(self) -> Dict[str, List[Operator]]:
        operator_table = defaultdict(list)
        for operator in self.operators:
            operator_table[operator.symbol].append(operator)
        for symbol in operator_table:
            operator_table[symbol] = sorted(
                operator_table[symbol],
                key=lambda op: (op.precedence, op.arity),
                reverse=True,
            )
        return operator_table

    def resolve(
        self, token: Token
    ) -> Generator[Tuple[Token, Iterable[Operator]], None, None]:
        """
        Generate the sets of operator candidates that may be viable for the
        given token. Each item generated must be a tuple for the token
        associated with the operator, and an iterable of `Operator` instances
        which should be considered by the AST generator. These `Operator`
        instances *MUST* be sorted in descending order of precendence and
        arity.

        Args:
            token: The operator `Token` instance for which `Operator`(s) should
                be resolved.
        """
        yield self._resolve(token, token.token)

    def _resolve(
        self,
        token: Token,
        symbol: str,
    ) -> Tuple[Token, Iterable[Operator]]:
        """
        The default operator resolving logic.
        """
        if symbol not in self.operator_table:
            raise exc_for_token(token, f"Unknown operator '{symbol}'.")
        return token, self.operator_table[symbol]

    # The operator table cache may not be pickleable, so let's drop it.
    def __getstate__(self) -> Dict:
        return {}
