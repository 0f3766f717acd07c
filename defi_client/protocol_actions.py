from typing import Iterable, Sequence

from defi_client.abi_utils import encode_call
from defi_client.actions import Action, ActionBatch, Approval
from defi_client.errors import InvalidArgument
from defi_client.logger import setup_logger
from defi_client.registry import AddressRegistry, Coin, Handler

logger = setup_logger(__name__)


class ProtocolActions:
    """Protocol action interface: every protocol builds ``ActionBatch`` objects
    the same way, so batching and approval injection never branch on protocol.
    """

    name: str = "base"
    handler: Handler = None

    def __init__(self, registry: AddressRegistry):
        self.registry = registry

    @property
    def handler_address(self) -> str:
        return self.registry.handler(self.handler)

    def _single(self, signature: str, args: Sequence, value: int = 0,
                approvals: Iterable[Approval] = (), target: str = None) -> ActionBatch:
        """One-action batch calling ``signature`` on this protocol's handler."""
        data = encode_call(signature, args)
        return ActionBatch.of(Action(
            target=target or self.handler_address,
            payload=data,
            value_required=value,
            approvals=tuple(approvals),
        ))

    def _approve(self, coin: Coin, amount: int) -> Approval:
        return Approval(self.registry.token(coin), amount)

    @staticmethod
    def _check_amount(amount: int, what: str = 'size') -> int:
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise InvalidArgument(f"{what} must be a non-negative int: {amount!r}")
        return amount

    def __repr__(self) -> str:
        return f"{type(self).__name__}(network={self.registry.network})"
