from defi_client.actions import ActionBatch
from defi_client.constants import INJECT_SIGNATURE
from defi_client.protocol_actions import ProtocolActions
from defi_client.registry import Coin, Handler


class FundsActions(ProtocolActions):
    name = "funds"
    handler = Handler.FUNDS

    def supply_fund_actions(self, size: int, coin: Coin) -> ActionBatch:
        """Transfer ``size`` of ``coin`` from the caller into the proxy."""
        self._check_amount(size)
        return self._single(INJECT_SIGNATURE, [[self.registry.token(coin)], [size]])
