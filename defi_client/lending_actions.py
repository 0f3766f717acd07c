from defi_client.actions import ActionBatch, Approval
from defi_client.composite import flash_loan_action
from defi_client.protocol_actions import ProtocolActions
from defi_client.registry import Coin, Handler


class CompoundActions(ProtocolActions):
    """Compound supply/redeem through the cEther and cToken handlers"""

    name = "compound"
    handler = Handler.COMPOUND_TOKEN

    def supply_actions(self, size: int, coin: Coin) -> ActionBatch:
        """Supply ``size`` of ``coin``; the minted cTokens stay with the proxy owner."""
        self._check_amount(size)
        if coin == Coin.ETH:
            return self._single(
                "mint(uint256)", [size],
                value=size,
                target=self.registry.handler(Handler.COMPOUND_ETHER),
            )
        return self._single(
            "mint(address,uint256)",
            [self.registry.compound_market(coin), size],
            approvals=[self._approve(coin, size)],
        )

    def redeem_actions(self, size: int, coin: Coin) -> ActionBatch:
        """Redeem ``size`` cTokens of ``coin``'s market."""
        self._check_amount(size)
        market = self.registry.compound_market(coin)
        if coin == Coin.ETH:
            return self._single(
                "redeem(uint256)", [size],
                approvals=[Approval(market, size)],
                target=self.registry.handler(Handler.COMPOUND_ETHER),
            )
        return self._single(
            "redeem(address,uint256)",
            [market, size],
            approvals=[Approval(market, size)],
        )


class AaveActions(ProtocolActions):
    name = "aave"
    handler = Handler.AAVE

    def flash_loan_actions(self, size: int, coin: Coin, actions: ActionBatch) -> ActionBatch:
        """Borrow ``size`` of ``coin`` for the duration of ``actions``.

        The loan plus fee must be back in the pool when ``actions`` finish,
        otherwise the whole transaction reverts.
        """
        self._check_amount(size)
        return flash_loan_action(self.registry, coin, size, actions)
