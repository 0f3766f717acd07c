from defi_client.actions import ActionBatch, Approval
from defi_client.protocol_actions import ProtocolActions
from defi_client.registry import Coin, Handler


class YearnActions(ProtocolActions):
    """Yearn V1 vault deposit/withdraw. Vault addresses come from the registry."""

    name = "yearn"
    handler = Handler.YEARN

    def add_liquidity_actions(self, size: int, coin: Coin) -> ActionBatch:
        self._check_amount(size)
        vault = self.registry.yearn_vault(coin)
        if coin == Coin.ETH:
            return self._single("depositETH(uint256,address)", [size, vault], value=size)
        return self._single(
            "deposit(address,uint256)", [vault, size],
            approvals=[self._approve(coin, size)],
        )

    def remove_liquidity_actions(self, size: int, coin: Coin) -> ActionBatch:
        """Burn ``size`` vault shares of ``coin``'s vault."""
        self._check_amount(size)
        vault = self.registry.yearn_vault(coin)
        # 출금할 vault share 를 proxy 로 옮겨야 한다
        approvals = [Approval(vault, size)]
        if coin == Coin.ETH:
            return self._single("withdrawETH(address,uint256)", [vault, size], approvals=approvals)
        return self._single("withdraw(address,uint256)", [vault, size], approvals=approvals)
