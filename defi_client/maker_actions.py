from defi_client.actions import ActionBatch
from defi_client.protocol_actions import ProtocolActions
from defi_client.registry import Coin, Handler


class MakerActions(ProtocolActions):
    """MakerDao vault (CDP) actions.

    A join is Maker's adapter for depositing and withdrawing collateral; an
    ilk is the collateral type (ETH-A, USDC-B, ...).
    """

    name = "maker"
    handler = Handler.MAKER

    def generate_dai_actions(self, collateral_amount: int, dai_amount: int,
                             collateral: Coin) -> ActionBatch:
        """Open a vault, lock ``collateral_amount`` and draw ``dai_amount`` DAI."""
        self._check_amount(collateral_amount, 'collateral_amount')
        self._check_amount(dai_amount, 'dai_amount')
        dai_join = self.registry.maker_join(Coin.DAI)
        if collateral == Coin.ETH:
            return self._single(
                "openLockETHAndDraw(uint256,address,address,bytes32,uint256)",
                [collateral_amount, self.registry.maker_join(Coin.ETH), dai_join,
                 self.registry.maker_ilk(Coin.ETH), dai_amount],
                value=collateral_amount,
            )
        return self._single(
            "openLockGemAndDraw(address,address,bytes32,uint256,uint256)",
            [self.registry.maker_join(collateral), dai_join,
             self.registry.maker_ilk(collateral), collateral_amount, dai_amount],
            approvals=[self._approve(collateral, collateral_amount)],
        )

    def deposit_collateral_actions(self, collateral_amount: int, collateral: Coin,
                                   cdp: int) -> ActionBatch:
        """Lock more collateral into an existing vault."""
        self._check_amount(collateral_amount, 'collateral_amount')
        self._check_amount(cdp, 'cdp')
        if collateral == Coin.ETH:
            return self._single(
                "safeLockETH(uint256,address,uint256)",
                [collateral_amount, self.registry.maker_join(Coin.ETH), cdp],
                value=collateral_amount,
            )
        return self._single(
            "safeLockGem(address,uint256,uint256)",
            [self.registry.maker_join(collateral), cdp, collateral_amount],
            approvals=[self._approve(collateral, collateral_amount)],
        )

    def wipe_actions(self, dai_amount: int, cdp: int) -> ActionBatch:
        """Pay back ``dai_amount`` of the vault's debt."""
        self._check_amount(dai_amount, 'dai_amount')
        self._check_amount(cdp, 'cdp')
        return self._single(
            "wipe(address,uint256,uint256)",
            [self.registry.maker_join(Coin.DAI), cdp, dai_amount],
            approvals=[self._approve(Coin.DAI, dai_amount)],
        )
