"""
Swap and liquidity actions for DEX handlers (Uniswap V2, Sushiswap, Kyber,
Balancer, Curve).

Convention for swaps: ``quote`` is the coin paid in, ``base`` the coin
received. ETH as input travels as call value; any other input is pulled
into the proxy through the approval injection step.
"""

from typing import Sequence

from defi_client.actions import ActionBatch, Approval, approvals_from
from defi_client.abi_utils import to_checksum
from defi_client.composite import flash_swap_action
from defi_client.constants import BALANCER_MAX_POOLS, ETH_NATIVE_ADDRESS, MIN_AMOUNT_OUT, MIN_CONVERSION_RATE
from defi_client.errors import InvalidArgument
from defi_client.protocol_actions import ProtocolActions
from defi_client.registry import Coin, Handler


def _check_pair(base: Coin, quote: Coin):
    if base == quote:
        raise InvalidArgument(f"cannot swap {quote.value} for itself")


class _UniswapV2Actions(ProtocolActions):
    """Router-style swaps shared by Uniswap V2 and its forks."""

    def swap_actions(self, size: int, base: Coin, quote: Coin) -> ActionBatch:
        """Swap exactly ``size`` of ``quote`` for ``base``."""
        self._check_amount(size)
        _check_pair(base, quote)
        weth = self.registry.token(Coin.ETH)

        if quote == Coin.ETH:
            return self._single(
                "swapExactETHForTokens(uint256,uint256,address[])",
                [size, MIN_AMOUNT_OUT, [weth, self.registry.token(base)]],
                value=size,
            )

        approval = self._approve(quote, size)
        if base == Coin.ETH:
            return self._single(
                "swapExactTokensForETH(uint256,uint256,address[])",
                [size, MIN_AMOUNT_OUT, [self.registry.token(quote), weth]],
                approvals=[approval],
            )
        # 토큰 간 스왑은 WETH 경유
        return self._single(
            "swapExactTokensForTokens(uint256,uint256,address[])",
            [size, MIN_AMOUNT_OUT, [self.registry.token(quote), weth, self.registry.token(base)]],
            approvals=[approval],
        )


class UniswapActions(_UniswapV2Actions):
    name = "uniswap_v2"
    handler = Handler.UNISWAP

    def flash_swap_actions(self, size: int, borrow: Coin, repay: Coin,
                           actions: ActionBatch) -> ActionBatch:
        """Borrow ``size`` of ``borrow`` through a flash swap, run ``actions``,
        and repay in ``repay`` within the same transaction."""
        self._check_amount(size)
        return flash_swap_action(self.registry, borrow, size, repay, actions)


class SushiswapActions(_UniswapV2Actions):
    """Uniswap V2 fork; identical call layout on its own handler."""
    name = "sushiswap"
    handler = Handler.SUSHISWAP


class KyberswapActions(ProtocolActions):
    name = "kyber"
    handler = Handler.KYBER

    def swap_actions(self, size: int, base: Coin, quote: Coin) -> ActionBatch:
        self._check_amount(size)
        _check_pair(base, quote)

        if quote == Coin.ETH:
            return self._single(
                "swapEtherToToken(uint256,address,uint256)",
                [size, self.registry.token(base), MIN_CONVERSION_RATE],
                value=size,
            )

        approval = self._approve(quote, size)
        if base == Coin.ETH:
            return self._single(
                "swapTokenToEther(address,uint256,uint256)",
                [self.registry.token(quote), size, MIN_CONVERSION_RATE],
                approvals=[approval],
            )
        return self._single(
            "swapTokenToToken(address,uint256,address,uint256)",
            [self.registry.token(quote), size, self.registry.token(base), MIN_CONVERSION_RATE],
            approvals=[approval],
        )


class BalancerActions(ProtocolActions):
    name = "balancer"
    handler = Handler.BALANCER_EXCHANGE

    def _asset(self, coin: Coin) -> str:
        # Balancer exchange proxy 는 네이티브 ETH 를 플레이스홀더 주소로 표현
        if coin == Coin.ETH:
            return ETH_NATIVE_ADDRESS
        return self.registry.token(coin)

    def swap_actions(self, input_coin: Coin, output_coin: Coin, input_amount: int) -> ActionBatch:
        self._check_amount(input_amount, 'input_amount')
        _check_pair(output_coin, input_coin)
        args = [
            self._asset(input_coin), self._asset(output_coin),
            input_amount, MIN_AMOUNT_OUT, BALANCER_MAX_POOLS,
        ]
        signature = "smartSwapExactIn(address,address,uint256,uint256,uint256)"
        if input_coin == Coin.ETH:
            return self._single(signature, args, value=input_amount)
        return self._single(signature, args, approvals=[self._approve(input_coin, input_amount)])


class CurveActions(ProtocolActions):
    """Curve pool actions.

    ``pool`` is the swap contract of the pool, ``pool_token`` its LP token
    (e.g. 3Crv).
    """
    name = "curve"
    handler = Handler.CURVE

    def exchange_actions(self, pool: str, token_in: str, token_out: str, i: int, j: int,
                         dx: int, min_dy: int) -> ActionBatch:
        """Swap ``dx`` of ``token_in`` (index ``i``) for ``token_out`` (index ``j``)."""
        return self._exchange("exchange", pool, token_in, token_out, i, j, dx, min_dy)

    def exchange_underlying_actions(self, pool: str, token_in: str, token_out: str, i: int, j: int,
                                    dx: int, min_dy: int) -> ActionBatch:
        return self._exchange("exchangeUnderlying", pool, token_in, token_out, i, j, dx, min_dy)

    def _exchange(self, method: str, pool, token_in, token_out, i, j, dx, min_dy) -> ActionBatch:
        self._check_amount(dx, 'dx')
        return self._single(
            f"{method}(address,address,address,int128,int128,uint256,uint256)",
            [to_checksum(pool), to_checksum(token_in), to_checksum(token_out), i, j, dx, min_dy],
            approvals=[Approval(token_in, dx)],
        )

    def add_liquidity_actions(self, pool: str, pool_token: str, tokens: Sequence[str],
                              amounts: Sequence[int], min_amount: int) -> ActionBatch:
        approvals = approvals_from(tokens, amounts)
        return self._single(
            "addLiquidity(address,address,address[],uint256[],uint256)",
            [to_checksum(pool), to_checksum(pool_token),
             [a.token for a in approvals], [a.amount for a in approvals], min_amount],
            approvals=approvals,
        )

    def remove_liquidity_actions(self, pool: str, pool_token: str, token_i: str, pool_amount: int,
                                 i: int, min_amount: int) -> ActionBatch:
        """Burn ``pool_amount`` LP tokens for a single underlying coin."""
        self._check_amount(pool_amount, 'pool_amount')
        return self._single(
            "removeLiquidityOneCoin(address,address,address,uint256,int128,uint256)",
            [to_checksum(pool), to_checksum(pool_token), to_checksum(token_i), pool_amount, i, min_amount],
            approvals=[Approval(pool_token, pool_amount)],
        )
