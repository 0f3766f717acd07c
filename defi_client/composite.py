"""
Composite actions: a single handler call that carries a whole sub-batch.

Flash loan and flash swap handlers lend or swap, then call the proxy back
with the embedded sub-batch and expect repayment in the same transaction.
If anything inside reverts, the whole outer transaction reverts with it.
"""

from typing import Any, Sequence

from defi_client.abi_utils import encode_call, strip_selector
from defi_client.actions import Action, ActionBatch
from defi_client.constants import EXECS_SIGNATURE
from defi_client.errors import InvalidArgument
from defi_client.logger import setup_logger
from defi_client.registry import AddressRegistry, Coin, Handler

logger = setup_logger(__name__)

FLASH_LOAN_SIGNATURE = "flashLoan(address,uint256,bytes)"
FLASH_SWAP_SIGNATURE = "startSwap(address,uint256,address,bytes)"


def encode_sub_batch(inner: ActionBatch) -> bytes:
    """``execs(targets, payloads)`` argument bytes, without the selector.

    The flash handler re-wraps these bytes itself when it calls back into
    the proxy.
    """
    if not isinstance(inner, ActionBatch):
        raise InvalidArgument(f"expected ActionBatch, got {type(inner).__name__}")
    combined = inner.combine()
    payload = encode_call(EXECS_SIGNATURE, [combined.targets, combined.payloads])
    # skip the first 4 bytes to omit the function selector
    return strip_selector(payload)


def build_composite_action(inner: ActionBatch, target: str, signature: str,
                           args: Sequence[Any]) -> ActionBatch:
    """Encode ``signature(*args, sub_batch)`` against ``target`` as one action."""
    callback_data = encode_sub_batch(inner)
    data = encode_call(signature, list(args) + [callback_data])
    logger.debug(f"composite {signature} -> {target}: {len(inner)} inner actions")
    return ActionBatch.of(
        Action(target=target, payload=data, value_required=inner.total_value())
    )


def flash_loan_action(registry: AddressRegistry, asset: Coin, amount: int,
                      inner: ActionBatch) -> ActionBatch:
    """Aave flash loan of ``amount`` of ``asset`` around ``inner``"""
    return build_composite_action(
        inner,
        registry.handler(Handler.AAVE),
        FLASH_LOAN_SIGNATURE,
        [registry.token(asset), amount],
    )


def flash_swap_action(registry: AddressRegistry, borrow: Coin, amount: int, repay: Coin,
                      inner: ActionBatch) -> ActionBatch:
    """Uniswap flash swap: borrow ``amount`` of ``borrow`` and repay in ``repay``"""
    return build_composite_action(
        inner,
        registry.handler(Handler.SWAPPER),
        FLASH_SWAP_SIGNATURE,
        [registry.token(borrow), amount, registry.token(repay)],
    )
