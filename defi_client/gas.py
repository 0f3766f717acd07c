from typing import Optional

from defi_client.constants import DEFAULT_GAS_LOOKBACK_BLOCKS
from defi_client.errors import GasPriceNotFound
from defi_client.ledger import LedgerGateway
from defi_client.logger import setup_logger

logger = setup_logger(__name__)


class GasPriceEstimator:
    """Mean gas price of the most recent non-empty block.

    A congestion proxy, not a fee-market model: no percentiles and no
    priority fee.
    """

    def __init__(self, ledger: LedgerGateway, max_lookback: int = DEFAULT_GAS_LOOKBACK_BLOCKS):
        self.ledger = ledger
        self.max_lookback = max_lookback

    def suggest_gas_price(self, block_number: Optional[int] = None) -> int:
        """Estimate from ``block_number`` (latest block when omitted).

        Empty blocks fall back to the previous block, at most
        ``max_lookback`` times.
        """
        if block_number is None:
            block_number = self.ledger.latest_block_number()

        start = block_number
        for _ in range(self.max_lookback + 1):
            if block_number < 0:
                break
            prices = self.ledger.block_gas_prices(block_number)
            if prices:
                average = sum(prices) // len(prices)
                logger.debug(f"gas price {average} wei from block {block_number} ({len(prices)} txs)")
                return average
            # 현재 블록에 트랜잭션이 없으면 이전 블록으로
            block_number -= 1

        logger.error(f"블록 {start} 부터 {self.max_lookback} 블록 내에 트랜잭션이 없음")
        raise GasPriceNotFound(
            f"no transactions in blocks {max(block_number + 1, 0)}..{start}"
        )
