from dataclasses import dataclass
from typing import Optional, Tuple

from eth_account.signers.local import LocalAccount

from defi_client.abi_utils import encode_call
from defi_client.actions import ActionBatch, CombinedBatch
from defi_client.approvals import ApprovalInjector
from defi_client.constants import BATCH_EXEC_SIGNATURE, DEFAULT_BATCH_GAS_LIMIT
from defi_client.errors import EncodingError, ExecutionFailure, SubmissionError
from defi_client.gas import GasPriceEstimator
from defi_client.ledger import LedgerGateway, Receipt
from defi_client.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class ExecutionResult:
    """성공한 배치 실행 결과"""
    tx_hash: str
    gas_price: int
    value: int
    action_count: int
    receipt: Receipt


class BatchExecutor:
    """Sends a whole batch as one ``batchExec`` call on the proxy.

    Failures are terminal for the attempt: nothing is retried or
    gas-bumped, the caller resubmits a fresh batch if it wants to.
    """

    def __init__(self, ledger: LedgerGateway, account: LocalAccount, injector: ApprovalInjector,
                 estimator: GasPriceEstimator, proxy_address: str,
                 gas_limit: int = DEFAULT_BATCH_GAS_LIMIT):
        self.ledger = ledger
        self.account = account
        self.injector = injector
        self.estimator = estimator
        self.proxy_address = proxy_address
        self.gas_limit = gas_limit

    def build_transaction_data(self, batch: ActionBatch) -> Tuple[CombinedBatch, bytes]:
        """Inject approvals, combine, and encode the proxy call data."""
        combined = self.injector.inject(batch)
        calldata = encode_call(BATCH_EXEC_SIGNATURE, [combined.targets, combined.payloads])
        return combined, calldata

    def execute(self, batch: ActionBatch, gas_price: Optional[int] = None) -> ExecutionResult:
        """배치의 모든 액션을 한 트랜잭션으로 실행"""
        if gas_price is None:
            gas_price = self.estimator.suggest_gas_price()

        try:
            combined, calldata = self.build_transaction_data(batch)
        except EncodingError as e:
            logger.error(f"배치 인코딩 실패: {e}")
            raise SubmissionError(f"failed to build batch transaction: {e}") from e

        logger.info(
            f"배치 전송: {len(combined.targets)} calls, value={combined.value} wei, "
            f"gasPrice={gas_price}, gasLimit={self.gas_limit}"
        )
        tx_hash = self.ledger.submit_transaction(
            self.account,
            to=self.proxy_address,
            data=calldata,
            value=combined.value,
            gas_limit=self.gas_limit,
            gas_price=gas_price,
        )

        # 확인 대기
        receipt = self.ledger.wait_for_receipt(tx_hash)
        if not receipt.succeeded:
            logger.error(f"배치 실행 실패 (status={receipt.status}): {tx_hash}")
            raise ExecutionFailure(
                f"tx {tx_hash} receipt status is {receipt.status}, indicating a revert",
                receipt=receipt,
            )

        logger.info(f"배치 실행 성공: {tx_hash} (gasUsed={receipt.gas_used})")
        return ExecutionResult(
            tx_hash=tx_hash,
            gas_price=gas_price,
            value=combined.value,
            action_count=len(combined.targets),
            receipt=receipt,
        )
