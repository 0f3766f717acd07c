from typing import List

from defi_client.abi_utils import encode_call
from defi_client.actions import ActionBatch, Approval, CombinedBatch
from defi_client.constants import INJECT_SIGNATURE
from defi_client.errors import InsufficientFunds
from defi_client.ledger import LedgerGateway
from defi_client.logger import setup_logger
from defi_client.registry import AddressRegistry, Handler

logger = setup_logger(__name__)


class ApprovalInjector:
    """Prepends a funds-injection call covering every approval a batch needs.

    Each requested amount is capped at the owner's live balance. With
    ``strict=True`` a shortfall raises ``InsufficientFunds`` instead.
    """

    def __init__(self, ledger: LedgerGateway, registry: AddressRegistry, owner: str,
                 strict: bool = False):
        self.ledger = ledger
        self.registry = registry
        self.owner = owner
        self.strict = strict

    def resolve(self, batch: ActionBatch) -> List[Approval]:
        """Amounts to authorize, one entry per requirement in batch order.

        Requirements are capped one at a time, not per token: when a token
        appears in several actions the injected amounts can add up to more
        than the balance, and the transaction reverts on-chain.
        """
        resolved = []
        seen = set()
        for requirement in batch.approval_requirements():
            if requirement.token in seen:
                logger.warning(f"같은 토큰에 대한 승인 요청이 중복됨: {requirement.token} (개별적으로 잔고 제한)")
            seen.add(requirement.token)
            balance = self.ledger.balance_of(requirement.token, self.owner)
            if balance > requirement.amount:
                amount = requirement.amount
            else:
                if self.strict and balance < requirement.amount:
                    logger.error(
                        f"승인 요청량이 잔고를 초과: {requirement.token} "
                        f"requested={requirement.amount} balance={balance}"
                    )
                    raise InsufficientFunds(requirement.token, requirement.amount, balance)
                amount = balance
            if amount != requirement.amount:
                logger.warning(
                    f"승인량을 잔고로 제한: {requirement.token} {requirement.amount} -> {amount}"
                )
            resolved.append(Approval(requirement.token, amount))
        return resolved

    def inject(self, batch: ActionBatch) -> CombinedBatch:
        combined = batch.combine()
        approvals = self.resolve(batch)
        if not approvals:
            return combined

        inject_data = encode_call(
            INJECT_SIGNATURE,
            [[a.token for a in approvals], [a.amount for a in approvals]],
        )
        logger.debug(f"funds inject 추가: {len(approvals)} tokens")
        return CombinedBatch(
            [self.registry.handler(Handler.FUNDS)] + combined.targets,
            [inject_data] + combined.payloads,
            combined.value,
        )
