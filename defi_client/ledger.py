"""
Ledger gateway: the only place that talks to the chain.

``LedgerGateway`` is the interface the core depends on; ``Web3LedgerGateway``
implements it over a web3.py provider and signs with an eth_account account.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from web3 import Web3
from eth_account.signers.local import LocalAccount

from defi_client.abi_utils import encode_call, to_checksum
from defi_client.constants import APPROVE_GAS_LIMIT, APPROVE_SIGNATURE
from defi_client.errors import LedgerIOError, SubmissionError
from defi_client.logger import setup_logger

logger = setup_logger(__name__)

ERC20_BALANCE_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
    }
]


@dataclass
class Receipt:
    """Confirmed outcome of a submitted transaction"""
    tx_hash: str
    status: int
    gas_used: int = 0
    block_number: Optional[int] = None
    logs: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class LedgerGateway(ABC):

    @abstractmethod
    def balance_of(self, token: str, owner: str) -> int:
        """ERC-20 balance of ``owner``"""

    @abstractmethod
    def latest_block_number(self) -> int:
        """Number of the chain head"""

    @abstractmethod
    def block_gas_prices(self, block_number: int) -> List[int]:
        """Gas price of every transaction in a block"""

    @abstractmethod
    def submit_transaction(self, account: LocalAccount, to: str, data: bytes, value: int,
                           gas_limit: int, gas_price: int) -> str:
        """Sign and broadcast; returns the transaction hash"""

    @abstractmethod
    def wait_for_receipt(self, tx_hash: str) -> Receipt:
        """Block until the transaction is mined"""

    @abstractmethod
    def call(self, to: str, data: bytes) -> bytes:
        """Read-only contract call against the latest block"""

    def approve(self, account: LocalAccount, token: str, spender: str, amount: int,
                gas_price: int, gas_limit: int = APPROVE_GAS_LIMIT) -> Receipt:
        """Standalone ERC-20 ``approve`` transaction; blocks until mined."""
        data = encode_call(APPROVE_SIGNATURE, [to_checksum(spender), amount])
        tx_hash = self.submit_transaction(
            account, to=token, data=data, value=0, gas_limit=gas_limit, gas_price=gas_price,
        )
        return self.wait_for_receipt(tx_hash)


class Web3LedgerGateway(LedgerGateway):
    def __init__(self, w3: Web3, receipt_timeout: int = 120):
        self.w3 = w3
        self.receipt_timeout = receipt_timeout

    def balance_of(self, token: str, owner: str) -> int:
        try:
            c = self.w3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC20_BALANCE_ABI)
            return int(c.functions.balanceOf(Web3.to_checksum_address(owner)).call())
        except Exception as e:
            logger.error(f"잔고 조회 실패 token={token} owner={owner}: {e}")
            raise LedgerIOError(f"balanceOf({owner}) on {token} failed: {e}") from e

    def latest_block_number(self) -> int:
        try:
            return int(self.w3.eth.block_number)
        except Exception as e:
            logger.error(f"최신 블록 조회 실패: {e}")
            raise LedgerIOError(f"failed to read latest block number: {e}") from e

    def block_gas_prices(self, block_number: int) -> List[int]:
        try:
            block = self.w3.eth.get_block(block_number, full_transactions=True)
        except Exception as e:
            logger.error(f"블록 {block_number} 조회 실패: {e}")
            raise LedgerIOError(f"failed to read block {block_number}: {e}") from e
        prices = []
        for tx in block.get('transactions', []):
            # EIP-1559 트랜잭션은 gasPrice 대신 maxFeePerGas 만 있을 수 있다
            price = tx.get('gasPrice')
            if price is None:
                price = tx.get('maxFeePerGas', 0)
            prices.append(int(price))
        return prices

    def call(self, to: str, data: bytes) -> bytes:
        try:
            result = self.w3.eth.call({'to': Web3.to_checksum_address(to), 'data': data})
        except Exception as e:
            logger.error(f"컨트랙트 조회 실패 to={to}: {e}")
            raise LedgerIOError(f"eth_call to {to} failed: {e}") from e
        return bytes(result)

    def submit_transaction(self, account: LocalAccount, to: str, data: bytes, value: int,
                           gas_limit: int, gas_price: int) -> str:
        try:
            txn = {
                'from': account.address,
                'to': Web3.to_checksum_address(to),
                'value': value,
                'gas': gas_limit,
                'gasPrice': gas_price,
                'data': data,
                'nonce': self.w3.eth.get_transaction_count(account.address),
                'chainId': self.w3.eth.chain_id,
            }

            # 트랜잭션 서명 및 전송
            signed_txn = account.sign_transaction(txn)
            tx_hash = self.w3.eth.send_raw_transaction(signed_txn.raw_transaction)
            return Web3.to_hex(tx_hash)

        except Exception as e:
            logger.error(f"트랜잭션 전송 실패: {e}")
            raise SubmissionError(f"failed to submit transaction to {to}: {e}") from e

    def wait_for_receipt(self, tx_hash: str) -> Receipt:
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except Exception as e:
            logger.error(f"트랜잭션 확인 오류: {e}")
            raise LedgerIOError(f"no receipt for {tx_hash}: {e}") from e

        return Receipt(
            tx_hash=tx_hash,
            status=int(receipt['status']),
            gas_used=int(receipt.get('gasUsed', 0)),
            block_number=receipt.get('blockNumber'),
            logs=tuple(receipt.get('logs', ())),
        )
