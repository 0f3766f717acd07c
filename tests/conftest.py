import pytest
from eth_abi import decode
from eth_account import Account
from web3 import Web3

from defi_client.ledger import LedgerGateway, Receipt
from defi_client.registry import MAINNET

TEST_PRIVATE_KEY = "0x" + "1" * 64


class FakeLedger(LedgerGateway):
    """In-memory ledger: balances and blocks are plain dicts"""

    def __init__(self, balances=None, blocks=None, latest=None, receipt_status=1, call_results=None):
        self.balances = {Web3.to_checksum_address(k): v for k, v in (balances or {}).items()}
        self.blocks = blocks or {}
        self.latest = latest
        self.receipt_status = receipt_status
        self.call_results = {Web3.to_checksum_address(k): v for k, v in (call_results or {}).items()}
        self.calls = []
        self.submitted = []
        self.balance_reads = []
        self.block_reads = []

    def balance_of(self, token, owner):
        self.balance_reads.append((token, owner))
        return self.balances.get(Web3.to_checksum_address(token), 0)

    def latest_block_number(self):
        if self.latest is not None:
            return self.latest
        return max(self.blocks) if self.blocks else 0

    def block_gas_prices(self, block_number):
        self.block_reads.append(block_number)
        return list(self.blocks.get(block_number, []))

    def submit_transaction(self, account, to, data, value, gas_limit, gas_price):
        self.submitted.append({
            'from': account.address,
            'to': to,
            'data': data,
            'value': value,
            'gas': gas_limit,
            'gasPrice': gas_price,
        })
        return "0x" + f"{len(self.submitted):064x}"

    def wait_for_receipt(self, tx_hash):
        return Receipt(tx_hash=tx_hash, status=self.receipt_status, gas_used=21000, block_number=1)

    def call(self, to, data):
        self.calls.append((to, data))
        return self.call_results[Web3.to_checksum_address(to)]


def decode_call(types, data):
    """Decode call data arguments, skipping the selector"""
    return decode(types, bytes(data[4:]))


def selector(signature):
    return bytes(Web3.keccak(text=signature)[:4])


@pytest.fixture
def account():
    return Account.from_key(TEST_PRIVATE_KEY)


@pytest.fixture
def registry():
    return MAINNET


@pytest.fixture
def ledger():
    return FakeLedger(blocks={100: [20_000_000_000]})
