"""
Error taxonomy for batch composition and submission.

Every failure short-circuits to the caller; nothing here is retried.
"""

from typing import Optional


class DefiClientError(Exception):
    """Base class for all client errors"""


class EncodingError(DefiClientError):
    """A protocol call could not be serialized"""


class LedgerIOError(DefiClientError):
    """A read from the ledger gateway failed (balance, block, header)"""


class SubmissionError(DefiClientError):
    """The transaction could not be built, signed or sent"""


class ExecutionFailure(DefiClientError):
    """The transaction was mined but reverted on-chain"""

    def __init__(self, message: str, receipt: Optional[object] = None):
        super().__init__(message)
        self.receipt = receipt


class InvalidArgument(DefiClientError, ValueError):
    """Malformed input to a builder"""


class NotFound(DefiClientError):
    """A lookup on the ledger found nothing usable"""


class GasPriceNotFound(NotFound):
    """No non-empty block within the lookback window"""


class InsufficientFunds(DefiClientError):
    """Requested approval exceeds the owner's balance (strict approval policy)"""

    def __init__(self, token: str, requested: int, balance: int):
        super().__init__(
            f"insufficient balance of {token}: requested {requested}, available {balance}"
        )
        self.token = token
        self.requested = requested
        self.balance = balance
