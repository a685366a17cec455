from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Union


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class RejectionReason(Enum):
    INVALID_AMOUNT = "invalid_amount"
    ACCOUNT_LOCKED = "account_locked"
    DUPLICATE_TX_ID = "duplicate_tx_id"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_STATE = "invalid_state"


@dataclass(frozen=True)
class Deposit:
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT

    client_id: int
    tx_id: int
    amount: Decimal


@dataclass(frozen=True)
class Withdrawal:
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL

    client_id: int
    tx_id: int
    amount: Decimal


@dataclass(frozen=True)
class Dispute:
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE

    client_id: int
    tx_id: int


@dataclass(frozen=True)
class Resolve:
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE

    client_id: int
    tx_id: int


@dataclass(frozen=True)
class Chargeback:
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK

    client_id: int
    tx_id: int


TransactionRecord = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass
class ClientAccount:
    """Balances are integer units, see money.SCALE."""

    client_id: int
    available: int = 0
    held: int = 0
    locked: bool = False

    @property
    def total(self) -> int:
        return self.available + self.held

    def credit(self, amount: int) -> None:
        self.available += amount

    def debit(self, amount: int) -> None:
        self.available -= amount

    def hold(self, amount: int) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: int) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: int) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True

    def snapshot(self) -> "AccountSnapshot":
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: int
    held: int
    total: int
    locked: bool


@dataclass
class LoggedTransaction:
    """A deposit kept for later dispute lookups."""

    tx_id: int
    client_id: int
    amount: int
    dispute_state: DisputeState = DisputeState.NORMAL


@dataclass(frozen=True)
class ProcessingResult:
    transaction: TransactionRecord
    reason: Optional[RejectionReason] = None

    @property
    def applied(self) -> bool:
        return self.reason is None

    def __repr__(self) -> str:
        outcome = "applied" if self.applied else f"rejected: {self.reason.value}"
        return f"ProcessingResult({self.transaction}, {outcome})"


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.rejections_by_reason: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        if result.applied:
            self.processed += 1
        else:
            self.rejected += 1
            self.rejections_by_reason[result.reason] += 1

    def __repr__(self) -> str:
        return f"ProcessingStats(processed={self.processed}, rejected={self.rejected})"
