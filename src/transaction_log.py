import logging
from typing import Dict, FrozenSet, Optional

from errors import TransactionRejected
from models import DisputeState, LoggedTransaction, RejectionReason

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[DisputeState, FrozenSet[DisputeState]] = {
    DisputeState.NORMAL: frozenset({DisputeState.DISPUTED}),
    DisputeState.DISPUTED: frozenset({DisputeState.NORMAL, DisputeState.CHARGED_BACK}),
    DisputeState.CHARGED_BACK: frozenset(),
}


class TransactionLog:
    """
    Stores applied deposits and tracks their dispute state.
    Withdrawals are never logged, so they cannot be disputed.
    """

    def __init__(self):
        self._transactions: Dict[int, LoggedTransaction] = {}

    def record_deposit(self, tx_id: int, client_id: int, amount: int) -> LoggedTransaction:
        """Store a deposit for future dispute lookups."""
        if tx_id in self._transactions:
            raise TransactionRejected(
                RejectionReason.DUPLICATE_TX_ID,
                f"tx {tx_id} already recorded",
            )
        logged = LoggedTransaction(tx_id=tx_id, client_id=client_id, amount=amount)
        self._transactions[tx_id] = logged
        return logged

    def lookup(self, tx_id: int) -> Optional[LoggedTransaction]:
        """Retrieve logged deposit by ID."""
        return self._transactions.get(tx_id)

    def check_transition(self, tx_id: int, new_state: DisputeState) -> LoggedTransaction:
        """
        Validate a dispute state change without applying it.

        Raises:
            TransactionRejected(UNKNOWN_TRANSACTION): tx_id was never logged
            TransactionRejected(INVALID_STATE): the transition is not allowed
        """
        logged = self._transactions.get(tx_id)
        if logged is None:
            raise TransactionRejected(
                RejectionReason.UNKNOWN_TRANSACTION,
                f"tx {tx_id} not found",
            )
        if new_state not in ALLOWED_TRANSITIONS[logged.dispute_state]:
            raise TransactionRejected(
                RejectionReason.INVALID_STATE,
                f"tx {tx_id} cannot move from {logged.dispute_state.value} to {new_state.value}",
            )
        return logged

    def set_state(self, tx_id: int, new_state: DisputeState) -> None:
        logged = self.check_transition(tx_id, new_state)
        logger.debug(f"tx {tx_id}: {logged.dispute_state.value} -> {new_state.value}")
        logged.dispute_state = new_state

    def __contains__(self, tx_id: int) -> bool:
        return tx_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)
