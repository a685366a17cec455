import logging
from decimal import Decimal

import money
from errors import TransactionRejected
from ledger import Ledger
from models import (
    ClientAccount,
    DisputeState,
    LoggedTransaction,
    ProcessingResult,
    RejectionReason,
    TransactionRecord,
    TransactionType,
)
from transaction_log import TransactionLog

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to the ledger, one at a time, in input order.
    Every record is either applied in full or rejected with no state change.
    """

    def __init__(self, ledger: Ledger, transaction_log: TransactionLog):
        self._ledger = ledger
        self._transaction_log = transaction_log

    def process_transaction(self, transaction: TransactionRecord) -> ProcessingResult:
        """
        Process a single transaction.

        Returns a ProcessingResult that is either applied, or rejected with
        the RejectionReason that prevented it. Rejections never raise.
        """
        account = self._ledger.get_or_create_account(transaction.client_id)

        try:
            match transaction.transaction_type:
                case TransactionType.DEPOSIT:
                    self._handle_deposit(account, transaction)
                case TransactionType.WITHDRAWAL:
                    self._handle_withdrawal(account, transaction)
                case TransactionType.DISPUTE:
                    self._handle_dispute(account, transaction)
                case TransactionType.RESOLVE:
                    self._handle_resolve(account, transaction)
                case TransactionType.CHARGEBACK:
                    self._handle_chargeback(account, transaction)
        except TransactionRejected as e:
            logger.warning(
                f"{transaction.transaction_type.value.capitalize()} tx {transaction.tx_id} "
                f"for client {transaction.client_id} rejected ({e.reason.value}): {e}"
            )
            return ProcessingResult(transaction, e.reason)

        logger.debug(f"Applied {transaction}")
        return ProcessingResult(transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: TransactionRecord) -> None:
        amount = self._validate_amount(transaction.amount)
        self._ensure_unlocked(account)

        self._transaction_log.record_deposit(transaction.tx_id, account.client_id, amount)
        account.credit(amount)

    def _handle_withdrawal(self, account: ClientAccount, transaction: TransactionRecord) -> None:
        amount = self._validate_amount(transaction.amount)
        self._ensure_unlocked(account)

        if account.available < amount:
            raise TransactionRejected(
                RejectionReason.INSUFFICIENT_FUNDS,
                f"available {money.format_units(account.available)} is less than {money.format_units(amount)}",
            )
        account.debit(amount)

    def _handle_dispute(self, account: ClientAccount, transaction: TransactionRecord) -> None:
        original = self._find_original(account, transaction.tx_id)
        self._transaction_log.check_transition(original.tx_id, DisputeState.DISPUTED)

        # available stays >= 0
        if account.available < original.amount:
            raise TransactionRejected(
                RejectionReason.INSUFFICIENT_FUNDS,
                f"available {money.format_units(account.available)} cannot cover a hold of "
                f"{money.format_units(original.amount)}",
            )

        self._transaction_log.set_state(original.tx_id, DisputeState.DISPUTED)
        account.hold(original.amount)

    def _handle_resolve(self, account: ClientAccount, transaction: TransactionRecord) -> None:
        original = self._find_original(account, transaction.tx_id)

        self._transaction_log.set_state(original.tx_id, DisputeState.NORMAL)
        account.release_hold(original.amount)

    def _handle_chargeback(self, account: ClientAccount, transaction: TransactionRecord) -> None:
        original = self._find_original(account, transaction.tx_id)

        self._transaction_log.set_state(original.tx_id, DisputeState.CHARGED_BACK)
        account.remove_held(original.amount)
        account.lock()
        logger.info(f"Client {account.client_id} locked after chargeback of tx {original.tx_id}")

    def _find_original(self, account: ClientAccount, tx_id: int) -> LoggedTransaction:
        original = self._transaction_log.lookup(tx_id)

        if original is None:
            raise TransactionRejected(
                RejectionReason.UNKNOWN_TRANSACTION,
                f"tx {tx_id} not found, only previously applied deposits can be referenced",
            )

        if original.client_id != account.client_id:
            raise TransactionRejected(
                RejectionReason.CLIENT_MISMATCH,
                f"tx {tx_id} belongs to client {original.client_id}",
            )

        return original

    @staticmethod
    def _ensure_unlocked(account: ClientAccount) -> None:
        if account.locked:
            raise TransactionRejected(
                RejectionReason.ACCOUNT_LOCKED,
                f"client {account.client_id} is locked",
            )

    @staticmethod
    def _validate_amount(amount: Decimal) -> int:
        try:
            units = money.to_units(amount)
        except ValueError as e:
            raise TransactionRejected(RejectionReason.INVALID_AMOUNT, str(e)) from e

        if units <= 0:
            raise TransactionRejected(
                RejectionReason.INVALID_AMOUNT,
                f"amount {amount} must be positive",
            )
        return units
