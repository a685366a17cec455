import logging
import sys
from typing import Iterable, List, Optional

from config import EngineConfig
from csv_io import read_transactions_file
from ledger import Ledger
from models import AccountSnapshot, ProcessingResult, ProcessingStats, TransactionRecord
from transaction_log import TransactionLog
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions through the processor strictly in input order.
    Rejected records are counted and skipped; they never stop the stream.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._ledger = Ledger()
        self._transaction_log = TransactionLog()
        self._processor = TransactionProcessor(self._ledger, self._transaction_log)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> List[AccountSnapshot]:
        """
        Process CSV file and return final account states.

        Raises:
            OSError: the file cannot be opened or read
            RecordDecodeError: a row cannot be decoded into a transaction
        """
        logger.info(f"Processing transactions from {filepath}")
        for transaction in read_transactions_file(filepath):
            self.process_transaction(transaction)
        logger.info("Processing complete")

        if self._config.report_stats:
            print(
                f"Processed: {self._stats.processed}, "
                f"Rejected: {self._stats.rejected}",
                file=sys.stderr,
            )

        return self.get_accounts()

    def process_transactions(self, transactions: Iterable[TransactionRecord]) -> List[ProcessingResult]:
        """Apply transactions in order and return the outcome of each."""
        results = []
        for transaction in transactions:
            results.append(self.process_transaction(transaction))
        return results

    def process_transaction(self, transaction: TransactionRecord) -> ProcessingResult:
        result = self._processor.process_transaction(transaction)
        self._stats.record(result)
        return result

    def get_accounts(self) -> List[AccountSnapshot]:
        accounts = self._ledger.snapshot()
        if not self._config.sort_output:
            return accounts
        return sorted(accounts, key=lambda account: account.client_id)
