import csv
import logging
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional, TextIO

import money
from errors import RecordDecodeError
from models import (
    AccountSnapshot,
    Chargeback,
    Deposit,
    Dispute,
    Resolve,
    TransactionRecord,
    TransactionType,
    Withdrawal,
)

logger = logging.getLogger(__name__)

INPUT_COLUMNS = ("type", "client", "tx", "amount")
OUTPUT_HEADER = ("client", "available", "held", "total", "locked")

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TX_ID = 2 ** 32 - 1


def read_transactions_file(filepath: str) -> Iterator[TransactionRecord]:
    """Stream records from a CSV file. Raises OSError if it cannot be opened."""
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        yield from read_transactions(f)


def read_transactions(stream: TextIO) -> Iterator[TransactionRecord]:
    """
    Decode a header-led CSV stream into transaction records, one per row.

    Rows are yielded lazily so the input is never held in memory.
    Raises RecordDecodeError on the first row that cannot be decoded.
    """
    reader = csv.DictReader(stream)
    with _structural_errors(reader):
        fieldnames = reader.fieldnames
    if fieldnames is not None:
        reader.fieldnames = [name.strip().lower() for name in fieldnames]
        missing = [column for column in INPUT_COLUMNS[:3] if column not in reader.fieldnames]
        if missing:
            raise RecordDecodeError(reader.line_num, f"header is missing columns: {', '.join(missing)}")

    while True:
        with _structural_errors(reader):
            row = next(reader, None)
        if row is None:
            return
        transaction = parse_row(row, reader.line_num)
        logger.debug(f"Line {reader.line_num}: {transaction}")
        yield transaction


@contextmanager
def _structural_errors(reader: csv.DictReader) -> Iterator[None]:
    """Report unreadable text or broken CSV structure as RecordDecodeError."""
    try:
        yield
    except UnicodeDecodeError as e:
        raise RecordDecodeError(reader.line_num + 1, f"input is not valid UTF-8 text: {e}") from e
    except csv.Error as e:
        raise RecordDecodeError(reader.line_num, f"malformed CSV: {e}") from e


def parse_row(row: Dict[Optional[str], Optional[str]], line_number: int) -> TransactionRecord:
    """Parse CSV row into a transaction record."""
    if None in row:
        raise RecordDecodeError(line_number, f"unexpected extra fields {row[None]}")

    normalized = {k: (v or "").strip() for k, v in row.items()}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except ValueError:
        raise RecordDecodeError(line_number, f"unknown transaction type {normalized['type']!r}") from None

    client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID, line_number)
    tx_id = _parse_id(normalized["tx"], "tx", MAX_TX_ID, line_number)
    amount_str = normalized.get("amount", "")

    match transaction_type:
        case TransactionType.DEPOSIT:
            return Deposit(client_id, tx_id, _parse_amount(amount_str, line_number))
        case TransactionType.WITHDRAWAL:
            return Withdrawal(client_id, tx_id, _parse_amount(amount_str, line_number))
        case TransactionType.DISPUTE:
            record_class = Dispute
        case TransactionType.RESOLVE:
            record_class = Resolve
        case TransactionType.CHARGEBACK:
            record_class = Chargeback

    if amount_str:
        logger.debug(f"Line {line_number}: ignoring amount on {transaction_type.value}")
    return record_class(client_id, tx_id)


def _parse_id(value: str, column: str, maximum: int, line_number: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise RecordDecodeError(line_number, f"{column} must be an unsigned integer, got {value!r}")
    if len(value.lstrip("0")) > len(str(maximum)) or int(value) > maximum:
        raise RecordDecodeError(line_number, f"{column} {value} exceeds {maximum}")
    return int(value)


def _parse_amount(value: str, line_number: int) -> Decimal:
    if not value:
        raise RecordDecodeError(line_number, "amount is required")
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise RecordDecodeError(line_number, f"amount {value!r} is not a number") from None
    if not amount.is_finite():
        raise RecordDecodeError(line_number, f"amount {value!r} is not a finite number")
    return amount


def write_accounts(accounts: Iterable[AccountSnapshot], stream: TextIO) -> None:
    """Write the account table as CSV, money with fixed decimal places."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in accounts:
        writer.writerow(
            (
                account.client_id,
                money.format_units(account.available),
                money.format_units(account.held),
                money.format_units(account.total),
                str(account.locked).lower(),
            )
        )
