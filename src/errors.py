from models import RejectionReason


class PaymentsError(Exception):
    """Base class for all payments engine errors."""


class RecordDecodeError(PaymentsError):
    """
    A row of the input could not be turned into a transaction record.
    Fatal: the rest of the stream is not processed.
    """

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class TransactionRejected(PaymentsError):
    """
    A single record failed validation against the current state.
    Recoverable: the record is skipped and processing continues.
    """

    def __init__(self, reason: RejectionReason, message: str = ""):
        super().__init__(message or reason.value)
        self.reason = reason
