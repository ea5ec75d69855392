from fastapi import HTTPException
from whmapping.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


# =====================================================
# INVENTORY LEDGER
# =====================================================
class LedgerError(Exception):
    """Business failure inside a ledger operation.

    Raised and caught inside the service layer only; callers receive an
    ``ActionResult`` carrying ``error_code`` and the message.
    """

    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    error_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(LedgerError):
    error_code = ErrorCode.NOT_FOUND


class InsufficientQuantityError(LedgerError):
    error_code = ErrorCode.INSUFFICIENT_QUANTITY

    def __init__(self, available: int, requested: int):
        super().__init__(
            f"Insufficient quantity. Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested


class NegativeBalanceError(LedgerError):
    error_code = ErrorCode.NEGATIVE_BALANCE

    def __init__(self, current: int, adjustment: int):
        result = current + adjustment
        super().__init__(
            f"Cannot adjust. Current: {current}, Adjustment: {adjustment}, "
            f"Result would be: {result}"
        )
        self.current = current
        self.adjustment = adjustment
        self.result = result


class TransactionError(LedgerError):
    error_code = ErrorCode.TRANSACTION_ERROR
