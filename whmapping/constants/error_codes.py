# whmapping/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # inventory ledger
    INSUFFICIENT_QUANTITY = "INSUFFICIENT_QUANTITY"
    NEGATIVE_BALANCE = "NEGATIVE_BALANCE"
    TRANSACTION_ERROR = "TRANSACTION_ERROR"
