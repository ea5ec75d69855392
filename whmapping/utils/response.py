# whmapping/utils/response.py

from typing import TypeVar, Generic, Optional, Dict, Any
from pydantic import BaseModel

from whmapping.constants.error_codes import ErrorCode
from whmapping.core.exceptions import AppException

T = TypeVar("T")


def success_response(message: str, data: Optional[T] = None) -> Dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "data": data,
    }


class APIResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class ActionResult(BaseModel, Generic[T]):
    """Outcome of a ledger or lookup call.

    ``success`` discriminates the two shapes: on success ``data`` holds the
    payload, on failure ``error_code`` and ``message`` describe what went
    wrong and ``data`` is None.
    """

    success: bool
    data: Optional[T] = None
    message: str = ""
    error_code: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, data: T, message: str = "") -> "ActionResult[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error_code: ErrorCode, message: str) -> "ActionResult[T]":
        return cls(success=False, error_code=error_code, message=message)


# -------------------------
# RESULT -> HTTP
# -------------------------
ERROR_CODE_TO_HTTP_STATUS = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INSUFFICIENT_QUANTITY: 409,
    ErrorCode.NEGATIVE_BALANCE: 409,
    ErrorCode.CONFLICT: 409,
    ErrorCode.TRANSACTION_ERROR: 500,
}


def result_response(result: ActionResult, message: str) -> Dict[str, Any]:
    """Envelope a successful result, raise AppException for a failed one."""
    if result.success:
        return success_response(message, result.data)

    error_code = result.error_code or ErrorCode.INTERNAL_ERROR
    raise AppException(
        ERROR_CODE_TO_HTTP_STATUS.get(error_code, 500),
        result.message,
        error_code,
    )
