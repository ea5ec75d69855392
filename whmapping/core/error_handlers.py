from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from whmapping.constants.error_codes import ErrorCode
from whmapping.core.exceptions import AppException
import logging

logger = logging.getLogger(__name__)

BALANCE_CHECK_CONSTRAINT = "ck_inventory_qty_non_negative"


def _error(status_code: int, message, error_code: ErrorCode, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error_code": error_code,
            "details": details,
        },
    )


# -------------------------
# APP EXCEPTIONS (failed ActionResult)
# -------------------------
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(
            "Request failed: %s",
            exc.detail,
            extra={"path": request.url.path, "error_code": exc.error_code},
        )
    return _error(exc.status_code, exc.detail, exc.error_code, exc.details)


# -------------------------
# REQUEST BODY / QUERY VALIDATION
# -------------------------
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    return _error(
        422,
        "Invalid request data",
        ErrorCode.VALIDATION_ERROR,
        jsonable_encoder(exc.errors()),
    )


# -------------------------
# HTTP EXCEPTIONS (auth guards, 404 routes)
# -------------------------
HTTP_STATUS_TO_ERROR_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.PERMISSION_DENIED,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
}


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
):
    error_code = HTTP_STATUS_TO_ERROR_CODE.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return _error(exc.status_code, exc.detail, error_code)


# -------------------------
# DB INTEGRITY ERRORS
# -------------------------
async def integrity_error_handler(
    request: Request, exc: IntegrityError
):
    # ledger services catch their own; this only sees writes outside them
    logger.exception("DB integrity error", extra={"path": request.url.path})

    if BALANCE_CHECK_CONSTRAINT in str(exc.orig):
        return _error(
            409, "Inventory balance cannot go negative", ErrorCode.NEGATIVE_BALANCE
        )

    return _error(409, "Database constraint violation", ErrorCode.CONFLICT)


# -------------------------
# LAST RESORT
# -------------------------
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "request_id": getattr(request.state, "request_id", None),
        },
    )

    return _error(
        500, "Something went wrong. Please try again.", ErrorCode.INTERNAL_ERROR
    )
