import time
import uuid
import logging
from fastapi import Request

logger = logging.getLogger("access")

REQUEST_ID_HEADER = "X-Request-ID"


async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    request.state.request_id = request_id
    start_time = time.perf_counter()

    response = await call_next(request)

    process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
    # set by get_current_user on authenticated routes
    user = getattr(request.state, "user", None)

    logger.log(
        logging.WARNING if response.status_code >= 500 else logging.INFO,
        "",
        extra={
            "request_id": request_id,
            "client_addr": request.client.host if request.client else "unknown",
            "actor": user.display_name if user else "-",
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": process_time_ms,
        },
    )

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
