from typing import Optional

from fastapi import HTTPException, Header, status, Request

from whmapping.core.security import decode_access_token
from whmapping.schemas.auth.identity_schemas import CurrentUser
from whmapping.utils.logger import get_logger

logger = get_logger("auth.guard")


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> CurrentUser:
    if not authorization or not authorization.startswith("Bearer "):
        logger.warning("Missing bearer token", extra={"path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
        )

    token = authorization.split("Bearer ")[1].strip()
    payload = decode_access_token(token)

    user = CurrentUser(
        sub=payload["sub"],
        name=payload.get("name"),
        email=payload.get("email"),
        role=payload.get("role") or "user",
    )

    request.state.user = user
    return user
