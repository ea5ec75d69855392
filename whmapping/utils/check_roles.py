from fastapi import Depends, HTTPException, status

from whmapping.schemas.auth.identity_schemas import CurrentUser
from whmapping.utils.get_user import get_current_user
from whmapping.utils.logger import get_logger

logger = get_logger("auth.guard")


def require_role(*roles: str):
    """Dependency that lets through callers whose token role is one of ``roles``."""
    allowed = {r.lower() for r in roles}

    async def role_checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role.lower() not in allowed:
            logger.warning(
                "Role check failed",
                extra={"actor": user.display_name, "role": user.role},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied",
            )
        return user

    return role_checker


require_admin = require_role("admin")
