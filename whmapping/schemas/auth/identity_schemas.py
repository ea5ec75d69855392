from pydantic import BaseModel
from typing import Optional


class CurrentUser(BaseModel):
    """Caller identity taken from the provider's bearer token."""

    sub: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "user"

    @property
    def display_name(self) -> str:
        return self.name or self.email or self.sub

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == "admin"
