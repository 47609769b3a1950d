from pydantic import BaseModel
from typing import Optional
from uuid import UUID

from shared.utils.enums import UserRole


class UserToken(BaseModel):
    user_id: UUID
    role: str
    name: Optional[str] = None
    exp: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role.upper() == UserRole.ADMIN.value

    @property
    def is_owner(self) -> bool:
        return self.role.upper() == UserRole.OWNER.value


class CommonQueryParams(BaseModel):
    page: Optional[int] = 1
    limit: Optional[int] = 50
