from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import ScannerRole


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str


class AccountInfo(BaseModel):
    id: UUID
    username: str
    role: ScannerRole
    last_login_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountInfo
    issued_at: datetime


class CurrentScanner(BaseModel):
    """Authenticated, active scanner account resolved from the bearer token."""

    id: UUID
    user_id: UUID
    username: str
    role: ScannerRole

    @property
    def is_admin(self) -> bool:
        return self.role == ScannerRole.ADMIN
