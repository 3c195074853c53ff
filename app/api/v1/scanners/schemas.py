from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import ScannerRole


class ScannerAccountCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=8)
    role: ScannerRole = ScannerRole.SCANNER


class ScannerAccountUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    role: Optional[ScannerRole] = None
    is_active: Optional[bool] = None


class ScannerAccountResponse(BaseModel):
    id: UUID
    username: str
    user_id: UUID
    role: ScannerRole
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True
