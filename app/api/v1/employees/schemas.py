from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class EmployeeCreate(BaseModel):
    phone: str = Field(..., min_length=1, max_length=15)
    name: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    employee_id: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)


class EmployeeUpdate(BaseModel):
    """phone is the primary key and not editable. Changing name regenerates the QR code."""

    name: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    employee_id: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)


class EmployeeBulkCreate(BaseModel):
    employees: List[EmployeeCreate] = Field(..., min_length=1, max_length=1000)


class EmployeeResponse(BaseModel):
    phone: str
    name: Optional[str] = None
    department: Optional[str] = None
    employee_id: Optional[str] = None
    email: Optional[str] = None
    qr_code: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
