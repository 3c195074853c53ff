from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import ScanStatus


class ScanRequest(BaseModel):
    """Raw value decoded from an employee QR symbol."""

    code: str = Field(..., min_length=1, max_length=512)


class ScanResult(BaseModel):
    """Outcome of one scan event, shown to the operator."""

    outcome: ScanStatus
    success: bool
    message: str
    employee_name: Optional[str] = None
    timestamp: Optional[datetime] = None


class AttendanceRecordResponse(BaseModel):
    id: UUID
    employee_phone: str
    scanner_id: UUID
    scan_timestamp: datetime
    scan_date: date
    status: ScanStatus
    validation_message: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DailyReport(BaseModel):
    """Per-status scan counts for one calendar date."""

    date: date
    total_scans: int
    successful_scans: int
    duplicate_scans: int
    invalid_scans: int
    inactive_scans: int
    records: List[AttendanceRecordResponse]


class AttendanceRecordPage(BaseModel):
    records: List[AttendanceRecordResponse]
    total: int
    page: int
    page_size: int


class DailyAttendanceCheck(BaseModel):
    employee_phone: str
    date: date
    scanned: bool
