"""Attendance API router: scanning and reporting."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_scanner
from app.auth.rbac import require_admin
from app.auth.schemas import CurrentScanner
from app.core.config import settings
from app.core.dependencies import get_scan_recorder
from app.core.exceptions import ServiceError, StoreError
from app.core.stores import EmployeeLookup
from app.db.session import get_db

from . import service
from .scan_recorder import ScanRecorder
from .schemas import (
    AttendanceRecordPage,
    DailyAttendanceCheck,
    DailyReport,
    ScanRequest,
    ScanResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/attendance", tags=["attendance"])


@router.post("/scan", response_model=ScanResult)
async def scan(
    payload: ScanRequest,
    recorder: ScanRecorder = Depends(get_scan_recorder),
    current_scanner: CurrentScanner = Depends(get_current_scanner),
) -> ScanResult:
    """Record one scan. Business outcomes (duplicate, inactive, invalid) are 200 responses."""
    try:
        return await recorder.record_scan(payload.code, current_scanner.id)
    except StoreError as e:
        logger.error("Scan by %s failed: %s", current_scanner.username, e.message)
        if e.retryable:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Attendance store unavailable, please scan again",
            )
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to record scan")


@router.get("/check/{employee_phone}", response_model=DailyAttendanceCheck)
async def check_daily_attendance(
    employee_phone: str,
    db: AsyncSession = Depends(get_db),
    current_scanner: CurrentScanner = Depends(get_current_scanner),
) -> DailyAttendanceCheck:
    """Whether the employee already has a successful scan today."""
    employee = await EmployeeLookup(db, settings.store_timeout_seconds).find_by_phone(employee_phone)
    if employee is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return await service.check_daily_attendance(db, employee.phone)


@router.get("/daily-report", response_model=DailyReport)
async def daily_report(
    report_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    db: AsyncSession = Depends(get_db),
    current_scanner: CurrentScanner = Depends(require_admin),
) -> DailyReport:
    return await service.get_daily_report(db, report_date)


@router.get("/records", response_model=AttendanceRecordPage)
async def list_records(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    employee_phone: Optional[str] = None,
    scanner_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_scanner: CurrentScanner = Depends(get_current_scanner),
) -> AttendanceRecordPage:
    """Audit trail, newest first. Scanner-role accounts only see their own scans."""
    if not current_scanner.is_admin:
        scanner_id = current_scanner.id
    try:
        return await service.list_records(
            db,
            page=page,
            page_size=page_size,
            date_from=date_from,
            date_to=date_to,
            employee_phone=employee_phone,
            scanner_id=scanner_id,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
