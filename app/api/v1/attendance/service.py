"""Attendance reporting: daily check, daily report, paginated audit trail."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.enums import ScanStatus
from app.core.exceptions import ServiceError
from app.core.models import AttendanceRecord

from .schemas import (
    AttendanceRecordPage,
    AttendanceRecordResponse,
    DailyAttendanceCheck,
    DailyReport,
)


def org_today() -> date:
    """Current calendar date in the organization timezone."""
    return datetime.now(settings.tzinfo).date()


async def check_daily_attendance(
    db: AsyncSession,
    employee_phone: str,
    on_date: Optional[date] = None,
) -> DailyAttendanceCheck:
    target = on_date or org_today()
    result = await db.execute(
        select(AttendanceRecord.id)
        .where(
            AttendanceRecord.employee_phone == employee_phone,
            AttendanceRecord.scan_date == target,
            AttendanceRecord.status == ScanStatus.SUCCESS.value,
        )
        .limit(1)
    )
    return DailyAttendanceCheck(
        employee_phone=employee_phone,
        date=target,
        scanned=result.scalar_one_or_none() is not None,
    )


async def get_daily_report(
    db: AsyncSession,
    report_date: Optional[date] = None,
) -> DailyReport:
    target = report_date or org_today()
    result = await db.execute(
        select(AttendanceRecord)
        .where(AttendanceRecord.scan_date == target)
        .order_by(AttendanceRecord.scan_timestamp.desc())
    )
    rows = result.scalars().all()
    counts = {s.value: 0 for s in ScanStatus}
    for r in rows:
        counts[r.status] = counts.get(r.status, 0) + 1
    return DailyReport(
        date=target,
        total_scans=len(rows),
        successful_scans=counts[ScanStatus.SUCCESS.value],
        duplicate_scans=counts[ScanStatus.DUPLICATE.value],
        invalid_scans=counts[ScanStatus.INVALID.value],
        inactive_scans=counts[ScanStatus.INACTIVE.value],
        records=[AttendanceRecordResponse.model_validate(r) for r in rows],
    )


async def list_records(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 50,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    employee_phone: Optional[str] = None,
    scanner_id: Optional[UUID] = None,
) -> AttendanceRecordPage:
    if date_from and date_to and date_from > date_to:
        raise ServiceError("date_from must not be after date_to", status.HTTP_400_BAD_REQUEST)

    filters = []
    if date_from:
        filters.append(AttendanceRecord.scan_date >= date_from)
    if date_to:
        filters.append(AttendanceRecord.scan_date <= date_to)
    if employee_phone:
        filters.append(AttendanceRecord.employee_phone == employee_phone)
    if scanner_id:
        filters.append(AttendanceRecord.scanner_id == scanner_id)

    total = (await db.execute(select(func.count(AttendanceRecord.id)).where(*filters))).scalar_one()
    result = await db.execute(
        select(AttendanceRecord)
        .where(*filters)
        .order_by(AttendanceRecord.scan_timestamp.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return AttendanceRecordPage(
        records=[AttendanceRecordResponse.model_validate(r) for r in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )
