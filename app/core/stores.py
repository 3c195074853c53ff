"""
Persistence adapters used by the scan workflow.

All SQLAlchemy / driver exceptions are translated into StoreError here, so the
services only ever branch on StoreErrorKind.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Awaitable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import ScanStatus, StoreErrorKind
from app.core.exceptions import StoreError
from app.core.models import AttendanceRecord, Employee

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    # asyncpg and psycopg report the SQLSTATE; sqlite only has the message
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


async def _call(awaitable: Awaitable[Any], timeout: float) -> Any:
    """Run one store round trip under a timeout, translating failures."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise StoreError(StoreErrorKind.TRANSIENT, "Database call timed out") from e
    except IntegrityError as e:
        if _is_unique_violation(e):
            raise StoreError(StoreErrorKind.CONSTRAINT_VIOLATION, "Unique constraint violated") from e
        logger.error("Integrity error: %s", e.orig)
        raise StoreError(StoreErrorKind.INTEGRITY_VIOLATION, "Integrity constraint violated") from e
    except (OperationalError, DBAPIError) as e:
        logger.error("Database unavailable: %s", e.__class__.__name__)
        raise StoreError(StoreErrorKind.TRANSIENT, "Database unavailable") from e


class EmployeeLookup:
    def __init__(self, db: AsyncSession, timeout: float) -> None:
        self._db = db
        self._timeout = timeout

    async def find_by_code(self, code: str) -> Optional[Employee]:
        result = await _call(self._db.execute(select(Employee).where(Employee.qr_code == code)), self._timeout)
        return result.scalar_one_or_none()

    async def find_by_phone(self, phone: str) -> Optional[Employee]:
        result = await _call(self._db.execute(select(Employee).where(Employee.phone == phone)), self._timeout)
        return result.scalar_one_or_none()


@dataclass(frozen=True)
class AttendanceRecordDraft:
    employee_phone: str
    scanner_id: UUID
    status: ScanStatus
    validation_message: Optional[str]
    scan_timestamp: datetime
    scan_date: date


class AttendanceStore:
    def __init__(self, db: AsyncSession, timeout: float) -> None:
        self._db = db
        self._timeout = timeout

    async def insert(self, draft: AttendanceRecordDraft) -> AttendanceRecord:
        """Persist one record. Raises StoreError(CONSTRAINT_VIOLATION) on a second daily success,
        StoreError(INTEGRITY_VIOLATION) on any other broken constraint (e.g. unknown scanner)."""
        record = AttendanceRecord(
            employee_phone=draft.employee_phone,
            scanner_id=draft.scanner_id,
            status=draft.status.value,
            validation_message=draft.validation_message,
            scan_timestamp=draft.scan_timestamp,
            scan_date=draft.scan_date,
        )
        self._db.add(record)
        try:
            await _call(self._db.commit(), self._timeout)
        except StoreError:
            await self._db.rollback()
            raise
        return record

    async def exists_success_on(self, phone: str, scan_date: date) -> bool:
        stmt = (
            select(AttendanceRecord.id)
            .where(
                AttendanceRecord.employee_phone == phone,
                AttendanceRecord.scan_date == scan_date,
                AttendanceRecord.status == ScanStatus.SUCCESS.value,
            )
            .limit(1)
        )
        result = await _call(self._db.execute(stmt), self._timeout)
        return result.scalar_one_or_none() is not None
