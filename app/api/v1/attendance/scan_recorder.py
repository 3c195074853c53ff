"""
Daily breakfast scan workflow.

Order matters: lookup -> code check -> active check -> duplicate check -> insert.
Every outcome except an unknown/forged code leaves exactly one audit row.
"""

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Optional
from uuid import UUID

from app.core.enums import ScanStatus, StoreErrorKind
from app.core.exceptions import StoreError
from app.core.qr_code import QRCodeService
from app.core.stores import AttendanceRecordDraft, AttendanceStore, EmployeeLookup

from .schemas import ScanResult

logger = logging.getLogger(__name__)

INVALID_CODE_MESSAGE = "Invalid QR code"
INACTIVE_MESSAGE = "Employee account is inactive"
DUPLICATE_MESSAGE = "Employee already scanned today"
SUCCESS_MESSAGE = "Scan successful"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanRecorder:
    def __init__(
        self,
        employees: EmployeeLookup,
        records: AttendanceStore,
        qr_codes: QRCodeService,
        org_timezone: tzinfo,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._employees = employees
        self._records = records
        self._qr_codes = qr_codes
        self._tz = org_timezone
        self._clock = clock

    def scan_date_for(self, instant: datetime) -> date:
        return instant.astimezone(self._tz).date()

    def today(self) -> date:
        return self.scan_date_for(self._clock())

    async def record_scan(self, code: str, scanner_account_id: UUID) -> ScanResult:
        """
        Classify one scan and persist its audit record.

        Business outcomes are returned, never raised. StoreError(TRANSIENT)
        propagates; the caller decides whether to retry the whole scan.
        StoreError(INTEGRITY_VIOLATION) (e.g. an unknown scanner id) also
        propagates; only a unique violation on the success insert becomes a
        duplicate.
        """
        if not code or scanner_account_id is None:
            raise ValueError("code and scanner_account_id are required")

        employee = await self._employees.find_by_code(code)
        if employee is None:
            logger.info("Scan rejected: unknown code")
            return ScanResult(outcome=ScanStatus.INVALID, success=False, message=INVALID_CODE_MESSAGE)

        # Copy out before any commit/rollback expires the instance
        phone = employee.phone
        name = employee.name
        is_active = employee.is_active

        if not self._qr_codes.validate_code(code, phone, name):
            # Stored code is stale (name changed without regeneration)
            logger.warning("Scan rejected: stale code for employee %s", phone)
            return ScanResult(outcome=ScanStatus.INVALID, success=False, message=INVALID_CODE_MESSAGE)

        now = self._clock()
        scan_date = self.scan_date_for(now)

        if not is_active:
            await self._insert(phone, scanner_account_id, ScanStatus.INACTIVE, INACTIVE_MESSAGE, now, scan_date)
            logger.info("Scan %s for employee %s", ScanStatus.INACTIVE.value, phone)
            return ScanResult(
                outcome=ScanStatus.INACTIVE,
                success=False,
                message=INACTIVE_MESSAGE,
                employee_name=name,
            )

        if await self._records.exists_success_on(phone, scan_date):
            return await self._record_duplicate(phone, name, scanner_account_id, now, scan_date)

        try:
            record = await self._insert(phone, scanner_account_id, ScanStatus.SUCCESS, SUCCESS_MESSAGE, now, scan_date)
        except StoreError as e:
            if e.kind != StoreErrorKind.CONSTRAINT_VIOLATION:
                raise
            # Another station recorded the success between our check and insert
            logger.warning("Concurrent success for employee %s on %s; recording duplicate", phone, scan_date)
            return await self._record_duplicate(phone, name, scanner_account_id, now, scan_date)

        logger.info("Scan %s for employee %s", ScanStatus.SUCCESS.value, phone)
        return ScanResult(
            outcome=ScanStatus.SUCCESS,
            success=True,
            message=SUCCESS_MESSAGE,
            employee_name=name,
            timestamp=record.scan_timestamp,
        )

    async def _record_duplicate(
        self,
        phone: str,
        name: Optional[str],
        scanner_account_id: UUID,
        now: datetime,
        scan_date: date,
    ) -> ScanResult:
        await self._insert(phone, scanner_account_id, ScanStatus.DUPLICATE, DUPLICATE_MESSAGE, now, scan_date)
        logger.info("Scan %s for employee %s", ScanStatus.DUPLICATE.value, phone)
        return ScanResult(
            outcome=ScanStatus.DUPLICATE,
            success=False,
            message=DUPLICATE_MESSAGE,
            employee_name=name,
        )

    async def _insert(
        self,
        phone: str,
        scanner_account_id: UUID,
        status: ScanStatus,
        message: str,
        now: datetime,
        scan_date: date,
    ):
        return await self._records.insert(
            AttendanceRecordDraft(
                employee_phone=phone,
                scanner_id=scanner_account_id,
                status=status,
                validation_message=message,
                scan_timestamp=now,
                scan_date=scan_date,
            )
        )
