from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.attendance.scan_recorder import ScanRecorder
from app.core.config import settings
from app.core.qr_code import QRCodeService
from app.core.stores import AttendanceStore, EmployeeLookup
from app.db.session import get_db


@lru_cache
def get_qr_code_service() -> QRCodeService:
    """Process-wide QR code service, built from the configured salt."""
    return QRCodeService(settings.qr_salt)


def get_scan_recorder(
    db: AsyncSession = Depends(get_db),
    qr_codes: QRCodeService = Depends(get_qr_code_service),
) -> ScanRecorder:
    return ScanRecorder(
        employees=EmployeeLookup(db, settings.store_timeout_seconds),
        records=AttendanceStore(db, settings.store_timeout_seconds),
        qr_codes=qr_codes,
        org_timezone=settings.tzinfo,
    )
