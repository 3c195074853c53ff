import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.dialects.postgresql import UUID

from app.db.session import Base


class AttendanceRecord(Base):
    """
    Append-only audit row, one per scan attempt (except unknown codes).

    At most one 'success' row per (employee_phone, scan_date); enforced by the
    partial unique index so concurrent scanner stations cannot both succeed.
    """

    __tablename__ = "attendance_records"
    __table_args__ = (
        CheckConstraint(
            "status IN ('success', 'duplicate', 'invalid', 'inactive')",
            name="ck_attendance_records_status",
        ),
        Index(
            "uq_attendance_daily_success",
            "employee_phone",
            "scan_date",
            unique=True,
            postgresql_where=text("status = 'success'"),
            sqlite_where=text("status = 'success'"),
        ),
        Index("idx_attendance_daily_lookup", "employee_phone", "scan_date", "status"),
        Index("idx_attendance_scanner_id", "scanner_id"),
        Index("idx_attendance_scan_date", "scan_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    employee_phone = Column(String(15), ForeignKey("employees.phone"), nullable=False)
    scanner_id = Column(UUID(as_uuid=True), ForeignKey("scanner_accounts.id"), nullable=False)
    scan_timestamp = Column(DateTime(timezone=True), nullable=False)
    # Calendar date of scan_timestamp in the organization timezone
    scan_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False)
    validation_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
