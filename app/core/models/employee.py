from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from app.db.session import Base


class Employee(Base):
    """Employee issued a breakfast QR code. Keyed by phone; soft delete only (is_active)."""

    __tablename__ = "employees"
    __table_args__ = (
        Index("idx_employees_is_active", "is_active"),
        Index("idx_employees_department", "department"),
    )

    phone = Column(String(15), primary_key=True)
    name = Column(String(255), nullable=True)
    department = Column(String(100), nullable=True)
    employee_id = Column(String(50), nullable=True)  # External HR identifier, display only
    email = Column(String(255), nullable=True)
    # Derived from (phone, name); must be regenerated whenever name changes
    qr_code = Column(Text, nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
