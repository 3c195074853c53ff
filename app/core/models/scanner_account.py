import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


class ScannerAccount(Base):
    """Operator permitted to submit scans. Exactly one per authentication identity."""

    __tablename__ = "scanner_accounts"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'scanner')", name="ck_scanner_accounts_role"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(50), nullable=False, unique=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    role = Column(String(20), nullable=False)  # admin | scanner
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="scanner_account")
