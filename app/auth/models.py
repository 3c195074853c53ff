import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.session import Base


class User(Base):
    """Authentication identity. Scanner accounts hang off this one-to-one."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Login name; kept equal to scanner_accounts.username
    username = Column(String(50), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    scanner_account = relationship(
        "ScannerAccount", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
