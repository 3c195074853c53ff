from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings


@dataclass(frozen=True)
class AccessClaims:
    account_id: UUID
    role: str
    expires_at: datetime


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is malformed
        return False


def create_access_token(account_id: UUID, role: str, expires_minutes: Optional[int] = None) -> str:
    """Bearer token for one scanner account; the role is informational, the account row is authoritative."""
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(account_id),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> AccessClaims:
    """Raises jose.JWTError on a bad signature, an expired token, or a malformed subject."""
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    try:
        account_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise JWTError("Token subject is not an account id") from e
    return AccessClaims(
        account_id=account_id,
        role=payload.get("role", ""),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
