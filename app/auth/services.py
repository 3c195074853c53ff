import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.schemas import AccountInfo, LoginRequest, LoginResponse
from app.auth.security import create_access_token, verify_password
from app.core.exceptions import ServiceError
from app.core.models import ScannerAccount

logger = logging.getLogger(__name__)


async def login_scanner(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    # 1. Find account by username, with its auth identity
    stmt = (
        select(ScannerAccount)
        .options(selectinload(ScannerAccount.user))
        .where(ScannerAccount.username == payload.username.strip())
    )
    result = await db.execute(stmt)
    account: Optional[ScannerAccount] = result.scalar_one_or_none()
    if not account or not account.user:
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    # 2. Verify password hash
    if not verify_password(payload.password, account.user.password_hash):
        logger.info("Failed login for %s", account.username)
        raise ServiceError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

    # 3. Check account status
    if not account.is_active:
        raise ServiceError("Scanner account is inactive", status.HTTP_403_FORBIDDEN)

    # 4. Record login and issue token
    issued_at = datetime.now(timezone.utc)
    account.last_login_at = issued_at
    await db.commit()

    access_token = create_access_token(account.id, account.role)
    logger.info("Scanner %s logged in", account.username)
    return LoginResponse(
        access_token=access_token,
        account=AccountInfo(
            id=account.id,
            username=account.username,
            role=account.role,
            last_login_at=account.last_login_at,
        ),
        issued_at=issued_at,
    )
