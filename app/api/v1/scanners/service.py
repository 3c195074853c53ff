import logging
from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.security import hash_password
from app.core.exceptions import ServiceError
from app.core.models import ScannerAccount

from .schemas import ScannerAccountCreate, ScannerAccountResponse, ScannerAccountUpdate

logger = logging.getLogger(__name__)

async def create_scanner_account(
    db: AsyncSession,
    payload: ScannerAccountCreate,
) -> ScannerAccountResponse:
    """Create the auth identity and its scanner account in one transaction."""
    existing = await db.execute(select(ScannerAccount.id).where(ScannerAccount.username == payload.username))
    if existing.scalar_one_or_none():
        raise ServiceError("Username already exists", status.HTTP_409_CONFLICT)
    try:
        user = User(
            username=payload.username,
            password_hash=hash_password(payload.password),
        )
        db.add(user)
        await db.flush()  # to populate user.id

        account = ScannerAccount(
            username=payload.username,
            user_id=user.id,
            role=payload.role.value,
            is_active=True,
        )
        db.add(account)
        await db.commit()
        await db.refresh(account)
    except IntegrityError as e:
        await db.rollback()
        raise ServiceError("Username already exists", status.HTTP_409_CONFLICT) from e
    logger.info("Created %s account %s", account.role, account.username)
    return ScannerAccountResponse.model_validate(account)


async def list_scanner_accounts(db: AsyncSession, active_only: bool = False) -> List[ScannerAccountResponse]:
    stmt = select(ScannerAccount)
    if active_only:
        stmt = stmt.where(ScannerAccount.is_active.is_(True))
    stmt = stmt.order_by(ScannerAccount.created_at.desc())
    result = await db.execute(stmt)
    return [ScannerAccountResponse.model_validate(a) for a in result.scalars().all()]


async def get_scanner_account(db: AsyncSession, account_id: UUID) -> Optional[ScannerAccountResponse]:
    account = await db.get(ScannerAccount, account_id)
    if not account:
        return None
    return ScannerAccountResponse.model_validate(account)


async def update_scanner_account(
    db: AsyncSession,
    account_id: UUID,
    payload: ScannerAccountUpdate,
) -> Optional[ScannerAccountResponse]:
    account = await db.get(ScannerAccount, account_id)
    if not account:
        return None
    if payload.username is not None:
        # The identity row carries the username too; both must move together
        user = await db.get(User, account.user_id)
        user.username = payload.username
        account.username = payload.username
    if payload.role is not None:
        account.role = payload.role.value
    if payload.is_active is not None:
        account.is_active = payload.is_active
    try:
        await db.commit()
        await db.refresh(account)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Username already exists", status.HTTP_409_CONFLICT)
    return ScannerAccountResponse.model_validate(account)


async def set_scanner_active(
    db: AsyncSession,
    account_id: UUID,
    is_active: bool,
) -> Optional[ScannerAccountResponse]:
    """Deactivate instead of delete; attendance records keep pointing at the account."""
    account = await db.get(ScannerAccount, account_id)
    if not account:
        return None
    account.is_active = is_active
    await db.commit()
    await db.refresh(account)
    logger.info("Scanner account %s %s", account.username, "activated" if is_active else "deactivated")
    return ScannerAccountResponse.model_validate(account)
