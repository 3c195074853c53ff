from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentScanner
from app.auth.security import decode_access_token
from app.core.models import ScannerAccount
from app.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login-oauth")


async def get_current_scanner(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentScanner:
    """Resolve the active scanner account behind the access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        claims = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(ScannerAccount).where(ScannerAccount.id == claims.account_id))
    account = result.scalar_one_or_none()
    # Deactivation takes effect on the next request, not at token expiry
    if not account or not account.is_active:
        raise credentials_exception

    return CurrentScanner(
        id=account.id,
        user_id=account.user_id,
        username=account.username,
        role=account.role,
    )
