from fastapi import Depends, HTTPException, status

from app.auth.dependencies import get_current_scanner
from app.auth.schemas import CurrentScanner


async def require_admin(
    current_scanner: CurrentScanner = Depends(get_current_scanner),
) -> CurrentScanner:
    """Require the admin role. Used for employee, scanner account, and report endpoints."""
    if not current_scanner.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can perform this action",
        )
    return current_scanner
