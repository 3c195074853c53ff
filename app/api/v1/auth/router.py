from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_scanner
from app.auth.schemas import AccountInfo, CurrentScanner, LoginRequest, LoginResponse
from app.auth.services import login_scanner
from app.core.exceptions import ServiceError
from app.core.models import ScannerAccount
from app.db.session import get_db

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        return await login_scanner(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    payload = LoginRequest(username=form_data.username.strip(), password=form_data.password)
    try:
        result = await login_scanner(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
    }


@router.get("/me", response_model=AccountInfo)
async def me(
    current_scanner: CurrentScanner = Depends(get_current_scanner),
    db: AsyncSession = Depends(get_db),
) -> AccountInfo:
    account = await db.get(ScannerAccount, current_scanner.id)
    return AccountInfo(
        id=account.id,
        username=account.username,
        role=account.role,
        last_login_at=account.last_login_at,
    )
