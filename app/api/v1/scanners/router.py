from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.auth.schemas import CurrentScanner
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import ScannerAccountCreate, ScannerAccountResponse, ScannerAccountUpdate
from . import service

router = APIRouter(
    prefix="/api/v1/scanners",
    tags=["scanners"],
    dependencies=[Depends(require_admin)],
)

ACCOUNT_NOT_FOUND = "Scanner account not found"


@router.post("", response_model=ScannerAccountResponse, status_code=status.HTTP_201_CREATED)
async def create_scanner_account(
    payload: ScannerAccountCreate,
    db: AsyncSession = Depends(get_db),
) -> ScannerAccountResponse:
    try:
        return await service.create_scanner_account(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[ScannerAccountResponse])
async def list_scanner_accounts(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> List[ScannerAccountResponse]:
    return await service.list_scanner_accounts(db, active_only=active_only)


@router.get("/{account_id}", response_model=ScannerAccountResponse)
async def get_scanner_account(account_id: UUID, db: AsyncSession = Depends(get_db)) -> ScannerAccountResponse:
    account = await service.get_scanner_account(db, account_id)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ACCOUNT_NOT_FOUND)
    return account


@router.put("/{account_id}", response_model=ScannerAccountResponse)
async def update_scanner_account(
    account_id: UUID,
    payload: ScannerAccountUpdate,
    db: AsyncSession = Depends(get_db),
    current_scanner: CurrentScanner = Depends(require_admin),
) -> ScannerAccountResponse:
    if account_id == current_scanner.id and payload.is_active is False:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
    try:
        account = await service.update_scanner_account(db, account_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ACCOUNT_NOT_FOUND)
    return account


@router.post("/{account_id}/deactivate", response_model=ScannerAccountResponse)
async def deactivate_scanner_account(
    account_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_scanner: CurrentScanner = Depends(require_admin),
) -> ScannerAccountResponse:
    if account_id == current_scanner.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate your own account")
    account = await service.set_scanner_active(db, account_id, False)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ACCOUNT_NOT_FOUND)
    return account


@router.post("/{account_id}/activate", response_model=ScannerAccountResponse)
async def activate_scanner_account(account_id: UUID, db: AsyncSession = Depends(get_db)) -> ScannerAccountResponse:
    account = await service.set_scanner_active(db, account_id, True)
    if not account:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ACCOUNT_NOT_FOUND)
    return account
