from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin
from app.core.dependencies import get_qr_code_service
from app.core.exceptions import ServiceError
from app.core.qr_code import QRCodeService
from app.db.session import get_db

from .schemas import EmployeeBulkCreate, EmployeeCreate, EmployeeResponse, EmployeeUpdate
from . import service

router = APIRouter(
    prefix="/api/v1/employees",
    tags=["employees"],
    dependencies=[Depends(require_admin)],
)

EMPLOYEE_NOT_FOUND = "Employee not found"


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    qr_codes: QRCodeService = Depends(get_qr_code_service),
) -> EmployeeResponse:
    try:
        return await service.create_employee(db, payload, qr_codes)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/bulk", response_model=List[EmployeeResponse], status_code=status.HTTP_201_CREATED)
async def bulk_create_employees(
    payload: EmployeeBulkCreate,
    db: AsyncSession = Depends(get_db),
    qr_codes: QRCodeService = Depends(get_qr_code_service),
) -> List[EmployeeResponse]:
    try:
        return await service.bulk_create_employees(db, payload, qr_codes)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    search: Optional[str] = Query(None, description="Case-insensitive match on name or phone"),
    department: Optional[str] = None,
    is_active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
) -> List[EmployeeResponse]:
    return await service.list_employees(db, search=search, department=department, is_active=is_active)


@router.get("/departments", response_model=List[str])
async def list_departments(db: AsyncSession = Depends(get_db)) -> List[str]:
    return await service.list_departments(db)


@router.get("/{phone}", response_model=EmployeeResponse)
async def get_employee(phone: str, db: AsyncSession = Depends(get_db)) -> EmployeeResponse:
    employee = await service.get_employee(db, phone)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)
    return employee


@router.put("/{phone}", response_model=EmployeeResponse)
async def update_employee(
    phone: str,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    qr_codes: QRCodeService = Depends(get_qr_code_service),
) -> EmployeeResponse:
    try:
        employee = await service.update_employee(db, phone, payload, qr_codes)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)
    return employee


@router.delete("/{phone}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_employee(phone: str, db: AsyncSession = Depends(get_db)) -> None:
    """Soft delete: the employee's code stops producing successful scans."""
    if not await service.set_employee_active(db, phone, False):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)


@router.post("/{phone}/activate", response_model=EmployeeResponse)
async def activate_employee(phone: str, db: AsyncSession = Depends(get_db)) -> EmployeeResponse:
    employee = await service.set_employee_active(db, phone, True)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)
    return employee


@router.post("/{phone}/regenerate-qr", response_model=EmployeeResponse)
async def regenerate_qr_code(
    phone: str,
    db: AsyncSession = Depends(get_db),
    qr_codes: QRCodeService = Depends(get_qr_code_service),
) -> EmployeeResponse:
    employee = await service.regenerate_qr_code(db, phone, qr_codes)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)
    return employee


@router.get("/{phone}/qr.png", response_class=Response)
async def employee_qr_image(
    phone: str,
    box_size: int = Query(10, ge=1, le=40),
    border: int = Query(2, ge=0, le=10),
    db: AsyncSession = Depends(get_db),
    qr_codes: QRCodeService = Depends(get_qr_code_service),
) -> Response:
    employee = await service.get_employee(db, phone)
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)
    png = qr_codes.render_png(employee.qr_code, box_size=box_size, border=border)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{employee.phone}.png"'},
    )
