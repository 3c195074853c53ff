import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import Employee
from app.core.qr_code import QRCodeService

from .schemas import EmployeeBulkCreate, EmployeeCreate, EmployeeResponse, EmployeeUpdate

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _build_employee(payload: EmployeeCreate, qr_codes: QRCodeService) -> Employee:
    phone = payload.phone.strip()
    if not phone:
        raise ServiceError("Phone is required", status.HTTP_400_BAD_REQUEST)
    name = _clean(payload.name)
    return Employee(
        phone=phone,
        name=name,
        department=_clean(payload.department),
        employee_id=_clean(payload.employee_id),
        email=_clean(payload.email),
        qr_code=qr_codes.generate_code(phone, name),
        is_active=True,
    )


async def _get(db: AsyncSession, phone: str) -> Optional[Employee]:
    result = await db.execute(select(Employee).where(Employee.phone == phone))
    return result.scalar_one_or_none()


async def create_employee(
    db: AsyncSession,
    payload: EmployeeCreate,
    qr_codes: QRCodeService,
) -> EmployeeResponse:
    employee = _build_employee(payload, qr_codes)
    if await _get(db, employee.phone):
        raise ServiceError("Employee with this phone already exists", status.HTTP_409_CONFLICT)
    try:
        db.add(employee)
        await db.commit()
        await db.refresh(employee)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Employee with this phone already exists", status.HTTP_409_CONFLICT)
    logger.info("Created employee %s", employee.phone)
    return EmployeeResponse.model_validate(employee)


async def bulk_create_employees(
    db: AsyncSession,
    payload: EmployeeBulkCreate,
    qr_codes: QRCodeService,
) -> List[EmployeeResponse]:
    """All-or-nothing insert of a batch of employees."""
    employees = [_build_employee(item, qr_codes) for item in payload.employees]
    phones = [e.phone for e in employees]
    if len(set(phones)) != len(phones):
        raise ServiceError("Duplicate phone numbers in upload", status.HTTP_409_CONFLICT)

    existing = await db.execute(select(Employee.phone).where(Employee.phone.in_(phones)))
    taken = sorted(existing.scalars().all())
    if taken:
        raise ServiceError(f"Employees already exist: {', '.join(taken)}", status.HTTP_409_CONFLICT)

    try:
        db.add_all(employees)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Conflict while creating employees", status.HTTP_409_CONFLICT)
    for e in employees:
        await db.refresh(e)
    logger.info("Bulk created %d employees", len(employees))
    return [EmployeeResponse.model_validate(e) for e in employees]


async def list_employees(
    db: AsyncSession,
    search: Optional[str] = None,
    department: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> List[EmployeeResponse]:
    stmt = select(Employee)
    if search and search.strip():
        term = search.strip().lower()
        stmt = stmt.where(or_(func.lower(Employee.name).contains(term), Employee.phone.contains(term)))
    if department:
        stmt = stmt.where(Employee.department == department)
    if is_active is not None:
        stmt = stmt.where(Employee.is_active.is_(is_active))
    stmt = stmt.order_by(Employee.created_at.desc())
    result = await db.execute(stmt)
    return [EmployeeResponse.model_validate(e) for e in result.scalars().all()]


async def get_employee(db: AsyncSession, phone: str) -> Optional[EmployeeResponse]:
    employee = await _get(db, phone)
    if not employee:
        return None
    return EmployeeResponse.model_validate(employee)


async def update_employee(
    db: AsyncSession,
    phone: str,
    payload: EmployeeUpdate,
    qr_codes: QRCodeService,
) -> Optional[EmployeeResponse]:
    employee = await _get(db, phone)
    if not employee:
        return None
    if payload.name is not None:
        employee.name = _clean(payload.name)
        # Keep the stored code consistent with (phone, name)
        employee.qr_code = qr_codes.generate_code(employee.phone, employee.name)
    if payload.department is not None:
        employee.department = _clean(payload.department)
    if payload.employee_id is not None:
        employee.employee_id = _clean(payload.employee_id)
    if payload.email is not None:
        employee.email = _clean(payload.email)
    try:
        await db.commit()
        await db.refresh(employee)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("QR code collision while updating employee", status.HTTP_409_CONFLICT)
    return EmployeeResponse.model_validate(employee)


async def set_employee_active(db: AsyncSession, phone: str, is_active: bool) -> Optional[EmployeeResponse]:
    """Soft delete (is_active=False) or reactivate. Attendance history is kept either way."""
    employee = await _get(db, phone)
    if not employee:
        return None
    employee.is_active = is_active
    await db.commit()
    await db.refresh(employee)
    logger.info("Employee %s %s", phone, "activated" if is_active else "deactivated")
    return EmployeeResponse.model_validate(employee)


async def regenerate_qr_code(
    db: AsyncSession,
    phone: str,
    qr_codes: QRCodeService,
) -> Optional[EmployeeResponse]:
    """
    Re-derive the code from the current (phone, name).

    The derivation has no nonce, so this only changes the stored code when it
    had drifted from the employee's name.
    """
    employee = await _get(db, phone)
    if not employee:
        return None
    employee.qr_code = qr_codes.generate_code(employee.phone, employee.name)
    await db.commit()
    await db.refresh(employee)
    return EmployeeResponse.model_validate(employee)


async def list_departments(db: AsyncSession) -> List[str]:
    result = await db.execute(
        select(Employee.department)
        .where(Employee.is_active.is_(True), Employee.department.is_not(None))
        .distinct()
        .order_by(Employee.department)
    )
    return list(result.scalars().all())
