import os
from typing import AsyncGenerator, Dict

# Settings are read at import time; pin them before the app is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["QR_SALT"] = "s" * 32
os.environ["ORG_TIMEZONE"] = "UTC"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.employees.schemas import EmployeeCreate
from app.api.v1.employees.service import create_employee
from app.api.v1.scanners.schemas import ScannerAccountCreate, ScannerAccountResponse
from app.api.v1.scanners.service import create_scanner_account
from app.core.enums import ScannerRole
from app.core.qr_code import QRCodeService
from app.db.session import Base, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SALT = "s" * 32
ADMIN_PASSWORD = "AdminPass123"
SCANNER_PASSWORD = "ScannerPass123"


@pytest.fixture()
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test; StaticPool keeps the single connection alive."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override the FastAPI dependency."""
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def qr_codes() -> QRCodeService:
    return QRCodeService(TEST_SALT)


@pytest.fixture()
async def admin_account(db_session: AsyncSession) -> ScannerAccountResponse:
    return await create_scanner_account(
        db_session,
        ScannerAccountCreate(username="admin", password=ADMIN_PASSWORD, role=ScannerRole.ADMIN),
    )


@pytest.fixture()
async def scanner_account(db_session: AsyncSession) -> ScannerAccountResponse:
    return await create_scanner_account(
        db_session,
        ScannerAccountCreate(username="station1", password=SCANNER_PASSWORD, role=ScannerRole.SCANNER),
    )


@pytest.fixture()
async def employee(db_session: AsyncSession, qr_codes: QRCodeService):
    """Active employee; returns the API response model (detached from the session)."""
    return await create_employee(
        db_session,
        EmployeeCreate(phone="9876543210", name="Asha Rao", department="Engineering"),
        qr_codes,
    )


async def login(client: AsyncClient, username: str, password: str) -> Dict[str, str]:
    response = await client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
async def admin_headers(client: AsyncClient, admin_account: ScannerAccountResponse) -> Dict[str, str]:
    return await login(client, "admin", ADMIN_PASSWORD)


@pytest.fixture()
async def scanner_headers(client: AsyncClient, scanner_account: ScannerAccountResponse) -> Dict[str, str]:
    return await login(client, "station1", SCANNER_PASSWORD)


@pytest.fixture()
def login_as(client: AsyncClient):
    """Log in through the API and return bearer headers."""

    async def _login(username: str, password: str) -> Dict[str, str]:
        return await login(client, username, password)

    return _login
