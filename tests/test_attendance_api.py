from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from app.api.v1.attendance.scan_recorder import ScanRecorder
from app.core.dependencies import get_scan_recorder
from app.core.enums import StoreErrorKind
from app.core.exceptions import StoreError
from app.main import app

SCAN = "/api/v1/attendance/scan"


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


@pytest.mark.asyncio
async def test_scan_success_then_duplicate(client: AsyncClient, scanner_headers, employee) -> None:
    first = await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    assert first.status_code == 200
    data = first.json()
    assert data["outcome"] == "success"
    assert data["success"] is True
    assert data["employee_name"] == "Asha Rao"
    assert data["timestamp"] is not None

    second = await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    assert second.status_code == 200
    assert second.json()["outcome"] == "duplicate"
    assert second.json()["message"] == "Employee already scanned today"


@pytest.mark.asyncio
async def test_scan_invalid_code(client: AsyncClient, scanner_headers, employee) -> None:
    response = await client.post(SCAN, json={"code": "not-a-real-code"}, headers=scanner_headers)
    assert response.status_code == 200
    assert response.json()["outcome"] == "invalid"
    assert response.json()["message"] == "Invalid QR code"


@pytest.mark.asyncio
async def test_scan_inactive_employee(client: AsyncClient, admin_headers, scanner_headers, employee) -> None:
    await client.delete(f"/api/v1/employees/{employee.phone}", headers=admin_headers)
    response = await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    assert response.json()["outcome"] == "inactive"
    assert response.json()["employee_name"] == "Asha Rao"


@pytest.mark.asyncio
async def test_scan_requires_authentication(client: AsyncClient, employee) -> None:
    response = await client.post(SCAN, json={"code": employee.qr_code})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_scan_empty_code_rejected(client: AsyncClient, scanner_headers) -> None:
    response = await client.post(SCAN, json={"code": ""}, headers=scanner_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_scan_store_unavailable_returns_503(client: AsyncClient, scanner_headers, employee) -> None:
    class UnavailableRecorder(ScanRecorder):
        def __init__(self) -> None:
            pass

        async def record_scan(self, code, scanner_account_id):
            raise StoreError(StoreErrorKind.TRANSIENT, "Database unavailable")

    app.dependency_overrides[get_scan_recorder] = UnavailableRecorder
    response = await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_check_daily_attendance(client: AsyncClient, scanner_headers, employee) -> None:
    before = await client.get(f"/api/v1/attendance/check/{employee.phone}", headers=scanner_headers)
    assert before.json()["scanned"] is False

    await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)

    after = await client.get(f"/api/v1/attendance/check/{employee.phone}", headers=scanner_headers)
    assert after.json()["scanned"] is True
    assert after.json()["date"] == _today()


@pytest.mark.asyncio
async def test_daily_report(client: AsyncClient, admin_headers, scanner_headers, employee) -> None:
    await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    await client.post(SCAN, json={"code": "unknown"}, headers=scanner_headers)

    response = await client.get("/api/v1/attendance/daily-report", headers=admin_headers)
    assert response.status_code == 200
    report = response.json()
    assert report["date"] == _today()
    assert report["total_scans"] == 2
    assert report["successful_scans"] == 1
    assert report["duplicate_scans"] == 1
    assert report["invalid_scans"] == 0
    assert report["inactive_scans"] == 0
    assert sorted(r["status"] for r in report["records"]) == ["duplicate", "success"]


@pytest.mark.asyncio
async def test_daily_report_other_date_is_empty(client: AsyncClient, admin_headers, scanner_headers, employee) -> None:
    await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)
    response = await client.get("/api/v1/attendance/daily-report", params={"date": "2020-01-01"}, headers=admin_headers)
    assert response.json()["total_scans"] == 0


@pytest.mark.asyncio
async def test_daily_report_admin_only(client: AsyncClient, scanner_headers) -> None:
    response = await client.get("/api/v1/attendance/daily-report", headers=scanner_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_records_pagination_and_filters(client: AsyncClient, admin_headers, scanner_headers, employee) -> None:
    for _ in range(3):
        await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)

    page = await client.get(
        "/api/v1/attendance/records", params={"page": 1, "page_size": 2}, headers=admin_headers
    )
    assert page.status_code == 200
    body = page.json()
    assert body["total"] == 3
    assert len(body["records"]) == 2

    page2 = await client.get(
        "/api/v1/attendance/records", params={"page": 2, "page_size": 2}, headers=admin_headers
    )
    assert len(page2.json()["records"]) == 1

    other_phone = await client.get(
        "/api/v1/attendance/records", params={"employee_phone": "0000000000"}, headers=admin_headers
    )
    assert other_phone.json()["total"] == 0

    bad_range = await client.get(
        "/api/v1/attendance/records",
        params={"date_from": "2026-02-01", "date_to": "2026-01-01"},
        headers=admin_headers,
    )
    assert bad_range.status_code == 400


@pytest.mark.asyncio
async def test_scanner_sees_only_own_records(
    client: AsyncClient, admin_headers, scanner_headers, scanner_account, employee
) -> None:
    # Admin scans first (success), then the station (duplicate)
    await client.post(SCAN, json={"code": employee.qr_code}, headers=admin_headers)
    await client.post(SCAN, json={"code": employee.qr_code}, headers=scanner_headers)

    own = await client.get("/api/v1/attendance/records", headers=scanner_headers)
    records = own.json()["records"]
    assert own.json()["total"] == 1
    assert records[0]["status"] == "duplicate"
    assert records[0]["scanner_id"] == str(scanner_account.id)

    everything = await client.get("/api/v1/attendance/records", headers=admin_headers)
    assert everything.json()["total"] == 2


@pytest.mark.asyncio
async def test_check_unknown_employee(client: AsyncClient, scanner_headers) -> None:
    response = await client.get("/api/v1/attendance/check/0000000000", headers=scanner_headers)
    assert response.status_code == 404
