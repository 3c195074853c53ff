import pytest
from httpx import AsyncClient

from app.core.qr_code import QRCodeService

BASE = "/api/v1/employees"


@pytest.mark.asyncio
async def test_create_employee_derives_qr_code(client: AsyncClient, admin_headers, qr_codes: QRCodeService) -> None:
    payload = {
        "phone": " 9123456780 ",
        "name": "Ravi Kumar",
        "department": "Finance",
        "employee_id": "EMP-042",
        "email": "ravi@example.com",
    }
    response = await client.post(BASE, json=payload, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()

    assert data["phone"] == "9123456780"
    assert data["is_active"] is True
    assert data["qr_code"] == qr_codes.generate_code("9123456780", "Ravi Kumar")


@pytest.mark.asyncio
async def test_create_employee_phone_only(client: AsyncClient, admin_headers, qr_codes: QRCodeService) -> None:
    response = await client.post(BASE, json={"phone": "9000000001"}, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["name"] is None
    assert data["qr_code"] == qr_codes.generate_code("9000000001", "")


@pytest.mark.asyncio
async def test_create_duplicate_phone(client: AsyncClient, admin_headers, employee) -> None:
    response = await client.post(BASE, json={"phone": employee.phone, "name": "Someone"}, headers=admin_headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_scanner_role_cannot_manage_employees(client: AsyncClient, scanner_headers) -> None:
    response = await client.post(BASE, json={"phone": "9000000002"}, headers=scanner_headers)
    assert response.status_code == 403
    response = await client.get(BASE, headers=scanner_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unauthenticated_rejected(client: AsyncClient) -> None:
    response = await client.get(BASE)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_employee(client: AsyncClient, admin_headers, employee) -> None:
    response = await client.get(f"{BASE}/{employee.phone}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Asha Rao"

    missing = await client.get(f"{BASE}/0000000000", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_rename_regenerates_qr_code(
    client: AsyncClient, admin_headers, employee, qr_codes: QRCodeService
) -> None:
    response = await client.put(f"{BASE}/{employee.phone}", json={"name": "Asha Menon"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Asha Menon"
    assert data["qr_code"] != employee.qr_code
    assert data["qr_code"] == qr_codes.generate_code(employee.phone, "Asha Menon")


@pytest.mark.asyncio
async def test_update_without_rename_keeps_qr_code(client: AsyncClient, admin_headers, employee) -> None:
    response = await client.put(f"{BASE}/{employee.phone}", json={"department": "Operations"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["department"] == "Operations"
    assert data["qr_code"] == employee.qr_code


@pytest.mark.asyncio
async def test_update_missing_employee(client: AsyncClient, admin_headers) -> None:
    response = await client.put(f"{BASE}/0000000000", json={"name": "Nobody"}, headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_soft_delete_and_activate(client: AsyncClient, admin_headers, employee) -> None:
    response = await client.delete(f"{BASE}/{employee.phone}", headers=admin_headers)
    assert response.status_code == 204

    fetched = await client.get(f"{BASE}/{employee.phone}", headers=admin_headers)
    assert fetched.json()["is_active"] is False

    inactive = await client.get(BASE, params={"is_active": "false"}, headers=admin_headers)
    assert [e["phone"] for e in inactive.json()] == [employee.phone]

    response = await client.post(f"{BASE}/{employee.phone}/activate", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is True


@pytest.mark.asyncio
async def test_regenerate_is_stable_for_unchanged_identity(client: AsyncClient, admin_headers, employee) -> None:
    response = await client.post(f"{BASE}/{employee.phone}/regenerate-qr", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["qr_code"] == employee.qr_code


@pytest.mark.asyncio
async def test_list_search_and_departments(client: AsyncClient, admin_headers, employee) -> None:
    await client.post(BASE, json={"phone": "9111111111", "name": "Vikram Shah", "department": "Finance"}, headers=admin_headers)
    await client.post(BASE, json={"phone": "9222222222", "name": "Meera Iyer"}, headers=admin_headers)

    by_name = await client.get(BASE, params={"search": "ASHA"}, headers=admin_headers)
    assert [e["phone"] for e in by_name.json()] == [employee.phone]

    by_phone = await client.get(BASE, params={"search": "91111"}, headers=admin_headers)
    assert [e["phone"] for e in by_phone.json()] == ["9111111111"]

    by_department = await client.get(BASE, params={"department": "Finance"}, headers=admin_headers)
    assert [e["phone"] for e in by_department.json()] == ["9111111111"]

    departments = await client.get(f"{BASE}/departments", headers=admin_headers)
    assert departments.json() == ["Engineering", "Finance"]


@pytest.mark.asyncio
async def test_bulk_create(client: AsyncClient, admin_headers, qr_codes: QRCodeService) -> None:
    payload = {"employees": [{"phone": "9300000001", "name": "A One"}, {"phone": "9300000002", "name": "B Two"}]}
    response = await client.post(f"{BASE}/bulk", json=payload, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert len(data) == 2
    assert data[0]["qr_code"] == qr_codes.generate_code("9300000001", "A One")

    again = await client.post(f"{BASE}/bulk", json=payload, headers=admin_headers)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_bulk_create_rejects_repeated_phone(client: AsyncClient, admin_headers) -> None:
    payload = {"employees": [{"phone": "9400000001"}, {"phone": "9400000001"}]}
    response = await client.post(f"{BASE}/bulk", json=payload, headers=admin_headers)
    assert response.status_code == 409

    listing = await client.get(BASE, headers=admin_headers)
    assert listing.json() == []


@pytest.mark.asyncio
async def test_qr_image(client: AsyncClient, admin_headers, employee) -> None:
    response = await client.get(f"{BASE}/{employee.phone}/qr.png", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")
