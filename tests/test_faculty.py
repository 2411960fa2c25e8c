import pytest
from httpx import AsyncClient

from app.api.v1.faculty import service as faculty_service


async def _create(client: AsyncClient, **fields) -> dict:
    response = await client.post("/api/faculty", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_staff_ids_start_at_100(admin_client: AsyncClient) -> None:
    first = await _create(admin_client, name="Meera")
    second = await _create(admin_client, name="Kiran")
    assert first["staff_id"] == "staff100@sks"
    assert second["staff_id"] == "staff101@sks"


@pytest.mark.asyncio
async def test_homeroom_held_by_one_active_member(admin_client: AsyncClient) -> None:
    holder = await _create(admin_client, name="Meera", section="A", **{"class": "5"})

    response = await admin_client.post("/api/faculty", json={"name": "Kiran", "class": "5", "section": "A"})
    assert response.status_code == 409
    detail = response.json()["detail"]
    assert "Meera" in detail and holder["staff_id"] in detail

    # Inactive members do not hold the homeroom
    inactive = await _create(admin_client, name="Ravi", section="A", status="Inactive", **{"class": "5"})
    assert inactive["status"] == "Inactive"

    retire = await admin_client.put(f"/api/faculty/{holder['id']}", json={"status": "Retired"})
    assert retire.status_code == 200
    await _create(admin_client, name="Kiran", section="A", **{"class": "5"})


@pytest.mark.asyncio
async def test_update_into_taken_homeroom_conflicts(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Meera", section="A", **{"class": "5"})
    other = await _create(admin_client, name="Kiran", section="B", **{"class": "5"})

    response = await admin_client.put(f"/api/faculty/{other['id']}", json={"section": "A"})
    assert response.status_code == 409

    # Re-saving one's own homeroom is fine
    same = await admin_client.put(f"/api/faculty/{other['id']}", json={"section": "B", "designation": "PGT"})
    assert same.status_code == 200
    assert same.json()["designation"] == "PGT"


@pytest.mark.asyncio
async def test_duplicate_email_fails_without_retry(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Meera", email="meera@sksschool.com")
    response = await admin_client.post("/api/faculty", json={"name": "Kiran", "email": "meera@sksschool.com"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"


@pytest.mark.asyncio
async def test_staff_id_race_gives_up_after_three_attempts(admin_client: AsyncClient, monkeypatch) -> None:
    await _create(admin_client, name="Meera")
    calls = []

    async def stale_generator(db):
        calls.append(1)
        return "staff100@sks"

    monkeypatch.setattr(faculty_service, "generate_staff_id", stale_generator)
    response = await admin_client.post("/api/faculty", json={"name": "Kiran"})

    assert response.status_code == 409
    assert response.json()["detail"] == "Could not generate unique staff ID, please try again"
    assert len(calls) == faculty_service.STAFF_ID_MAX_ATTEMPTS


@pytest.mark.asyncio
async def test_staff_id_race_recovers_on_next_attempt(admin_client: AsyncClient, monkeypatch) -> None:
    await _create(admin_client, name="Meera")
    real_generator = faculty_service.generate_staff_id
    calls = []

    async def racing_generator(db):
        calls.append(1)
        if len(calls) == 1:
            return "staff100@sks"
        return await real_generator(db)

    monkeypatch.setattr(faculty_service, "generate_staff_id", racing_generator)
    response = await admin_client.post("/api/faculty", json={"name": "Kiran"})

    assert response.status_code == 201
    assert response.json()["staff_id"] == "staff101@sks"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_list_by_class_and_section(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Meera", section="A", **{"class": "5"})
    await _create(admin_client, name="Kiran", section="B", **{"class": "5"})

    response = await admin_client.get("/api/faculty/class/5/section/A")
    assert response.status_code == 200
    assert [f["name"] for f in response.json()] == ["Meera"]


@pytest.mark.asyncio
async def test_faculty_crud(admin_client: AsyncClient) -> None:
    member = await _create(admin_client, name="Meera", experience=4.5, salary=30000, date_of_birth="1990-01-02")
    fetched = await admin_client.get(f"/api/faculty/{member['id']}")
    assert fetched.json()["experience"] == 4.5

    assert (await admin_client.delete(f"/api/faculty/{member['id']}")).status_code == 204
    assert (await admin_client.get(f"/api/faculty/{member['id']}")).status_code == 404
