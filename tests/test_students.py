import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import verify_password
from app.core.models import Student


async def _create(client: AsyncClient, **fields) -> dict:
    response = await client.post("/api/students", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_student_ids_are_sequential(admin_client: AsyncClient) -> None:
    first = await _create(admin_client, name="Asha")
    second = await _create(admin_client, name="Bala")
    assert first["student_id"] == "1@sks"
    assert second["student_id"] == "2@sks"


@pytest.mark.asyncio
async def test_supplied_student_id_is_kept_and_next_follows_it(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Asha", student_id="5@sks")
    nxt = await _create(admin_client, name="Bala")
    assert nxt["student_id"] == "6@sks"

    dup = await admin_client.post("/api/students", json={"name": "Chitra", "student_id": "5@sks"})
    assert dup.status_code == 409


@pytest.mark.asyncio
async def test_roll_numbers_follow_alphabetical_rank(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Mohan", **{"class": "10-A"})
    zara = await _create(admin_client, name="Zara", **{"class": "10-A"})
    anil = await _create(admin_client, name="Anil", **{"class": "10-A"})

    assert zara["roll_no"] == "STUD10A2@sks"
    assert anil["roll_no"] == "STUD10A1@sks"
    assert anil["class"] == "10-A"


@pytest.mark.asyncio
async def test_explicit_roll_number_wins(admin_client: AsyncClient) -> None:
    student = await _create(admin_client, name="Anil", roll_no=" R-7 ", **{"class": "4"})
    assert student["roll_no"] == "R-7"


@pytest.mark.asyncio
async def test_class_change_regenerates_roll_number(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Bhavna", **{"class": "9"})
    student = await _create(admin_client, name="Charu", **{"class": "8"})
    assert student["roll_no"] == "STUD81@sks"

    moved = await admin_client.put(f"/api/students/{student['id']}", json={"class": "9"})
    assert moved.status_code == 200
    assert moved.json()["roll_no"] == "STUD92@sks"

    # Same class, no roll supplied: roll is left alone
    renamed = await admin_client.put(f"/api/students/{student['id']}", json={"phone": "12345"})
    assert renamed.json()["roll_no"] == "STUD92@sks"

    forced = await admin_client.put(f"/api/students/{student['id']}", json={"class": "10", "roll_no": "KEEP1"})
    assert forced.json()["roll_no"] == "KEEP1"


@pytest.mark.asyncio
async def test_password_derived_from_date_of_birth(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    student = await _create(admin_client, name="Asha", date_of_birth="2010-07-04")
    assert "password_hash" not in student

    result = await db_session.execute(select(Student).where(Student.id == student["id"]))
    row = result.scalar_one()
    assert verify_password("040710", row.password_hash)

    await admin_client.put(f"/api/students/{student['id']}", json={"date_of_birth": "2011-08-05"})
    await db_session.refresh(row)
    assert verify_password("050811", row.password_hash)


@pytest.mark.asyncio
async def test_no_date_of_birth_means_no_password(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    student = await _create(admin_client, name="Asha")
    row = (await db_session.execute(select(Student).where(Student.id == student["id"]))).scalar_one()
    assert row.password_hash is None


@pytest.mark.asyncio
async def test_student_id_update_must_match_format(admin_client: AsyncClient) -> None:
    student = await _create(admin_client, name="Asha")
    bad = await admin_client.put(f"/api/students/{student['id']}", json={"student_id": "ABC"})
    assert bad.status_code == 400

    good = await admin_client.put(f"/api/students/{student['id']}", json={"student_id": "40@sks"})
    assert good.status_code == 200
    assert good.json()["student_id"] == "40@sks"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Asha", email="asha@sksschool.com")
    response = await admin_client.post("/api/students", json={"name": "Bala", "email": "asha@sksschool.com"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"


@pytest.mark.asyncio
async def test_list_in_grade_order_and_filters(admin_client: AsyncClient) -> None:
    await _create(admin_client, name="Tara", section="A", **{"class": "10"})
    await _create(admin_client, name="Ravi", section="B", **{"class": "LKG"})
    await _create(admin_client, name="Anu", section="A", **{"class": "10"})

    listing = (await admin_client.get("/api/students")).json()
    assert [s["name"] for s in listing] == ["Ravi", "Anu", "Tara"]

    filtered = (await admin_client.get("/api/students", params={"class": "10", "section": "A"})).json()
    assert [s["name"] for s in filtered] == ["Anu", "Tara"]


@pytest.mark.asyncio
async def test_lookup_by_external_id_and_delete(admin_client: AsyncClient) -> None:
    student = await _create(admin_client, name="Asha")
    found = await admin_client.get(f"/api/students/by-student-id/{student['student_id']}")
    assert found.status_code == 200
    assert found.json()["id"] == student["id"]

    assert (await admin_client.delete(f"/api/students/{student['id']}")).status_code == 204
    assert (await admin_client.get(f"/api/students/{student['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_name_is_required(admin_client: AsyncClient) -> None:
    response = await admin_client.post("/api/students", json={"name": ""})
    assert response.status_code == 422
