import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.academic import service as academic_service
from app.api.v1.academic.schemas import ClassCreate, ExamCreate
from app.core.exceptions import ErrorKind, NotFoundError


async def _create_class(client: AsyncClient, name: str) -> dict:
    response = await client.post("/api/academic/classes", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_classes_listed_in_grade_order(admin_client: AsyncClient) -> None:
    for name in ["10", "LKG", "2", "PreKG", "UKG"]:
        await _create_class(admin_client, name)

    response = await admin_client.get("/api/academic/classes")
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["PreKG", "LKG", "UKG", "2", "10"]


@pytest.mark.asyncio
async def test_class_above_twelve_rejected(admin_client: AsyncClient) -> None:
    response = await admin_client.post("/api/academic/classes", json={"name": "13"})
    assert response.status_code == 400
    assert "above 12" in response.json()["detail"]


@pytest.mark.asyncio
async def test_duplicate_class_name_conflicts(admin_client: AsyncClient) -> None:
    await _create_class(admin_client, "5")
    response = await admin_client.post("/api/academic/classes", json={"name": "5"})
    assert response.status_code == 409
    assert response.json()["detail"] == "Class name already exists"


@pytest.mark.asyncio
async def test_rename_class_validates(admin_client: AsyncClient) -> None:
    cls = await _create_class(admin_client, "5")
    bad = await admin_client.put(f"/api/academic/classes/{cls['id']}", json={"name": "14"})
    assert bad.status_code == 400

    ok = await admin_client.put(f"/api/academic/classes/{cls['id']}", json={"name": "6"})
    assert ok.status_code == 200
    assert ok.json()["name"] == "6"


@pytest.mark.asyncio
async def test_sections_filtered_by_class_and_carry_class_name(admin_client: AsyncClient) -> None:
    ten = await _create_class(admin_client, "10")
    lkg = await _create_class(admin_client, "LKG")
    for class_id, name in [(ten["id"], "A"), (lkg["id"], "A"), (ten["id"], "B")]:
        response = await admin_client.post("/api/academic/sections", json={"class_id": class_id, "name": name})
        assert response.status_code == 201

    all_sections = (await admin_client.get("/api/academic/sections")).json()
    assert [(s["class_name"], s["name"]) for s in all_sections] == [("LKG", "A"), ("10", "A"), ("10", "B")]

    only_ten = (await admin_client.get("/api/academic/sections", params={"class_id": ten["id"]})).json()
    assert {s["name"] for s in only_ten} == {"A", "B"}


@pytest.mark.asyncio
async def test_section_for_missing_class_is_not_found(admin_client: AsyncClient) -> None:
    response = await admin_client.post("/api/academic/sections", json={"class_id": 999, "name": "A"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Class not found"


@pytest.mark.asyncio
async def test_exam_for_missing_subject_raises_not_found(db_session: AsyncSession) -> None:
    school_class = await academic_service.create_class(db_session, ClassCreate(name="5"))

    with pytest.raises(NotFoundError) as exc:
        await academic_service.create_exam(db_session, ExamCreate(class_id=school_class.id, subject_id=404))
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert exc.value.message == "Subject not found"


@pytest.mark.asyncio
async def test_exam_defaults_and_subject_name(admin_client: AsyncClient) -> None:
    cls = await _create_class(admin_client, "8")
    subject = await admin_client.post("/api/academic/subjects", json={"class_id": cls["id"], "name": "Maths"})
    assert subject.status_code == 201

    response = await admin_client.post(
        "/api/academic/exams",
        json={"class_id": cls["id"], "subject_id": subject.json()["id"], "exam_date": "2024-03-10"},
    )
    assert response.status_code == 201
    exam = response.json()
    assert exam["exam_type"] == "Assignment"
    assert exam["max_marks"] == 100
    assert exam["class_name"] == "8"
    assert exam["subject_name"] == "Maths"


@pytest.mark.asyncio
async def test_missing_records_return_404(admin_client: AsyncClient) -> None:
    assert (await admin_client.get("/api/academic/classes/42")).status_code == 404
    assert (await admin_client.delete("/api/academic/exams/42")).status_code == 404
