from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Student, StudentMark


@pytest.fixture()
async def class_marks(db_session: AsyncSession) -> None:
    db_session.add_all([
        Student(student_id="1@sks", name="Asha", class_name="10", section="A"),
        Student(student_id="2@sks", name="Bala", class_name="10", section="B"),
        Student(student_id="3@sks", name="Charu", class_name="9", section="A"),
    ])
    db_session.add_all([
        StudentMark(student_id="1@sks", staff_id="staff100@sks", subject="Maths", exam_type="Unit Test",
                    marks=40, max_marks=50, exam_date=date(2024, 1, 10)),
        StudentMark(student_id="2@sks", staff_id="staff100@sks", subject="Maths", exam_type="Unit Test",
                    marks=30, max_marks=50, exam_date=date(2024, 1, 10)),
        StudentMark(student_id="1@sks", staff_id="staff100@sks", subject="Maths", exam_type="Unit Test",
                    marks=45, max_marks=50, exam_date=date(2024, 2, 10)),
        StudentMark(student_id="3@sks", staff_id="staff101@sks", subject="Science", exam_type="Mid Term",
                    marks=33, max_marks=40, exam_date=date(2024, 1, 5)),
    ])
    await db_session.commit()


@pytest.mark.asyncio
async def test_list_marks_with_student_details(admin_client: AsyncClient, class_marks) -> None:
    marks = (await admin_client.get("/api/marks")).json()
    assert [m["exam_date"] for m in marks] == ["2024-01-05", "2024-01-10", "2024-01-10", "2024-02-10"]

    asha = (await admin_client.get("/api/marks", params={"student_id": "1@sks"})).json()
    assert {m["student_name"] for m in asha} == {"Asha"}
    assert asha[0]["obtained_marks"] == 40
    assert asha[0]["class"] == "10"

    tenth = (await admin_client.get("/api/marks", params={"class": "10"})).json()
    assert len(tenth) == 3


@pytest.mark.asyncio
async def test_class_summary_orders_by_average(admin_client: AsyncClient, class_marks) -> None:
    summary = (await admin_client.get("/api/marks/summary", params={"class": "10"})).json()
    assert [(s["student_id"], s["avg_pct"], s["exam_count"]) for s in summary] == [
        ("1@sks", 85.0, 2),
        ("2@sks", 60.0, 1),
    ]
    assert summary[0]["total_obtained"] == 85
    assert summary[0]["total_max"] == 100

    section_b = (await admin_client.get("/api/marks/summary", params={"class": "10", "section": "B"})).json()
    assert [s["student_id"] for s in section_b] == ["2@sks"]


@pytest.mark.asyncio
async def test_percentages_are_not_truncated(admin_client: AsyncClient, class_marks) -> None:
    summary = (await admin_client.get("/api/marks/summary", params={"class": "9"})).json()
    assert summary[0]["avg_pct"] == 82.5


@pytest.mark.asyncio
async def test_exam_timeline(admin_client: AsyncClient, class_marks) -> None:
    timeline = (await admin_client.get("/api/marks/timeline", params={"class": "10"})).json()
    assert [(p["exam_date"], p["avg_pct"], p["student_count"]) for p in timeline] == [
        ("2024-01-10", 70.0, 2),
        ("2024-02-10", 90.0, 1),
    ]


@pytest.mark.asyncio
async def test_summary_requires_class(admin_client: AsyncClient) -> None:
    assert (await admin_client.get("/api/marks/summary")).status_code == 422
