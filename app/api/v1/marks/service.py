from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Student, StudentMark

from .schemas import ExamTimelinePoint, MarkResponse, StudentMarkSummary

# Marks reference students by their external id
_JOIN = StudentMark.student_id == Student.student_id


def _percentage():
    return StudentMark.marks * 100.0 / StudentMark.max_marks


def _rounded(value) -> Optional[float]:
    return round(float(value), 1) if value is not None else None


async def list_marks(
    db: AsyncSession,
    student_id: Optional[str] = None,
    class_name: Optional[str] = None,
) -> List[MarkResponse]:
    stmt = select(StudentMark, Student.name, Student.class_name, Student.section).join(Student, _JOIN)
    if student_id:
        stmt = stmt.where(StudentMark.student_id == student_id)
    if class_name:
        stmt = stmt.where(Student.class_name == class_name)
    stmt = stmt.order_by(StudentMark.exam_date.asc(), StudentMark.subject.asc())
    result = await db.execute(stmt)
    return [
        MarkResponse(
            id=mark.id,
            student_id=mark.student_id,
            staff_id=mark.staff_id,
            subject=mark.subject,
            exam_type=mark.exam_type,
            obtained_marks=float(mark.marks),
            max_marks=float(mark.max_marks),
            exam_date=mark.exam_date,
            student_name=name,
            class_name=cls,
            section=section,
            created_at=mark.created_at,
            updated_at=mark.updated_at,
        )
        for mark, name, cls, section in result.all()
    ]


async def summarize_class(
    db: AsyncSession,
    class_name: str,
    section: Optional[str] = None,
) -> List[StudentMarkSummary]:
    """One row per student of the class with average percentage, best first."""
    avg_pct = func.avg(_percentage())
    stmt = (
        select(
            StudentMark.student_id,
            Student.name,
            Student.class_name,
            Student.section,
            func.count(StudentMark.id),
            avg_pct,
            func.sum(StudentMark.marks),
            func.sum(StudentMark.max_marks),
        )
        .join(Student, _JOIN)
        .where(Student.class_name == class_name)
    )
    if section:
        stmt = stmt.where(Student.section == section)
    stmt = stmt.group_by(
        StudentMark.student_id, Student.name, Student.class_name, Student.section
    ).order_by(avg_pct.desc())
    result = await db.execute(stmt)
    return [
        StudentMarkSummary(
            student_id=sid,
            student_name=name,
            class_name=cls,
            section=sec,
            exam_count=count,
            avg_pct=_rounded(avg),
            total_obtained=float(obtained or 0),
            total_max=float(maximum or 0),
        )
        for sid, name, cls, sec, count, avg, obtained, maximum in result.all()
    ]


async def class_timeline(db: AsyncSession, class_name: str) -> List[ExamTimelinePoint]:
    """Class average per exam (date, type, subject), oldest first."""
    stmt = (
        select(
            StudentMark.exam_date,
            StudentMark.exam_type,
            StudentMark.subject,
            StudentMark.max_marks,
            func.avg(_percentage()),
            func.count(StudentMark.id),
        )
        .join(Student, _JOIN)
        .where(Student.class_name == class_name)
        .group_by(StudentMark.exam_date, StudentMark.exam_type, StudentMark.subject, StudentMark.max_marks)
        .order_by(StudentMark.exam_date.asc(), StudentMark.exam_type.asc())
    )
    result = await db.execute(stmt)
    return [
        ExamTimelinePoint(
            exam_date=exam_date,
            exam_type=exam_type,
            subject=subject,
            max_marks=float(max_marks),
            avg_pct=_rounded(avg),
            student_count=count,
        )
        for exam_date, exam_type, subject, max_marks, avg, count in result.all()
    ]
