from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.class_order import sort_by_class, validate_class_name
from app.core.exceptions import ConflictError, NotFoundError
from app.core.models import Exam, SchoolClass, Section, Subject

from .schemas import (
    ClassCreate,
    ClassResponse,
    ClassUpdate,
    ExamCreate,
    ExamResponse,
    ExamUpdate,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
    SubjectCreate,
    SubjectResponse,
    SubjectUpdate,
)


# ----- helpers -----

def _section_to_response(s: Section) -> SectionResponse:
    return SectionResponse(
        id=s.id,
        class_id=s.class_id,
        class_name=s.school_class.name,
        name=s.name,
        display_order=s.display_order or 0,
        created_at=s.created_at,
    )


def _subject_to_response(s: Subject) -> SubjectResponse:
    return SubjectResponse(
        id=s.id,
        class_id=s.class_id,
        class_name=s.school_class.name,
        name=s.name,
        display_order=s.display_order or 0,
        created_at=s.created_at,
    )


def _exam_to_response(e: Exam) -> ExamResponse:
    return ExamResponse(
        id=e.id,
        class_id=e.class_id,
        class_name=e.school_class.name,
        subject_id=e.subject_id,
        subject_name=e.subject.name if e.subject else None,
        exam_type=e.exam_type,
        exam_date=e.exam_date,
        max_marks=float(e.max_marks),
        description=e.description,
        created_at=e.created_at,
    )


async def _ensure_class(db: AsyncSession, class_id: int) -> SchoolClass:
    obj = await db.get(SchoolClass, class_id)
    if not obj:
        raise NotFoundError("Class not found")
    return obj


async def _ensure_subject(db: AsyncSession, subject_id: Optional[int]) -> None:
    if subject_id is not None and not await db.get(Subject, subject_id):
        raise NotFoundError("Subject not found")


# ----- classes -----

async def list_classes(db: AsyncSession) -> List[ClassResponse]:
    result = await db.execute(select(SchoolClass).order_by(SchoolClass.name.asc()))
    rows = sort_by_class(result.scalars().all(), key=lambda c: c.name)
    return [ClassResponse.model_validate(c) for c in rows]


async def get_class(db: AsyncSession, class_id: int) -> Optional[ClassResponse]:
    obj = await db.get(SchoolClass, class_id)
    return ClassResponse.model_validate(obj) if obj else None


async def create_class(db: AsyncSession, payload: ClassCreate) -> ClassResponse:
    name = payload.name.strip()
    validate_class_name(name)
    try:
        obj = SchoolClass(name=name, display_order=0)
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return ClassResponse.model_validate(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Class name already exists")


async def update_class(db: AsyncSession, class_id: int, payload: ClassUpdate) -> Optional[ClassResponse]:
    obj = await db.get(SchoolClass, class_id)
    if not obj:
        return None
    name = payload.name.strip()
    validate_class_name(name)
    obj.name = name
    try:
        await db.commit()
        await db.refresh(obj)
        return ClassResponse.model_validate(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Class name already exists")


async def delete_class(db: AsyncSession, class_id: int) -> bool:
    obj = await db.get(SchoolClass, class_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


# ----- sections -----

def _section_query():
    return select(Section).join(SchoolClass, SchoolClass.id == Section.class_id).options(
        selectinload(Section.school_class)
    )


async def list_sections(db: AsyncSession, class_id: Optional[int] = None) -> List[SectionResponse]:
    stmt = _section_query()
    if class_id is not None:
        stmt = stmt.where(Section.class_id == class_id).order_by(Section.name.asc())
    else:
        stmt = stmt.order_by(SchoolClass.name.asc(), Section.name.asc())
    result = await db.execute(stmt)
    rows = sort_by_class(result.scalars().all(), key=lambda s: s.school_class.name)
    return [_section_to_response(s) for s in rows]


async def _load_section(db: AsyncSession, section_id: int) -> Optional[Section]:
    result = await db.execute(
        _section_query().where(Section.id == section_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_section(db: AsyncSession, section_id: int) -> Optional[SectionResponse]:
    obj = await _load_section(db, section_id)
    return _section_to_response(obj) if obj else None


async def create_section(db: AsyncSession, payload: SectionCreate) -> SectionResponse:
    await _ensure_class(db, payload.class_id)
    try:
        obj = Section(name=payload.name.strip(), class_id=payload.class_id, display_order=0)
        db.add(obj)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Section already exists for this class")
    return _section_to_response(await _load_section(db, obj.id))


async def update_section(db: AsyncSession, section_id: int, payload: SectionUpdate) -> Optional[SectionResponse]:
    obj = await db.get(Section, section_id)
    if not obj:
        return None
    if payload.class_id is not None:
        await _ensure_class(db, payload.class_id)
        obj.class_id = payload.class_id
    if payload.name is not None:
        obj.name = payload.name.strip()
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Section already exists for this class")
    return _section_to_response(await _load_section(db, section_id))


async def delete_section(db: AsyncSession, section_id: int) -> bool:
    obj = await db.get(Section, section_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


# ----- subjects -----

def _subject_query():
    return select(Subject).join(SchoolClass, SchoolClass.id == Subject.class_id).options(
        selectinload(Subject.school_class)
    )


async def list_subjects(db: AsyncSession, class_id: Optional[int] = None) -> List[SubjectResponse]:
    stmt = _subject_query()
    if class_id is not None:
        stmt = stmt.where(Subject.class_id == class_id).order_by(Subject.name.asc())
    else:
        stmt = stmt.order_by(SchoolClass.name.asc(), Subject.name.asc())
    result = await db.execute(stmt)
    rows = sort_by_class(result.scalars().all(), key=lambda s: s.school_class.name)
    return [_subject_to_response(s) for s in rows]


async def _load_subject(db: AsyncSession, subject_id: int) -> Optional[Subject]:
    result = await db.execute(
        _subject_query().where(Subject.id == subject_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_subject(db: AsyncSession, subject_id: int) -> Optional[SubjectResponse]:
    obj = await _load_subject(db, subject_id)
    return _subject_to_response(obj) if obj else None


async def create_subject(db: AsyncSession, payload: SubjectCreate) -> SubjectResponse:
    await _ensure_class(db, payload.class_id)
    try:
        obj = Subject(name=payload.name.strip(), class_id=payload.class_id, display_order=0)
        db.add(obj)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Subject already exists for this class")
    return _subject_to_response(await _load_subject(db, obj.id))


async def update_subject(db: AsyncSession, subject_id: int, payload: SubjectUpdate) -> Optional[SubjectResponse]:
    obj = await db.get(Subject, subject_id)
    if not obj:
        return None
    if payload.class_id is not None:
        await _ensure_class(db, payload.class_id)
        obj.class_id = payload.class_id
    if payload.name is not None:
        obj.name = payload.name.strip()
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Subject already exists for this class")
    return _subject_to_response(await _load_subject(db, subject_id))


async def delete_subject(db: AsyncSession, subject_id: int) -> bool:
    obj = await db.get(Subject, subject_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


# ----- exams -----

def _exam_query():
    return (
        select(Exam)
        .join(SchoolClass, SchoolClass.id == Exam.class_id)
        .options(selectinload(Exam.school_class), selectinload(Exam.subject))
    )


async def list_exams(db: AsyncSession, class_id: Optional[int] = None) -> List[ExamResponse]:
    stmt = _exam_query()
    if class_id is not None:
        stmt = stmt.where(Exam.class_id == class_id)
    stmt = stmt.order_by(SchoolClass.name.asc(), Exam.exam_date.desc(), Exam.exam_type.asc())
    result = await db.execute(stmt)
    rows = sort_by_class(result.scalars().all(), key=lambda e: e.school_class.name)
    return [_exam_to_response(e) for e in rows]


async def _load_exam(db: AsyncSession, exam_id: int) -> Optional[Exam]:
    result = await db.execute(
        _exam_query().where(Exam.id == exam_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_exam(db: AsyncSession, exam_id: int) -> Optional[ExamResponse]:
    obj = await _load_exam(db, exam_id)
    return _exam_to_response(obj) if obj else None


async def create_exam(db: AsyncSession, payload: ExamCreate) -> ExamResponse:
    await _ensure_class(db, payload.class_id)
    await _ensure_subject(db, payload.subject_id)
    obj = Exam(
        class_id=payload.class_id,
        subject_id=payload.subject_id,
        exam_type=(payload.exam_type or "Assignment").strip(),
        exam_date=payload.exam_date,
        max_marks=payload.max_marks,
        description=payload.description,
    )
    db.add(obj)
    await db.commit()
    return _exam_to_response(await _load_exam(db, obj.id))


async def update_exam(db: AsyncSession, exam_id: int, payload: ExamUpdate) -> Optional[ExamResponse]:
    obj = await db.get(Exam, exam_id)
    if not obj:
        return None
    data = payload.model_dump(exclude_unset=True)
    if data.get("class_id") is not None:
        await _ensure_class(db, data["class_id"])
        obj.class_id = data["class_id"]
    if "subject_id" in data:
        await _ensure_subject(db, data["subject_id"])
        obj.subject_id = data["subject_id"]
    if data.get("exam_type"):
        obj.exam_type = data["exam_type"].strip()
    if "exam_date" in data:
        obj.exam_date = data["exam_date"]
    if data.get("max_marks") is not None:
        obj.max_marks = data["max_marks"]
    if "description" in data:
        obj.description = data["description"]
    await db.commit()
    return _exam_to_response(await _load_exam(db, exam_id))


async def delete_exam(db: AsyncSession, exam_id: int) -> bool:
    obj = await db.get(Exam, exam_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True
