from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import hash_password
from app.core.class_order import sort_by_class
from app.core.exceptions import ConflictError, ValidationError
from app.core.identifiers import (
    derive_login_secret,
    generate_roll_number,
    is_valid_student_id,
    next_student_id,
)
from app.core.models import Student

from .schemas import StudentCreate, StudentResponse, StudentUpdate

# Columns copied straight from the payload; identifiers, class, status and password are handled separately
_PLAIN_FIELDS = (
    "name", "email", "phone", "gender", "address", "section", "academic_year",
    "admission_date", "blood_group", "father_name", "mother_name", "primary_contact",
    "secondary_contact", "aadhar_no", "annual_income", "parent_name", "parent_phone",
    "parent_email", "photo",
)


def _to_response(s: Student) -> StudentResponse:
    return StudentResponse.model_validate(s)


def _password_hash_for(date_of_birth) -> Optional[str]:
    secret = derive_login_secret(date_of_birth)
    return hash_password(secret) if secret else None


async def _check_duplicate_email(db: AsyncSession, email: Optional[str], exclude_id: Optional[int] = None) -> bool:
    if not email:
        return False
    stmt = select(Student.id).where(Student.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Student.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def _student_id_taken(db: AsyncSession, student_id: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Student.id).where(Student.student_id == student_id)
    if exclude_id is not None:
        stmt = stmt.where(Student.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def generate_student_id(db: AsyncSession) -> str:
    """Next sequential "<n>@sks" from the identifiers stored right now."""
    result = await db.execute(select(Student.student_id).where(Student.student_id.like("%@sks")))
    return next_student_id(result.scalars().all())


async def generate_roll_no(
    db: AsyncSession,
    name: str,
    class_name: str,
    exclude_id: Optional[int] = None,
) -> str:
    stmt = select(Student.name).where(Student.class_name == class_name)
    if exclude_id is not None:
        stmt = stmt.where(Student.id != exclude_id)
    result = await db.execute(stmt)
    return generate_roll_number(name, class_name, result.scalars().all())


async def list_students(
    db: AsyncSession,
    class_name: Optional[str] = None,
    section: Optional[str] = None,
) -> List[StudentResponse]:
    """Students in grade order, then by name."""
    stmt = select(Student)
    if class_name:
        stmt = stmt.where(Student.class_name == class_name)
    if section:
        stmt = stmt.where(Student.section == section)
    result = await db.execute(stmt.order_by(Student.name.asc()))
    rows = sort_by_class(result.scalars().all(), key=lambda s: s.class_name)
    return [_to_response(s) for s in rows]


async def get_student(db: AsyncSession, student_pk: int) -> Optional[StudentResponse]:
    obj = await db.get(Student, student_pk)
    return _to_response(obj) if obj else None


async def get_student_by_student_id(db: AsyncSession, student_id: str) -> Optional[StudentResponse]:
    result = await db.execute(select(Student).where(Student.student_id == student_id))
    obj = result.scalar_one_or_none()
    return _to_response(obj) if obj else None


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    """Create a student. Generates student_id, roll_no and the date-of-birth password where absent."""
    name = payload.name.strip()
    class_name = payload.class_name.strip() if payload.class_name else None

    if payload.student_id:
        student_id = payload.student_id.strip()
        if await _student_id_taken(db, student_id):
            raise ConflictError("Student ID already exists")
    else:
        student_id = await generate_student_id(db)

    if await _check_duplicate_email(db, payload.email):
        raise ConflictError("Email already exists")

    if payload.roll_no:
        roll_no = payload.roll_no.strip()
    elif class_name:
        roll_no = await generate_roll_no(db, name, class_name)
    else:
        roll_no = None

    obj = Student(
        student_id=student_id,
        roll_no=roll_no,
        date_of_birth=payload.date_of_birth,
        class_name=class_name,
        status=payload.status.value,
        password_hash=_password_hash_for(payload.date_of_birth),
    )
    for field in _PLAIN_FIELDS:
        setattr(obj, field, getattr(payload, field))
    obj.name = name
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Student ID or Email already exists")


async def update_student(db: AsyncSession, student_pk: int, payload: StudentUpdate) -> Optional[StudentResponse]:
    """Partial update.

    - a changed student_id must look like "<n>@sks" and be unused
    - roll_no: an explicit value wins; otherwise it is regenerated when the class
      changes or no roll exists yet, and left alone in every other case
    - the password is re-derived only when date_of_birth changes
    """
    obj = await db.get(Student, student_pk)
    if not obj:
        return None
    data = payload.model_dump(exclude_unset=True)

    new_student_id = (data.get("student_id") or "").strip()
    if new_student_id and new_student_id != obj.student_id:
        if not is_valid_student_id(new_student_id):
            raise ValidationError("Student ID must be in the format <number>@sks")
        if await _student_id_taken(db, new_student_id, exclude_id=obj.id):
            raise ConflictError("Student ID already exists")
        obj.student_id = new_student_id

    if data.get("email") and await _check_duplicate_email(db, data["email"], exclude_id=obj.id):
        raise ConflictError("Email already exists")

    if "date_of_birth" in data and data["date_of_birth"] != obj.date_of_birth:
        obj.password_hash = _password_hash_for(data["date_of_birth"])
        obj.date_of_birth = data["date_of_birth"]

    old_class = obj.class_name
    if "class_name" in data:
        obj.class_name = data["class_name"].strip() if data["class_name"] else None
    class_changed = obj.class_name != old_class

    for field in _PLAIN_FIELDS:
        if field not in data:
            continue
        if field == "name":
            if data["name"]:
                obj.name = data["name"].strip()
            continue
        setattr(obj, field, data[field])
    if data.get("status") is not None:
        obj.status = data["status"].value

    explicit_roll = (data.get("roll_no") or "").strip()
    if explicit_roll:
        obj.roll_no = explicit_roll
    elif (class_changed or not obj.roll_no) and obj.class_name:
        obj.roll_no = await generate_roll_no(db, obj.name, obj.class_name, exclude_id=obj.id)

    try:
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Student ID or Email already exists")


async def delete_student(db: AsyncSession, student_pk: int) -> bool:
    obj = await db.get(Student, student_pk)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True
