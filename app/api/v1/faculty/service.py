from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import hash_password
from app.core.class_order import sort_by_class
from app.core.enums import FacultyStatus
from app.core.exceptions import ConflictError
from app.core.identifiers import derive_login_secret, next_staff_id
from app.core.models import Faculty

from .schemas import FacultyCreate, FacultyResponse, FacultyUpdate

STAFF_ID_MAX_ATTEMPTS = 3

_PLAIN_FIELDS = (
    "designation", "experience", "contact", "email", "address", "salary",
    "section", "qualification", "joining_date", "photo",
)


def _to_response(f: Faculty) -> FacultyResponse:
    return FacultyResponse.model_validate(f)


def _password_hash_for(date_of_birth) -> Optional[str]:
    secret = derive_login_secret(date_of_birth)
    return hash_password(secret) if secret else None


async def _check_duplicate_email(db: AsyncSession, email: Optional[str], exclude_id: Optional[int] = None) -> bool:
    if not email:
        return False
    stmt = select(Faculty.id).where(Faculty.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Faculty.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def _staff_id_taken(db: AsyncSession, staff_id: str) -> bool:
    result = await db.execute(select(Faculty.id).where(Faculty.staff_id == staff_id))
    return result.first() is not None


async def generate_staff_id(db: AsyncSession) -> str:
    """Next "staff<n>@sks" from the identifiers stored right now (first is staff100@sks)."""
    result = await db.execute(select(Faculty.staff_id).where(Faculty.staff_id.like("staff%@sks")))
    return next_staff_id(result.scalars().all())


async def _ensure_homeroom_free(
    db: AsyncSession,
    class_name: Optional[str],
    section: Optional[str],
    exclude_id: Optional[int] = None,
) -> None:
    """At most one active faculty may be in charge of a (class, section)."""
    if not class_name or not section:
        return
    stmt = select(Faculty).where(
        Faculty.class_name == class_name,
        Faculty.section == section,
        Faculty.status == FacultyStatus.ACTIVE.value,
    )
    if exclude_id is not None:
        stmt = stmt.where(Faculty.id != exclude_id)
    result = await db.execute(stmt)
    holders = result.scalars().all()
    if holders:
        names = ", ".join(f"{h.name} ({h.staff_id})" for h in holders)
        raise ConflictError(f"Class {class_name} section {section} is already assigned to {names}")


async def list_faculty(db: AsyncSession) -> List[FacultyResponse]:
    result = await db.execute(select(Faculty).order_by(Faculty.name.asc()))
    rows = sort_by_class(result.scalars().all(), key=lambda f: f.class_name)
    return [_to_response(f) for f in rows]


async def list_by_class_section(db: AsyncSession, class_name: str, section: str) -> List[FacultyResponse]:
    result = await db.execute(
        select(Faculty)
        .where(Faculty.class_name == class_name, Faculty.section == section)
        .order_by(Faculty.created_at.desc())
    )
    return [_to_response(f) for f in result.scalars().all()]


async def get_faculty(db: AsyncSession, faculty_pk: int) -> Optional[FacultyResponse]:
    obj = await db.get(Faculty, faculty_pk)
    return _to_response(obj) if obj else None


async def create_faculty(db: AsyncSession, payload: FacultyCreate) -> FacultyResponse:
    """Create a faculty member with a generated staff_id.

    The id is recomputed and the insert retried when another writer took it
    first; any other unique violation (email) fails at once.
    """
    class_name = payload.class_name.strip() if payload.class_name else None
    section = payload.section.strip() if payload.section else None

    if await _check_duplicate_email(db, payload.email):
        raise ConflictError("Email already exists")
    if payload.status == FacultyStatus.ACTIVE:
        await _ensure_homeroom_free(db, class_name, section)

    password_hash = _password_hash_for(payload.date_of_birth)
    for attempt in range(STAFF_ID_MAX_ATTEMPTS):
        staff_id = await generate_staff_id(db)
        obj = Faculty(
            staff_id=staff_id,
            name=payload.name.strip(),
            date_of_birth=payload.date_of_birth,
            class_name=class_name,
            status=payload.status.value,
            password_hash=password_hash,
        )
        for field in _PLAIN_FIELDS:
            setattr(obj, field, getattr(payload, field))
        obj.section = section
        db.add(obj)
        try:
            await db.commit()
            await db.refresh(obj)
            return _to_response(obj)
        except IntegrityError:
            await db.rollback()
            if not await _staff_id_taken(db, staff_id):
                raise ConflictError("Email already exists")
            if attempt == STAFF_ID_MAX_ATTEMPTS - 1:
                raise ConflictError("Could not generate unique staff ID, please try again")


async def update_faculty(db: AsyncSession, faculty_pk: int, payload: FacultyUpdate) -> Optional[FacultyResponse]:
    """Partial update. The password is re-derived only when date_of_birth changes."""
    obj = await db.get(Faculty, faculty_pk)
    if not obj:
        return None
    data = payload.model_dump(exclude_unset=True)

    if data.get("email") and await _check_duplicate_email(db, data["email"], exclude_id=obj.id):
        raise ConflictError("Email already exists")

    class_name = obj.class_name
    if "class_name" in data:
        class_name = data["class_name"].strip() if data["class_name"] else None
    section = obj.section
    if "section" in data:
        section = data["section"].strip() if data["section"] else None
    new_status = data["status"].value if data.get("status") is not None else obj.status
    if new_status == FacultyStatus.ACTIVE.value:
        await _ensure_homeroom_free(db, class_name, section, exclude_id=obj.id)

    if "date_of_birth" in data and data["date_of_birth"] != obj.date_of_birth:
        obj.password_hash = _password_hash_for(data["date_of_birth"])
        obj.date_of_birth = data["date_of_birth"]

    if data.get("name"):
        obj.name = data["name"].strip()
    for field in _PLAIN_FIELDS:
        if field in data:
            setattr(obj, field, data[field])
    obj.class_name = class_name
    obj.section = section
    obj.status = new_status

    try:
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Email already exists")


async def delete_faculty(db: AsyncSession, faculty_pk: int) -> bool:
    obj = await db.get(Faculty, faculty_pk)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True
