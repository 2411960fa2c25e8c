from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import FacultyCreate, FacultyResponse, FacultyUpdate

router = APIRouter(
    prefix="/api/faculty",
    tags=["faculty"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[FacultyResponse])
async def list_faculty(db: AsyncSession = Depends(get_db)) -> List[FacultyResponse]:
    return await service.list_faculty(db)


@router.get("/class/{class_name}/section/{section}", response_model=List[FacultyResponse])
async def list_by_class_section(
    class_name: str,
    section: str,
    db: AsyncSession = Depends(get_db),
) -> List[FacultyResponse]:
    return await service.list_by_class_section(db, class_name, section)


@router.get("/{faculty_pk}", response_model=FacultyResponse)
async def get_faculty(faculty_pk: int, db: AsyncSession = Depends(get_db)) -> FacultyResponse:
    obj = await service.get_faculty(db, faculty_pk)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
    return obj


@router.post("", response_model=FacultyResponse, status_code=status.HTTP_201_CREATED)
async def create_faculty(payload: FacultyCreate, db: AsyncSession = Depends(get_db)) -> FacultyResponse:
    try:
        return await service.create_faculty(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{faculty_pk}", response_model=FacultyResponse)
async def update_faculty(
    faculty_pk: int,
    payload: FacultyUpdate,
    db: AsyncSession = Depends(get_db),
) -> FacultyResponse:
    try:
        obj = await service.update_faculty(db, faculty_pk, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{faculty_pk}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_faculty(faculty_pk: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_faculty(db, faculty_pk):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
