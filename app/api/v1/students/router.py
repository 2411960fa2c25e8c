from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import StudentCreate, StudentResponse, StudentUpdate

router = APIRouter(
    prefix="/api/students",
    tags=["students"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[StudentResponse])
async def list_students(
    class_name: Optional[str] = Query(None, alias="class"),
    section: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[StudentResponse]:
    return await service.list_students(db, class_name=class_name, section=section)


@router.get("/by-student-id/{student_id}", response_model=StudentResponse)
async def get_student_by_student_id(student_id: str, db: AsyncSession = Depends(get_db)) -> StudentResponse:
    obj = await service.get_student_by_student_id(db, student_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj


@router.get("/{student_pk}", response_model=StudentResponse)
async def get_student(student_pk: int, db: AsyncSession = Depends(get_db)) -> StudentResponse:
    obj = await service.get_student(db, student_pk)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return obj


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(payload: StudentCreate, db: AsyncSession = Depends(get_db)) -> StudentResponse:
    try:
        return await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{student_pk}", response_model=StudentResponse)
async def update_student(
    student_pk: int,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        obj = await service.update_student(db, student_pk, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{student_pk}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_pk: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_student(db, student_pk):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
