from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.db.session import get_db

from . import service
from .schemas import ExamTimelinePoint, MarkResponse, StudentMarkSummary

router = APIRouter(
    prefix="/api/marks",
    tags=["marks"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[MarkResponse])
async def list_marks(
    student_id: Optional[str] = Query(None),
    class_name: Optional[str] = Query(None, alias="class"),
    db: AsyncSession = Depends(get_db),
) -> List[MarkResponse]:
    return await service.list_marks(db, student_id=student_id, class_name=class_name)


@router.get("/summary", response_model=List[StudentMarkSummary])
async def marks_summary(
    class_name: str = Query(..., alias="class", min_length=1),
    section: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[StudentMarkSummary]:
    return await service.summarize_class(db, class_name, section=section)


@router.get("/timeline", response_model=List[ExamTimelinePoint])
async def exam_timeline(
    class_name: str = Query(..., alias="class", min_length=1),
    db: AsyncSession = Depends(get_db),
) -> List[ExamTimelinePoint]:
    return await service.class_timeline(db, class_name)
