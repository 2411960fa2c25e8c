from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class MarkResponse(BaseModel):
    id: int
    student_id: str
    staff_id: Optional[str] = None
    subject: str
    exam_type: str
    obtained_marks: float
    max_marks: float
    exam_date: Optional[date] = None
    student_name: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class")
    section: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True


class StudentMarkSummary(BaseModel):
    student_id: str
    student_name: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class")
    section: Optional[str] = None
    exam_count: int
    avg_pct: Optional[float] = None
    total_obtained: float
    total_max: float

    class Config:
        populate_by_name = True


class ExamTimelinePoint(BaseModel):
    exam_date: Optional[date] = None
    exam_type: str
    subject: str
    max_marks: float
    avg_pct: Optional[float] = None
    student_count: int
