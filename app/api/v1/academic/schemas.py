from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.core.schemas import FormPayload


class ClassCreate(FormPayload):
    name: str = Field(..., max_length=50)


class ClassUpdate(FormPayload):
    name: str = Field(..., max_length=50)


class ClassResponse(BaseModel):
    id: int
    name: str
    display_order: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SectionCreate(FormPayload):
    name: str = Field(..., max_length=50)
    class_id: int


class SectionUpdate(FormPayload):
    name: Optional[str] = Field(None, max_length=50)
    class_id: Optional[int] = None


class SectionResponse(BaseModel):
    id: int
    class_id: int
    class_name: str
    name: str
    display_order: int = 0
    created_at: datetime


class SubjectCreate(FormPayload):
    name: str = Field(..., max_length=100)
    class_id: int


class SubjectUpdate(FormPayload):
    name: Optional[str] = Field(None, max_length=100)
    class_id: Optional[int] = None


class SubjectResponse(BaseModel):
    id: int
    class_id: int
    class_name: str
    name: str
    display_order: int = 0
    created_at: datetime


class ExamCreate(FormPayload):
    class_id: int
    subject_id: Optional[int] = None
    exam_type: str = Field("Assignment", max_length=50)
    exam_date: Optional[date] = None
    max_marks: float = Field(100, gt=0)
    description: Optional[str] = None


class ExamUpdate(FormPayload):
    class_id: Optional[int] = None
    subject_id: Optional[int] = None
    exam_type: Optional[str] = Field(None, max_length=50)
    exam_date: Optional[date] = None
    max_marks: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None


class ExamResponse(BaseModel):
    id: int
    class_id: int
    class_name: str
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    exam_type: str
    exam_date: Optional[date] = None
    max_marks: float
    description: Optional[str] = None
    created_at: datetime
