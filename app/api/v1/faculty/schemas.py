from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.enums import FacultyStatus
from app.core.schemas import FormPayload


class FacultyBase(FormPayload):
    date_of_birth: Optional[date] = None
    designation: Optional[str] = Field(None, max_length=100)
    experience: Optional[float] = Field(None, ge=0)
    contact: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    salary: Optional[float] = Field(None, ge=0)
    # Homeroom the member is in charge of
    class_name: Optional[str] = Field(None, alias="class", max_length=20)
    section: Optional[str] = Field(None, max_length=20)
    qualification: Optional[str] = Field(None, max_length=255)
    joining_date: Optional[date] = None
    photo: Optional[str] = None


class FacultyCreate(FacultyBase):
    name: str = Field(..., min_length=1, max_length=255)
    status: FacultyStatus = FacultyStatus.ACTIVE


class FacultyUpdate(FacultyBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[FacultyStatus] = None


class FacultyResponse(BaseModel):
    id: int
    staff_id: str
    name: str
    date_of_birth: Optional[date] = None
    designation: Optional[str] = None
    experience: Optional[float] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    salary: Optional[float] = None
    class_name: Optional[str] = Field(None, alias="class")
    section: Optional[str] = None
    qualification: Optional[str] = None
    joining_date: Optional[date] = None
    photo: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True
