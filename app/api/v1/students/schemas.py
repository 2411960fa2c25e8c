from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.enums import StudentStatus
from app.core.schemas import FormPayload


class StudentBase(FormPayload):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class", max_length=20)
    section: Optional[str] = Field(None, max_length=20)
    academic_year: Optional[str] = Field(None, max_length=20)
    admission_date: Optional[date] = None
    blood_group: Optional[str] = Field(None, max_length=10)
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    primary_contact: Optional[str] = Field(None, max_length=50)
    secondary_contact: Optional[str] = Field(None, max_length=50)
    aadhar_no: Optional[str] = Field(None, max_length=20)
    annual_income: Optional[str] = Field(None, max_length=50)
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = Field(None, max_length=50)
    parent_email: Optional[str] = None
    photo: Optional[str] = None


class StudentCreate(StudentBase):
    """student_id and roll_no are generated when omitted."""

    name: str = Field(..., min_length=1, max_length=255)
    student_id: Optional[str] = Field(None, max_length=50)
    roll_no: Optional[str] = Field(None, max_length=50)
    status: StudentStatus = StudentStatus.ACTIVE


class StudentUpdate(StudentBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    student_id: Optional[str] = Field(None, max_length=50)
    roll_no: Optional[str] = Field(None, max_length=50)
    status: Optional[StudentStatus] = None


class StudentResponse(BaseModel):
    id: int
    student_id: str
    roll_no: Optional[str] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class")
    section: Optional[str] = None
    academic_year: Optional[str] = None
    admission_date: Optional[date] = None
    blood_group: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    primary_contact: Optional[str] = None
    secondary_contact: Optional[str] = None
    aadhar_no: Optional[str] = None
    annual_income: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    photo: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True
