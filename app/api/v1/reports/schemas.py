from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class StudentReportFilters(BaseModel):
    class_name: Optional[str] = Field(None, alias="class")
    section: Optional[str] = None
    status: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None

    class Config:
        populate_by_name = True


class StaffReportFilters(BaseModel):
    designation: Optional[str] = None
    status: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class")
    section: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None

    class Config:
        populate_by_name = True


class TransportReportFilters(BaseModel):
    status: Optional[str] = None
    route: Optional[str] = None
