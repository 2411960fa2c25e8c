"""Faculty / staff. ``staff_id`` is the external identifier (``staff<n>@sks``).

``class_name``/``section`` mark the homeroom the member is in charge of.
"""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, Integer, Numeric, String, Text

from app.core.enums import FacultyStatus
from app.db.session import Base


class Faculty(Base):
    __tablename__ = "faculty"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(String(50), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    designation = Column(String(100), nullable=True)
    experience = Column(Float, nullable=True)
    contact = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True, unique=True)
    address = Column(Text, nullable=True)
    salary = Column(Numeric(12, 2), nullable=True)
    class_name = Column("class", String(20), nullable=True, index=True)
    section = Column(String(20), nullable=True)
    qualification = Column(String(255), nullable=True)
    joining_date = Column(Date, nullable=True)
    photo = Column(Text, nullable=True)
    password_hash = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=FacultyStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
