"""Students. ``student_id`` is the external identifier (``<n>@sks``); ``id`` is the row key."""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Text

from app.core.enums import StudentStatus
from app.db.session import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(String(50), nullable=False, unique=True)
    roll_no = Column(String(50), nullable=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(50), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    # Column is literally named "class" in the table and over JSON
    class_name = Column("class", String(20), nullable=True, index=True)
    section = Column(String(20), nullable=True)
    academic_year = Column(String(20), nullable=True)
    admission_date = Column(Date, nullable=True)
    blood_group = Column(String(10), nullable=True)
    father_name = Column(String(255), nullable=True)
    mother_name = Column(String(255), nullable=True)
    primary_contact = Column(String(50), nullable=True)
    secondary_contact = Column(String(50), nullable=True)
    aadhar_no = Column(String(20), nullable=True)
    annual_income = Column(String(50), nullable=True)
    parent_name = Column(String(255), nullable=True)
    parent_phone = Column(String(50), nullable=True)
    parent_email = Column(String(255), nullable=True)
    photo = Column(Text, nullable=True)
    # bcrypt hash of the ddmmyy date-of-birth secret; null when no usable DOB
    password_hash = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=StudentStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
