"""Marks entered by faculty. Read-only from the admin side."""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String

from app.db.session import Base


class StudentMark(Base):
    __tablename__ = "student_marks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # External ids (students.student_id / faculty.staff_id)
    student_id = Column(String(50), nullable=False, index=True)
    staff_id = Column(String(50), nullable=True)
    subject = Column(String(100), nullable=False)
    exam_type = Column(String(50), nullable=False)
    marks = Column(Numeric(6, 2), nullable=False)
    max_marks = Column(Numeric(6, 2), nullable=False, default=100)
    exam_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
