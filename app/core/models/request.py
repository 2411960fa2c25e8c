"""Leave / permission requests raised by staff and students, reviewed by the admin."""
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, Text

from app.core.enums import RequestStatus
from app.db.session import Base


class UserRequest(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_type = Column(String(30), nullable=False)
    request_subtype = Column(String(100), nullable=True)
    requester_type = Column(String(20), nullable=False)
    requester_id = Column(String(50), nullable=False, index=True)
    requester_name = Column(String(255), nullable=False)
    requester_email = Column(String(255), nullable=True)
    requester_phone = Column(String(50), nullable=True)
    subject = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    duration_days = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value, index=True)
    attachments = Column(JSON, nullable=True)
    admin_comment = Column(Text, nullable=True)
    admin_id = Column(String(50), nullable=True)
    admin_name = Column(String(255), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
