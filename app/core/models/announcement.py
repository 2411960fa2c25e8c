from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from app.core.enums import AnnouncementStatus
from app.db.session import Base


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    # e.g. ["students", "faculty"] or ["class:10-A"]
    recipients = Column(JSON, nullable=False, default=list)
    scheduled_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False, default=AnnouncementStatus.DRAFT.value, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
