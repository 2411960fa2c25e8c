"""Internal messages between the admin and staff/students. Replies point at the original via reply_to."""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from app.core.enums import PartyType
from app.db.session import Base

ADMIN_PARTY_ID = "admin"
ADMIN_PARTY_NAME = "Admin"


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(String(50), nullable=False)
    sender_name = Column(String(255), nullable=False)
    sender_type = Column(String(20), nullable=False)
    recipient_id = Column(String(50), nullable=False, default=ADMIN_PARTY_ID)
    recipient_name = Column(String(255), nullable=False, default=ADMIN_PARTY_NAME)
    recipient_type = Column(String(20), nullable=False, default=PartyType.ADMIN.value, index=True)
    subject = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    reply_to = Column(Integer, ForeignKey("messages.id", ondelete="CASCADE"), nullable=True, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_replied = Column(Boolean, nullable=False, default=False)
    # Attachment metadata only; the file itself lives in external storage
    attachment_path = Column(Text, nullable=True)
    attachment_type = Column(String(100), nullable=True)
    attachment_name = Column(String(255), nullable=True)
    attachment_size = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
