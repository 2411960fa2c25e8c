from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.schemas import FormPayload


class AttachmentFields(FormPayload):
    # Upload happens elsewhere; only the stored file's metadata is kept
    attachment_path: Optional[str] = None
    attachment_type: Optional[str] = Field(None, max_length=100)
    attachment_name: Optional[str] = Field(None, max_length=255)
    attachment_size: Optional[int] = Field(None, ge=0)


class MessageCreate(AttachmentFields):
    """Either a reply (reply_to set) or a new message to recipient_id/recipient_type."""

    message: str = Field(..., min_length=1)
    reply_to: Optional[int] = None
    recipient_id: Optional[str] = Field(None, max_length=50)
    recipient_name: Optional[str] = Field(None, max_length=255)
    recipient_type: Optional[str] = Field(None, max_length=20)
    subject: Optional[str] = Field(None, max_length=255)


class MarkReadRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)


class MessageResponse(BaseModel):
    id: int
    sender_id: str
    sender_name: str
    sender_type: str
    recipient_id: str
    recipient_name: str
    recipient_type: str
    subject: Optional[str] = None
    message: str
    reply_to: Optional[int] = None
    is_read: bool
    is_replied: bool
    attachment_path: Optional[str] = None
    attachment_type: Optional[str] = None
    attachment_name: Optional[str] = None
    attachment_size: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InboxMessageResponse(MessageResponse):
    """Admin inbox row with the admin's reply, if any."""

    reply_message: Optional[str] = None
    reply_created_at: Optional[datetime] = None
    reply_attachment_path: Optional[str] = None
    reply_attachment_type: Optional[str] = None
    reply_attachment_name: Optional[str] = None
    reply_attachment_size: Optional[int] = None


class UnreadCountResponse(BaseModel):
    count: int


class UpdatedCountResponse(BaseModel):
    success: bool = True
    updated: int
