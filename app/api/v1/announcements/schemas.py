from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.enums import AnnouncementStatus
from app.core.schemas import FormPayload


class AnnouncementCreate(FormPayload):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    recipients: List[str]
    scheduled_time: Optional[datetime] = None
    status: AnnouncementStatus = AnnouncementStatus.DRAFT


class AnnouncementUpdate(FormPayload):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    recipients: Optional[List[str]] = None
    scheduled_time: Optional[datetime] = None
    # Omitted status keeps the stored one
    status: Optional[AnnouncementStatus] = None


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    content: str
    recipients: List[str]
    scheduled_time: Optional[datetime] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PublishResult(BaseModel):
    success: bool = True
    published: int
