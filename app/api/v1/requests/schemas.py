from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from app.core.enums import RequestType
from app.core.schemas import FormPayload


class RequestCreate(FormPayload):
    request_type: RequestType
    request_subtype: Optional[str] = Field(None, max_length=100)
    requester_type: str = Field(..., min_length=1, max_length=20)
    requester_id: str = Field(..., min_length=1, max_length=50)
    requester_name: str = Field(..., min_length=1, max_length=255)
    requester_email: Optional[str] = Field(None, max_length=255)
    requester_phone: Optional[str] = Field(None, max_length=50)
    subject: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    attachments: Optional[List[Any]] = None


class RequestUpdate(FormPayload):
    request_subtype: Optional[str] = Field(None, max_length=100)
    subject: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    attachments: Optional[List[Any]] = None


class RequestStatusUpdate(FormPayload):
    status: str
    admin_comment: Optional[str] = None


class RequestResponse(BaseModel):
    id: int
    request_type: str
    request_subtype: Optional[str] = None
    requester_type: str
    requester_id: str
    requester_name: str
    requester_email: Optional[str] = None
    requester_phone: Optional[str] = None
    subject: str
    description: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = None
    status: str
    attachments: Optional[List[Any]] = None
    admin_comment: Optional[str] = None
    admin_id: Optional[str] = None
    admin_name: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RequestStatistics(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    leave_requests: int = 0
    permission_requests: int = 0
    other_requests: int = 0
