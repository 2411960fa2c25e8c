from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentAdmin
from app.core.clock import utcnow
from app.core.enums import RequestStatus, RequestType
from app.core.exceptions import ValidationError
from app.core.models import UserRequest

from .schemas import RequestCreate, RequestResponse, RequestStatistics, RequestStatusUpdate, RequestUpdate

REVIEW_STATUSES = (
    RequestStatus.APPROVED.value,
    RequestStatus.REJECTED.value,
    RequestStatus.CANCELLED.value,
)


def duration_days(start: Optional[date], end: Optional[date]) -> Optional[int]:
    """Inclusive day count between two dates, in either order."""
    if not start or not end:
        return None
    return abs((end - start).days) + 1


def _to_response(r: UserRequest) -> RequestResponse:
    return RequestResponse.model_validate(r)


async def list_requests(
    db: AsyncSession,
    status: Optional[str] = None,
    request_type: Optional[str] = None,
    requester_type: Optional[str] = None,
    requester_id: Optional[str] = None,
) -> List[RequestResponse]:
    stmt = select(UserRequest)
    if status:
        stmt = stmt.where(UserRequest.status == status)
    if request_type:
        stmt = stmt.where(UserRequest.request_type == request_type)
    if requester_type:
        stmt = stmt.where(UserRequest.requester_type == requester_type)
    if requester_id:
        stmt = stmt.where(UserRequest.requester_id == requester_id)
    result = await db.execute(stmt.order_by(UserRequest.created_at.desc(), UserRequest.id.desc()))
    return [_to_response(r) for r in result.scalars().all()]


async def get_request(db: AsyncSession, request_id: int) -> Optional[RequestResponse]:
    obj = await db.get(UserRequest, request_id)
    return _to_response(obj) if obj else None


async def create_request(db: AsyncSession, payload: RequestCreate) -> RequestResponse:
    data = payload.model_dump()
    data["request_type"] = payload.request_type.value
    obj = UserRequest(
        **data,
        duration_days=duration_days(payload.start_date, payload.end_date),
        status=RequestStatus.PENDING.value,
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def update_request(db: AsyncSession, request_id: int, payload: RequestUpdate) -> Optional[RequestResponse]:
    """Edit a request that is still Pending; the duration follows the dates."""
    obj = await db.get(UserRequest, request_id)
    if not obj:
        return None
    if obj.status != RequestStatus.PENDING.value:
        raise ValidationError("Cannot update request that has already been reviewed")

    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        if field in ("subject", "description") and not value:
            continue
        setattr(obj, field, value)
    if obj.start_date and obj.end_date:
        obj.duration_days = duration_days(obj.start_date, obj.end_date)

    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def update_request_status(
    db: AsyncSession,
    request_id: int,
    payload: RequestStatusUpdate,
    admin: CurrentAdmin,
    now: Optional[datetime] = None,
) -> Optional[RequestResponse]:
    """Approve, reject or cancel. Reviewed requests can only be cancelled."""
    obj = await db.get(UserRequest, request_id)
    if not obj:
        return None
    if payload.status not in REVIEW_STATUSES:
        raise ValidationError("Invalid status. Must be Approved, Rejected, or Cancelled")
    if obj.status != RequestStatus.PENDING.value and payload.status != RequestStatus.CANCELLED.value:
        raise ValidationError(f"Cannot change status from {obj.status} to {payload.status}")

    obj.status = payload.status
    obj.admin_comment = payload.admin_comment
    obj.admin_id = admin.admin_id
    obj.admin_name = admin.name
    obj.reviewed_at = now or utcnow()
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def delete_request(db: AsyncSession, request_id: int) -> bool:
    obj = await db.get(UserRequest, request_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


async def get_statistics(db: AsyncSession) -> RequestStatistics:
    result = await db.execute(
        select(
            func.count(UserRequest.id).label("total"),
            _count_where(UserRequest.status == RequestStatus.PENDING.value).label("pending"),
            _count_where(UserRequest.status == RequestStatus.APPROVED.value).label("approved"),
            _count_where(UserRequest.status == RequestStatus.REJECTED.value).label("rejected"),
            _count_where(UserRequest.request_type == RequestType.LEAVE.value).label("leave_requests"),
            _count_where(UserRequest.request_type == RequestType.PERMISSION.value).label("permission_requests"),
            _count_where(UserRequest.request_type == RequestType.OTHER.value).label("other_requests"),
        )
    )
    row = result.one()
    return RequestStatistics(**{key: int(value or 0) for key, value in row._mapping.items()})
