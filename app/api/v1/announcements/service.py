import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import as_utc, utcnow
from app.core.enums import AnnouncementStatus
from app.core.exceptions import ValidationError
from app.core.models import Announcement
from app.db.session import AsyncSessionLocal

from .schemas import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate

logger = logging.getLogger(__name__)

EARLY_PUBLISH_MESSAGE = (
    "Cannot change Scheduled announcement to Published before the scheduled time. "
    "Please wait until the scheduled time or update the scheduled_time first."
)


def _to_response(a: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse.model_validate(a)


async def list_announcements(
    db: AsyncSession,
    status: Optional[AnnouncementStatus] = None,
) -> List[AnnouncementResponse]:
    stmt = select(Announcement)
    if status is not None:
        stmt = stmt.where(Announcement.status == status.value)
    result = await db.execute(stmt.order_by(Announcement.created_at.desc(), Announcement.id.desc()))
    return [_to_response(a) for a in result.scalars().all()]


async def get_announcement(db: AsyncSession, announcement_id: int) -> Optional[AnnouncementResponse]:
    obj = await db.get(Announcement, announcement_id)
    return _to_response(obj) if obj else None


async def create_announcement(db: AsyncSession, payload: AnnouncementCreate) -> AnnouncementResponse:
    obj = Announcement(
        title=payload.title.strip(),
        content=payload.content,
        recipients=list(payload.recipients),
        scheduled_time=as_utc(payload.scheduled_time),
        status=payload.status.value,
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def update_announcement(
    db: AsyncSession,
    announcement_id: int,
    payload: AnnouncementUpdate,
    now: Optional[datetime] = None,
) -> Optional[AnnouncementResponse]:
    """Update; a Scheduled announcement cannot be published before its scheduled time."""
    obj = await db.get(Announcement, announcement_id)
    if not obj:
        return None
    data = payload.model_dump(exclude_unset=True)

    new_status = data["status"].value if data.get("status") is not None else obj.status
    if obj.status == AnnouncementStatus.SCHEDULED.value and new_status == AnnouncementStatus.PUBLISHED.value:
        scheduled = as_utc(obj.scheduled_time)
        if scheduled and scheduled > (now or utcnow()):
            raise ValidationError(EARLY_PUBLISH_MESSAGE)

    if data.get("title"):
        obj.title = data["title"].strip()
    if data.get("content"):
        obj.content = data["content"]
    if data.get("recipients") is not None:
        obj.recipients = list(data["recipients"])
    if "scheduled_time" in data:
        obj.scheduled_time = as_utc(data["scheduled_time"])
    obj.status = new_status

    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def delete_announcement(db: AsyncSession, announcement_id: int) -> bool:
    obj = await db.get(Announcement, announcement_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


async def publish_scheduled_announcements(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Publish every Scheduled announcement whose time has come. Returns how many were published."""
    now = now or utcnow()
    result = await db.execute(
        select(Announcement).where(
            Announcement.status == AnnouncementStatus.SCHEDULED.value,
            Announcement.scheduled_time.isnot(None),
        )
    )
    due = [a for a in result.scalars().all() if as_utc(a.scheduled_time) <= now]
    for announcement in due:
        announcement.status = AnnouncementStatus.PUBLISHED.value
    if due:
        await db.commit()
    return len(due)


async def run_publisher(interval_seconds: int) -> None:
    """Background loop started from the app lifespan; cancelled on shutdown."""
    logger.info("Scheduled announcement publisher running every %ss", interval_seconds)
    while True:
        try:
            async with AsyncSessionLocal() as db:
                count = await publish_scheduled_announcements(db)
            if count:
                logger.info("Published %d scheduled announcement(s)", count)
        except SQLAlchemyError:
            logger.exception("Scheduled announcement publishing failed")
        await asyncio.sleep(interval_seconds)
