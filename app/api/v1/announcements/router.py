from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.core.enums import AnnouncementStatus
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate, PublishResult

router = APIRouter(
    prefix="/api/announcements",
    tags=["announcements"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    status_filter: Optional[AnnouncementStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
) -> List[AnnouncementResponse]:
    return await service.list_announcements(db, status_filter)


@router.post("/publish-scheduled", response_model=PublishResult)
async def publish_scheduled(db: AsyncSession = Depends(get_db)) -> PublishResult:
    count = await service.publish_scheduled_announcements(db)
    return PublishResult(published=count)


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(announcement_id: int, db: AsyncSession = Depends(get_db)) -> AnnouncementResponse:
    obj = await service.get_announcement(db, announcement_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return obj


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementCreate,
    db: AsyncSession = Depends(get_db),
) -> AnnouncementResponse:
    return await service.create_announcement(db, payload)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: int,
    payload: AnnouncementUpdate,
    db: AsyncSession = Depends(get_db),
) -> AnnouncementResponse:
    try:
        obj = await service.update_announcement(db, announcement_id, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(announcement_id: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_announcement(db, announcement_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
