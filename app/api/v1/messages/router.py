from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    InboxMessageResponse,
    MarkReadRequest,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
    UpdatedCountResponse,
)

router = APIRouter(
    prefix="/api/messages",
    tags=["messages"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[InboxMessageResponse])
async def list_messages(
    sender_type: Optional[str] = Query(None),
    is_read: Optional[bool] = Query(None),
    is_replied: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> List[InboxMessageResponse]:
    return await service.list_admin_messages(db, sender_type=sender_type, is_read=is_read, is_replied=is_replied)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(db: AsyncSession = Depends(get_db)) -> UnreadCountResponse:
    return UnreadCountResponse(count=await service.unread_count(db))


@router.put("/read-multiple", response_model=UpdatedCountResponse)
async def mark_many_as_read(payload: MarkReadRequest, db: AsyncSession = Depends(get_db)) -> UpdatedCountResponse:
    return UpdatedCountResponse(updated=await service.mark_many_as_read(db, payload.ids))


@router.get("/{message_id}", response_model=InboxMessageResponse)
async def get_message(message_id: int, db: AsyncSession = Depends(get_db)) -> InboxMessageResponse:
    obj = await service.get_message(db, message_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return obj


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(payload: MessageCreate, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    try:
        return await service.create_message(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{message_id}/read", response_model=MessageResponse)
async def mark_as_read(message_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    obj = await service.mark_as_read(db, message_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return obj


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(message_id: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_message(db, message_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
