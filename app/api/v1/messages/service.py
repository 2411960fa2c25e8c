from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.enums import PartyType
from app.core.exceptions import NotFoundError, ValidationError
from app.core.models import Message
from app.core.models.message import ADMIN_PARTY_ID, ADMIN_PARTY_NAME

from .schemas import InboxMessageResponse, MessageCreate, MessageResponse

DEFAULT_RECIPIENT_NAME = "User"
DEFAULT_REPLY_SUBJECT = "Re: Your Message"

_ATTACHMENT_FIELDS = ("attachment_path", "attachment_type", "attachment_name", "attachment_size")


def _to_response(m: Message) -> MessageResponse:
    return MessageResponse.model_validate(m)


def _to_inbox_response(m: Message, reply: Optional[Message]) -> InboxMessageResponse:
    data = MessageResponse.model_validate(m).model_dump()
    if reply is not None:
        data["reply_message"] = reply.message
        data["reply_created_at"] = reply.created_at
        for field in _ATTACHMENT_FIELDS:
            data[f"reply_{field}"] = getattr(reply, field)
    return InboxMessageResponse(**data)


def _inbox_query():
    reply = aliased(Message)
    return select(Message, reply).outerjoin(reply, reply.reply_to == Message.id), reply


async def list_admin_messages(
    db: AsyncSession,
    sender_type: Optional[str] = None,
    is_read: Optional[bool] = None,
    is_replied: Optional[bool] = None,
) -> List[InboxMessageResponse]:
    """Messages addressed to the admin, newest first, each with its reply."""
    stmt, reply = _inbox_query()
    stmt = stmt.where(Message.recipient_type == PartyType.ADMIN.value)
    if sender_type:
        stmt = stmt.where(Message.sender_type == sender_type)
    if is_read is not None:
        stmt = stmt.where(Message.is_read.is_(is_read))
    if is_replied is not None:
        stmt = stmt.where(Message.is_replied.is_(is_replied))
    stmt = stmt.order_by(Message.created_at.desc(), Message.id.desc(), reply.created_at.desc())
    result = await db.execute(stmt)

    # One row per message; the newest reply wins when several exist
    seen = set()
    rows = []
    for message, reply_obj in result.all():
        if message.id in seen:
            continue
        seen.add(message.id)
        rows.append(_to_inbox_response(message, reply_obj))
    return rows


async def get_message(db: AsyncSession, message_id: int) -> Optional[InboxMessageResponse]:
    stmt, reply = _inbox_query()
    stmt = stmt.where(Message.id == message_id).order_by(reply.created_at.desc()).limit(1)
    row = (await db.execute(stmt)).first()
    return _to_inbox_response(row[0], row[1]) if row else None


async def create_message(db: AsyncSession, payload: MessageCreate) -> MessageResponse:
    """Send a message as the admin.

    A reply goes back to the original sender and flags the original as replied.
    """
    fields = dict(
        sender_id=ADMIN_PARTY_ID,
        sender_name=ADMIN_PARTY_NAME,
        sender_type=PartyType.OTHER.value,
        message=payload.message,
        **{f: getattr(payload, f) for f in _ATTACHMENT_FIELDS},
    )

    original = None
    if payload.reply_to is not None:
        original = await db.get(Message, payload.reply_to)
        if not original:
            raise NotFoundError("Original message not found")
        fields.update(
            recipient_id=original.sender_id,
            recipient_name=original.sender_name,
            recipient_type=original.sender_type,
            subject=f"Re: {original.subject}" if original.subject else DEFAULT_REPLY_SUBJECT,
            reply_to=original.id,
        )
    else:
        if not payload.recipient_id or not payload.recipient_type:
            raise ValidationError("Recipient ID and recipient type are required for new messages")
        fields.update(
            recipient_id=payload.recipient_id,
            recipient_name=payload.recipient_name or DEFAULT_RECIPIENT_NAME,
            recipient_type=payload.recipient_type,
            subject=payload.subject,
        )

    obj = Message(**fields)
    db.add(obj)
    if original is not None:
        original.is_replied = True
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def mark_as_read(db: AsyncSession, message_id: int) -> Optional[MessageResponse]:
    obj = await db.get(Message, message_id)
    if not obj:
        return None
    obj.is_read = True
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def mark_many_as_read(db: AsyncSession, ids: List[int]) -> int:
    result = await db.execute(update(Message).where(Message.id.in_(ids)).values(is_read=True))
    await db.commit()
    return result.rowcount or 0


async def delete_message(db: AsyncSession, message_id: int) -> bool:
    obj = await db.get(Message, message_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


async def unread_count(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Message.id)).where(
            Message.recipient_type == PartyType.ADMIN.value,
            Message.is_read.is_(False),
        )
    )
    return result.scalar() or 0
