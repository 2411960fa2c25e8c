import logging

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.auth.schemas import AdminInfo, LoginRequest, LoginResponse
from app.auth.security import create_access_token, create_reset_token, hash_password, verify_password
from app.core.clock import as_utc, utcnow
from app.core.config import settings
from app.core.exceptions import ServiceError, ValidationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid admin ID or password"
FORGOT_PASSWORD_MESSAGE = "If an account exists with this Admin ID, a password reset link has been sent."
RESET_PASSWORD_MESSAGE = "Password has been reset successfully"
MIN_PASSWORD_LENGTH = 6


def _admin_info(admin: Admin) -> AdminInfo:
    return AdminInfo(id=admin.id, admin_id=admin.admin_id, name=admin.name, email=admin.email)


async def _get_by_admin_id(db: AsyncSession, admin_id: str):
    result = await db.execute(select(Admin).where(Admin.admin_id == admin_id.strip()))
    return result.scalar_one_or_none()


async def login_admin(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    admin = await _get_by_admin_id(db, payload.admin_id)
    # Same message for unknown id and wrong password
    if not admin or not verify_password(payload.password, admin.password_hash):
        raise ServiceError(INVALID_CREDENTIALS_MESSAGE, status.HTTP_401_UNAUTHORIZED)

    token = create_access_token(
        subject={"id": admin.id, "admin_id": admin.admin_id, "role": "admin"}
    )
    return LoginResponse(token=token, admin=_admin_info(admin))


def build_reset_link(token: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/admin/reset-password?token={token}"


def deliver_reset_link(admin: Admin, link: str) -> None:
    """Hand the reset link to the delivery channel. Outbound email is external; the link is logged."""
    logger.info("Password reset link issued for admin %s: %s", admin.admin_id, link)


async def forgot_password(db: AsyncSession, admin_id: str) -> str:
    """Issue a reset token when the admin exists. Always returns the same neutral message."""
    admin = await _get_by_admin_id(db, admin_id)
    if not admin:
        return FORGOT_PASSWORD_MESSAGE

    token, expires_at = create_reset_token()
    admin.reset_token = token
    admin.reset_token_expiry = expires_at
    await db.commit()

    deliver_reset_link(admin, build_reset_link(token))
    return FORGOT_PASSWORD_MESSAGE


async def reset_password(db: AsyncSession, token: str, new_password: str) -> str:
    if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long")

    result = await db.execute(select(Admin).where(Admin.reset_token == token))
    admin = result.scalar_one_or_none()
    if not admin or not admin.reset_token_expiry or as_utc(admin.reset_token_expiry) <= utcnow():
        raise ValidationError("Invalid or expired reset token")

    admin.password_hash = hash_password(new_password)
    admin.reset_token = None
    admin.reset_token_expiry = None
    await db.commit()
    return RESET_PASSWORD_MESSAGE
