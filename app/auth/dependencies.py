from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.auth.schemas import CurrentAdmin
from app.core.config import settings
from app.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/admin/login-oauth")

ADMIN_ROLE = "admin"


async def get_current_admin(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentAdmin:
    """Resolve the authenticated admin from the bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise credentials_exception

    admin_pk = payload.get("id")
    admin_id = payload.get("admin_id")
    if admin_pk is None or not admin_id or payload.get("role") != ADMIN_ROLE:
        raise credentials_exception

    result = await db.execute(select(Admin).where(Admin.id == admin_pk, Admin.admin_id == admin_id))
    admin = result.scalar_one_or_none()
    if not admin:
        raise credentials_exception

    return CurrentAdmin(id=admin.id, admin_id=admin.admin_id, name=admin.name, email=admin.email)
