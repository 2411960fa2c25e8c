from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.auth.schemas import (
    CurrentAdmin,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
)
from app.auth.services import ServiceError, forgot_password, login_admin, reset_password
from app.core.schemas import ActionResult
from app.db.session import get_db

router = APIRouter(prefix="/api/admin", tags=["admin-auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        return await login_admin(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    payload = LoginRequest(
        admin_id=form_data.username.strip(),
        password=form_data.password,
    )
    try:
        result = await login_admin(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "access_token": result.token,
        "token_type": "bearer",
    }


@router.post("/forgot-password", response_model=ActionResult)
async def forgot(
    payload: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ActionResult:
    message = await forgot_password(db, payload.admin_id)
    return ActionResult(message=message)


@router.post("/reset-password", response_model=ActionResult)
async def reset(
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ActionResult:
    try:
        message = await reset_password(db, payload.token, payload.new_password)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ActionResult(message=message)


@router.get("/me", response_model=CurrentAdmin)
async def me(current_admin: CurrentAdmin = Depends(get_current_admin)) -> CurrentAdmin:
    return current_admin
