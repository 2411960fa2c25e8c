from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    admin_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminInfo(BaseModel):
    id: int
    admin_id: str
    name: Optional[str] = None
    email: Optional[str] = None


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    admin: AdminInfo


class ForgotPasswordRequest(BaseModel):
    admin_id: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str


class CurrentAdmin(BaseModel):
    """Authenticated admin resolved from the access token."""

    id: int
    admin_id: str
    name: Optional[str] = None
    email: Optional[str] = None
