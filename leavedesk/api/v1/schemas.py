"""Pydantic schemas for auth and shared response shapes."""

from pydantic import BaseModel, EmailStr, Field

from leavedesk.schemas.employees import ROLE_PATTERN


# ── Auth Schemas ──────────────────────────────────────────────────────────────


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="employee", pattern=ROLE_PATTERN)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


# ── Shared ────────────────────────────────────────────────────────────────────


class SuccessResponse(BaseModel):
    success: bool = True
