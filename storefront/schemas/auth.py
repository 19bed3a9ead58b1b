import uuid
from datetime import datetime

from pydantic import Field

from storefront.models.user import Role
from storefront.schemas.common import CamelModel

# E.164 (예: +966500000000)
PHONE_PATTERN = r"^\+[1-9]\d{1,14}$"
ACCESS_CODE_PATTERN = r"^[A-Za-z0-9]{8}$"


class SignupRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(pattern=PHONE_PATTERN)
    password: str = Field(min_length=6, max_length=128)
    confirm_password: str = Field(min_length=1)


class ActivateRequest(CamelModel):
    phone: str = Field(min_length=1)
    password: str = Field(min_length=1)
    access_code: str = Field(min_length=8, max_length=8, pattern=ACCESS_CODE_PATTERN)


class LoginRequest(CamelModel):
    phone: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(CamelModel):
    refresh_token: str | None = None


class SignupResponse(CamelModel):
    id: uuid.UUID
    name: str
    phone: str
    active: bool


class UserResponse(CamelModel):
    id: uuid.UUID
    name: str
    phone: str
    role: Role
    active: bool


class ProfileResponse(UserResponse):
    salary_range: str | None = None
    interested_categories: list[str] | None = None
    created_at: datetime


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    expires_in: int
