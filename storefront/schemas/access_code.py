import uuid
from datetime import datetime

from pydantic import Field

from storefront.models.user import Role
from storefront.schemas.common import CamelModel


class GenerateCodesRequest(CamelModel):
    role: Role
    valid_days: int = Field(ge=1, le=3650)
    uses_allowed: int = Field(ge=1, le=1000)
    count: int = Field(default=1, ge=1, le=100)
    note: str | None = None


class GeneratedCode(CamelModel):
    id: uuid.UUID
    code: str
    role: Role
    valid_from: datetime
    valid_until: datetime
    uses_allowed: int
    note: str | None = None


class AccessCodeResponse(GeneratedCode):
    uses_count: int
    is_used: bool
    created_at: datetime
