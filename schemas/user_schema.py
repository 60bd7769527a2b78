from datetime import datetime

from schemas.base import CamelModel


class UserBase(CamelModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class UserCreate(UserBase):
    id: str | None = None


class UserResponse(UserBase):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserSummary(CamelModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
