from pydantic import BaseModel

from schemas.base import CamelModel
from schemas.user_schema import UserSummary


class RegisterRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    message: str
    user: UserSummary


class InviteRequest(BaseModel):
    email: str | None = None
    role: str | None = None


class MessageResponse(BaseModel):
    message: str
