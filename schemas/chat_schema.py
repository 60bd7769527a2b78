from datetime import datetime

from schemas.base import CamelModel
from schemas.user_schema import UserResponse


class ChatMessageCreate(CamelModel):
    project_id: str
    user_id: str
    content: str


class ChatMessageResponse(ChatMessageCreate):
    id: str
    created_at: datetime | None = None


class ChatMessageWithUser(ChatMessageResponse):
    user: UserResponse | None = None
