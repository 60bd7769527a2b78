from datetime import datetime

from schemas.base import CamelModel


class NotificationCreate(CamelModel):
    user_id: str
    type: str
    title: str
    message: str


class NotificationResponse(NotificationCreate):
    id: str
    is_read: bool = False
    created_at: datetime | None = None
