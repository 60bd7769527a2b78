from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index
from models.base import Base, new_id, utcnow

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

Index("idx_notifications_user_id_created_at", Notification.user_id, Notification.created_at.desc())
