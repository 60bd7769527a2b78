from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from models.base import Base, new_id, utcnow

class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

Index("idx_chat_messages_project_id_created_at", ChatMessage.project_id, ChatMessage.created_at)
