from sqlalchemy.orm import Session
from sqlalchemy import asc
from models.chat_message import ChatMessage
from models.user import User
from schemas.chat_schema import ChatMessageCreate


def list_chat_messages(db: Session, project_id: str):
    """Messages of a project, oldest first, each paired with its author (or None)."""
    return (
        db.query(ChatMessage, User)
        .outerjoin(User, User.id == ChatMessage.user_id)
        .filter(ChatMessage.project_id == project_id)
        .order_by(asc(ChatMessage.created_at), asc(ChatMessage.id))
        .all()
    )


def create_chat_message(db: Session, payload: ChatMessageCreate):
    msg = ChatMessage(**payload.model_dump())
    db.add(msg)
    db.commit()
    db.refresh(msg)
    return msg
