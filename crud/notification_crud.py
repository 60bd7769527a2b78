from sqlalchemy.orm import Session
from sqlalchemy import desc
from models.notification import Notification
from schemas.notification_schema import NotificationCreate


def get_notification(db: Session, notification_id: str):
    return db.query(Notification).filter(Notification.id == notification_id).first()


def list_notifications(db: Session, user_id: str):
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(desc(Notification.created_at))
        .all()
    )


def create_notification(db: Session, payload: NotificationCreate):
    n = Notification(**payload.model_dump(), is_read=False)
    db.add(n)
    db.commit()
    db.refresh(n)
    return n


def mark_as_read(db: Session, notification_id: str) -> bool:
    n = get_notification(db, notification_id)
    if not n:
        return False
    n.is_read = True
    db.commit()
    return True
