from sqlalchemy.orm import Session
from sqlalchemy import asc, or_, select
from models.user import User
from models.project import Project
from models.project_member import ProjectMember
from models.base import utcnow
from schemas.user_schema import UserCreate


def get_user(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def list_users(db: Session, skip: int = 0, limit: int | None = None):
    q = db.query(User).order_by(asc(User.created_at)).offset(skip)
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def list_managers(db: Session):
    managed = select(Project.manager_id).where(Project.manager_id.is_not(None))
    manager_members = select(ProjectMember.user_id).where(ProjectMember.role == "manager")
    return (
        db.query(User)
        .filter(or_(User.id.in_(managed), User.id.in_(manager_members)))
        .order_by(asc(User.created_at))
        .all()
    )


def create_user(db: Session, payload: UserCreate):
    data = payload.model_dump(exclude_none=True)
    user = User(**data)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def upsert_user(db: Session, payload: UserCreate):
    user = get_user(db, payload.id) if payload.id else None
    if not user:
        return create_user(db, payload)
    for k, v in payload.model_dump(exclude_unset=True, exclude={"id"}).items():
        setattr(user, k, v)
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user
