from sqlalchemy.orm import Session
from sqlalchemy import asc, or_, select
from models import PROJECT_CASCADE
from models.project import Project
from models.project_member import ProjectMember
from models.user import User
from models.base import utcnow
from schemas.project_schema import ProjectCreate


def get_project(db: Session, project_id: str):
    return db.query(Project).filter(Project.id == project_id).first()


def list_projects_for_user(db: Session, user_id: str):
    member_of = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
    return (
        db.query(Project)
        .filter(or_(Project.manager_id == user_id, Project.id.in_(member_of)))
        .order_by(asc(Project.created_at))
        .all()
    )


def create_project(db: Session, payload: ProjectCreate):
    proj = Project(**payload.model_dump())
    db.add(proj)
    db.commit()
    db.refresh(proj)
    return proj


def update_project(db: Session, project_id: str, changes: dict):
    proj = get_project(db, project_id)
    if not proj:
        return None
    for k, v in changes.items():
        setattr(proj, k, v)
    proj.updated_at = utcnow()
    db.commit()
    db.refresh(proj)
    return proj


def delete_project(db: Session, project_id: str) -> bool:
    proj = get_project(db, project_id)
    if not proj:
        return False
    # Children go first so the outcome does not depend on the engine's FK cascade.
    for model in PROJECT_CASCADE:
        db.query(model).filter(model.project_id == project_id).delete(synchronize_session=False)
    db.delete(proj)
    db.commit()
    return True


def list_project_members(db: Session, project_id: str):
    return (
        db.query(User)
        .join(ProjectMember, ProjectMember.user_id == User.id)
        .filter(ProjectMember.project_id == project_id)
        .order_by(asc(ProjectMember.joined_at))
        .all()
    )


def add_project_member(db: Session, project_id: str, user_id: str, role: str = "member"):
    member = ProjectMember(project_id=project_id, user_id=user_id, role=role)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member
