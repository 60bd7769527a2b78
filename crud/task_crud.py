from sqlalchemy.orm import Session
from sqlalchemy import asc, or_, select
from models.task import Task
from models.project import Project
from models.base import utcnow
from schemas.task_schema import TaskCreate


def get_task(db: Session, task_id: str):
    return db.query(Task).filter(Task.id == task_id).first()


def list_tasks(db: Session, project_id: str | None = None, assignee_id: str | None = None):
    q = db.query(Task)
    if project_id:
        q = q.filter(Task.project_id == project_id)
    if assignee_id:
        q = q.filter(Task.assignee_id == assignee_id)
    return q.order_by(asc(Task.created_at)).all()


def list_tasks_for_analytics(db: Session, user_id: str):
    managed = select(Project.id).where(Project.manager_id == user_id)
    return (
        db.query(Task)
        .filter(or_(Task.assignee_id == user_id, Task.project_id.in_(managed)))
        .order_by(asc(Task.created_at))
        .all()
    )


def create_task(db: Session, payload: TaskCreate):
    task = Task(**payload.model_dump())
    if task.status == "done":
        task.completed_at = utcnow()
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task_id: str, changes: dict):
    task = get_task(db, task_id)
    if not task:
        return None
    task.apply_changes(changes)
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task_id: str) -> bool:
    task = get_task(db, task_id)
    if not task:
        return False
    db.delete(task)
    db.commit()
    return True
