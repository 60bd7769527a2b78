import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from core.auth import Principal, get_current_user
from schemas.chat_schema import ChatMessageWithUser
from schemas.notification_schema import NotificationCreate
from schemas.project_schema import ProjectResponse
from schemas.task_schema import TaskResponse
from schemas.user_schema import UserResponse
from schemas.validation import validate_project, validate_project_update
from storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])


def _get_or_404(storage: Storage, project_id: str):
    proj = storage.get_project_by_id(project_id)
    if not proj:
        raise HTTPException(status_code=404, detail="Project not found")
    return proj


@router.get("", response_model=list[ProjectResponse])
def list_all(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_projects(current_user.user_id)


@router.get("/{project_id}", response_model=ProjectResponse)
def read_one(project_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return _get_or_404(storage, project_id)


@router.post("", response_model=ProjectResponse, status_code=201)
def create(
    body: dict = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: Principal = Depends(get_current_user),
):
    payload = validate_project({**body, "managerId": current_user.user_id})
    member_ids = body.get("memberIds") or []
    if not isinstance(member_ids, list):
        raise HTTPException(status_code=400, detail="memberIds must be a list")
    proj = storage.create_project(payload)

    for member_id in member_ids:
        if member_id == current_user.user_id:
            continue
        if not storage.user_exists(member_id):
            logger.warning(f"Skipping unknown member {member_id} on project {proj.id}")
            continue
        storage.add_project_member(proj.id, member_id)
        storage.create_notification(NotificationCreate(
            user_id=member_id,
            type="project_created",
            title="New Project Assignment",
            message=f'You\'ve been added to the project "{proj.name}"',
        ))
    return proj


@router.put("/{project_id}", response_model=ProjectResponse)
def update(
    project_id: str,
    body: dict = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: Principal = Depends(get_current_user),
):
    proj = storage.update_project(project_id, validate_project_update(body))
    if not proj:
        raise HTTPException(status_code=404, detail="Project not found")
    return proj


@router.delete("/{project_id}", status_code=204)
def delete(project_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    ok = storage.delete_project(project_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Project not found")
    return None


@router.get("/{project_id}/tasks", response_model=list[TaskResponse])
def list_tasks(project_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_tasks_by_project(project_id)


@router.get("/{project_id}/members", response_model=list[UserResponse])
def list_members(project_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_project_members(project_id)


@router.get("/{project_id}/chat", response_model=list[ChatMessageWithUser])
def chat_history(project_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_chat_messages(project_id)
