from fastapi import APIRouter, Body, Depends, HTTPException
from core.auth import Principal, get_current_user
from schemas.notification_schema import NotificationCreate
from schemas.task_schema import TaskResponse
from schemas.validation import validate_task, validate_task_update
from storage import Storage, get_storage


router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


def _check_references(storage: Storage, project_id=None, assignee_id=None):
    if project_id and not storage.get_project_by_id(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    if assignee_id and not storage.user_exists(assignee_id):
        raise HTTPException(status_code=404, detail="Assignee not found")


@router.get("/my", response_model=list[TaskResponse])
def my_tasks(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_tasks_by_user(current_user.user_id)


@router.get("/project/{project_id}", response_model=list[TaskResponse])
def project_tasks(project_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_tasks_by_project(project_id)


@router.post("", response_model=TaskResponse, status_code=201)
def create(
    body: dict = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: Principal = Depends(get_current_user),
):
    payload = validate_task(body)
    _check_references(storage, payload.project_id, payload.assignee_id)
    task = storage.create_task(payload)

    if task.assignee_id and task.assignee_id != current_user.user_id:
        storage.create_notification(NotificationCreate(
            user_id=task.assignee_id,
            type="task_assigned",
            title="New Task Assigned",
            message=f'You\'ve been assigned the task "{task.title}"',
        ))
    return task


@router.put("/{task_id}", response_model=TaskResponse)
def update(
    task_id: str,
    body: dict = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: Principal = Depends(get_current_user),
):
    changes = validate_task_update(body)
    if not storage.get_task_by_id(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    _check_references(storage, changes.project_id, changes.assignee_id)
    task = storage.update_task(task_id, changes)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_status(
    task_id: str,
    body: dict = Body(...),
    storage: Storage = Depends(get_storage),
    current_user: Principal = Depends(get_current_user),
):
    new_status = body.get("status")
    if not new_status:
        raise HTTPException(status_code=400, detail="Status is required")
    task = storage.update_task(task_id, validate_task_update({"status": new_status}))
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.delete("/{task_id}", status_code=204)
def delete(task_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    ok = storage.delete_task(task_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Task not found")
    return None
