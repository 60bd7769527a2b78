import uuid

from fastapi import APIRouter, Depends, HTTPException
from core.auth import Principal, get_current_user
from schemas.auth_schema import InviteRequest
from schemas.notification_schema import NotificationCreate
from schemas.user_schema import UserCreate, UserResponse
from storage import Storage, get_storage


router = APIRouter(prefix="/api/team", tags=["Team"])


@router.get("/members", response_model=list[UserResponse])
def members(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_all_users()


@router.get("/managers", response_model=list[UserResponse])
def managers(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_managers()


@router.post("/invite", response_model=UserResponse, status_code=201)
def invite(
    payload: InviteRequest,
    storage: Storage = Depends(get_storage),
    current_user: Principal = Depends(get_current_user),
):
    """
    Provision a local user for the invited email and greet them with a notification.
    No email is sent.
    """
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")
    if storage.get_user_by_email(payload.email):
        raise HTTPException(status_code=400, detail="User already exists with this email")

    local_part = payload.email.split("@")[0]
    user = storage.create_user(UserCreate(
        id=f"user-{uuid.uuid4().hex}",
        email=payload.email,
        first_name=local_part,
        last_name="",
        profile_image_url=f"https://ui-avatars.com/api/?name={local_part}",
    ))

    storage.create_notification(NotificationCreate(
        user_id=user.id,
        type="team_invitation",
        title="Welcome to SynergySphere",
        message=f"You've been invited to join the team as a {payload.role or 'member'}.",
    ))
    return user
