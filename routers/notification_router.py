from fastapi import APIRouter, Depends, HTTPException
from core.auth import Principal, get_current_user
from schemas.notification_schema import NotificationResponse
from storage import Storage, get_storage


router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationResponse])
def list_all(storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    return storage.get_notifications(current_user.user_id)


@router.patch("/{notification_id}/read", status_code=204)
def mark_read(notification_id: str, storage: Storage = Depends(get_storage), current_user: Principal = Depends(get_current_user)):
    ok = storage.mark_notification_as_read(notification_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Notification not found")
    return None
