from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from workhub.core.auth_dependency import get_db, get_current_user
from workhub.schemas.notification import NotificationListResponse, NotificationResponse
from workhub.services.notification_service import list_notifications, mark_read

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    email: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    notifications = list_notifications(db, email)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread=sum(1 for n in notifications if not n.is_read),
    )


@router.put("/{notification_id}/read")
def read_notification(
    notification_id: int,
    email: str = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not mark_read(db, notification_id, email):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"success": True}
