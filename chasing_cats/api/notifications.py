"""Notification API endpoints for push subscriptions and sending."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from chasing_cats.api.dependencies import (
    get_current_admin,
    get_current_user,
    get_notification_service,
)
from chasing_cats.config import get_settings
from chasing_cats.database import get_db
from chasing_cats.models.user import User
from chasing_cats.schemas.notification import (
    PushQueuedResponse,
    PushSendRequest,
    PushSendResponse,
    PushStatsResponse,
    PushSubscriptionCreate,
    PushSubscriptionResult,
    VapidPublicKeyResponse,
)
from chasing_cats.services.notification_service import NotificationService, PushPayload
from chasing_cats.services.push_subscriptions import (
    get_push_stats,
    remove_subscription,
    save_subscription,
)
from chasing_cats.tasks.notifications import send_push_notification

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("/vapid-public-key", response_model=VapidPublicKeyResponse)
async def get_vapid_public_key() -> VapidPublicKeyResponse:
    """Get the VAPID public key for push notification subscription."""
    settings = get_settings()
    if not settings.push_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications not configured",
        )
    return VapidPublicKeyResponse(public_key=settings.vapid_public_key)


@router.post("/subscribe", response_model=PushSubscriptionResult)
def subscribe_push(
    subscription: PushSubscriptionCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> PushSubscriptionResult:
    """Subscribe this device to push notifications."""
    saved = save_subscription(
        db,
        current_user.id,
        endpoint=subscription.endpoint,
        p256dh=subscription.keys.p256dh,
        auth=subscription.keys.auth,
    )
    if not saved:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save subscription",
        )
    return PushSubscriptionResult(success=True, message="Subscribed to push notifications")


@router.delete("/subscribe", response_model=PushSubscriptionResult)
def unsubscribe_push(
    endpoint: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> PushSubscriptionResult:
    """Unsubscribe a device from push notifications."""
    if not remove_subscription(db, endpoint):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unsubscribe",
        )
    return PushSubscriptionResult(success=True, message="Unsubscribed from push notifications")


@router.post(
    "/send",
    response_model=PushSendResponse | PushQueuedResponse,
    responses={status.HTTP_202_ACCEPTED: {"model": PushQueuedResponse}},
)
def send_push(
    send_data: PushSendRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_admin)],
    notification_service: Annotated[NotificationService, Depends(get_notification_service)],
):
    """Send a push notification to one user or to every subscriber."""
    if send_data.send_to_all == (send_data.user_id is not None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Specify either user_id or send_to_all",
        )

    payload = PushPayload(
        title=send_data.title,
        body=send_data.body,
        icon=send_data.icon,
        badge=send_data.badge,
        tag=send_data.tag,
        url=send_data.url,
        data=send_data.data,
    )

    if send_data.background:
        task = send_push_notification.delay(asdict(payload), user_id=send_data.user_id)
        response.status_code = status.HTTP_202_ACCEPTED
        return PushQueuedResponse(queued=True, task_id=task.id)

    if send_data.send_to_all:
        result = notification_service.send_to_all(db, payload)
    else:
        result = notification_service.send_to_user(db, send_data.user_id, payload)

    message = f"Sent {result.sent} notifications"
    if result.failed:
        message += f", {result.failed} failed"
    return PushSendResponse(success=True, sent=result.sent, failed=result.failed, message=message)


@router.get("/stats", response_model=PushStatsResponse)
def get_stats(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_admin)],
) -> PushStatsResponse:
    """Get push subscription statistics."""
    return PushStatsResponse(**get_push_stats(db))
