"""Celery tasks for background push delivery."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from chasing_cats.celery_app import app as celery_app
from chasing_cats.database import SessionLocal
from chasing_cats.services.notification_service import NotificationService, PushPayload

logger = logging.getLogger(__name__)


@celery_app.task
def send_push_notification(payload: dict[str, Any], user_id: int | None = None) -> dict:
    """Deliver a notification to one user, or to everyone when no user is given.

    Args:
        payload: PushPayload fields (title, body, icon, badge, tag, url, data)
        user_id: Target user, or None to broadcast

    Returns:
        dict with sent and failed counts
    """
    db: Session = SessionLocal()
    try:
        service = NotificationService()
        push_payload = PushPayload(**payload)
        if user_id is None:
            result = service.send_to_all(db, push_payload)
        else:
            result = service.send_to_user(db, user_id, push_payload)
        logger.info(f"Background push complete: sent={result.sent} failed={result.failed}")
        return {"sent": result.sent, "failed": result.failed}
    finally:
        db.close()
