"""Push subscription registry.

Registration is best effort: failures are logged and reported as ``False``
so a broken subscribe call never takes the caller's page down with it.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from chasing_cats.models.push_subscription import PushSubscription

logger = logging.getLogger(__name__)


def get_subscription(db: Session, endpoint: str) -> PushSubscription | None:
    """Get a subscription by its endpoint."""
    return db.query(PushSubscription).filter(PushSubscription.endpoint == endpoint).first()


def _upsert(db: Session, user_id: int, endpoint: str, p256dh: str, auth: str) -> None:
    existing = get_subscription(db, endpoint)
    if existing:
        # Same device, possibly a different account: reassign and refresh keys
        existing.user_id = user_id
        existing.p256dh_key = p256dh
        existing.auth_key = auth
    else:
        db.add(
            PushSubscription(
                user_id=user_id,
                endpoint=endpoint,
                p256dh_key=p256dh,
                auth_key=auth,
            )
        )
    db.commit()


def save_subscription(db: Session, user_id: int, endpoint: str, p256dh: str, auth: str) -> bool:
    """Register a device endpoint for a user, upserting on endpoint.

    Returns True if the subscription is stored.
    """
    try:
        try:
            _upsert(db, user_id, endpoint, p256dh, auth)
        except IntegrityError:
            # A concurrent request inserted the same endpoint first; update it instead
            db.rollback()
            _upsert(db, user_id, endpoint, p256dh, auth)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save push subscription for user {user_id}: {e}")
        return False

    logger.info(f"Saved push subscription for user {user_id}")
    return True


def remove_subscription(db: Session, endpoint: str) -> bool:
    """Delete a subscription by endpoint. A missing endpoint counts as removed."""
    try:
        deleted = (
            db.query(PushSubscription).filter(PushSubscription.endpoint == endpoint).delete()
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to remove push subscription {endpoint}: {e}")
        return False

    if deleted:
        logger.info(f"Removed push subscription {endpoint}")
    return True


def get_push_stats(db: Session) -> dict[str, int]:
    """Count subscriptions and the distinct users that own them."""
    total = db.query(func.count(PushSubscription.id)).scalar()
    unique_users = db.query(func.count(func.distinct(PushSubscription.user_id))).scalar()
    return {"total_subscriptions": total, "unique_users": unique_users}
