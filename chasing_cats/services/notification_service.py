"""Notification service for web push fan-out delivery."""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pywebpush import WebPushException, webpush
from sqlalchemy.orm import Session

from chasing_cats.config import Settings, get_settings
from chasing_cats.models import PushSubscription
from chasing_cats.services.push_subscriptions import remove_subscription

logger = logging.getLogger(__name__)

# Push services answer these when the endpoint will never accept messages again
GONE_STATUS_CODES = frozenset({404, 410})


class DeliveryOutcome(StrEnum):
    """Result of one delivery attempt."""

    SENT = "sent"
    GONE = "gone"
    FAILED = "failed"


@dataclass
class PushPayload:
    """Notification content shown by the service worker."""

    title: str
    body: str
    icon: str | None = None
    badge: str | None = None
    tag: str | None = None
    url: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_json(self, default_icon: str, default_badge: str) -> str:
        """Serialize into the message body the service worker expects."""
        return json.dumps(
            {
                "title": self.title,
                "body": self.body,
                "icon": self.icon or default_icon,
                "badge": self.badge or default_badge,
                "tag": self.tag,
                "data": {"url": self.url or "/", **self.data},
            }
        )


@dataclass(frozen=True)
class PushTarget:
    """Snapshot of a subscription, safe to hand to worker threads."""

    endpoint: str
    p256dh: str
    auth: str

    @classmethod
    def from_subscription(cls, subscription: PushSubscription) -> "PushTarget":
        return cls(
            endpoint=subscription.endpoint,
            p256dh=subscription.p256dh_key,
            auth=subscription.auth_key,
        )


@dataclass
class PushSendResult:
    """Aggregate counts for one send call."""

    sent: int = 0
    failed: int = 0


class NotificationService:
    """Service for sending web push notifications."""

    def __init__(self, settings: Settings | None = None, max_workers: int | None = None) -> None:
        self.settings = settings or get_settings()
        self.max_workers = max_workers or self.settings.push_max_workers
        self._webpush_available = self.settings.push_configured
        if self._webpush_available:
            logger.info("Web push notifications initialized")
        else:
            logger.info("VAPID credentials not configured, push disabled")

    @property
    def is_available(self) -> bool:
        """Check if push delivery is configured."""
        return self._webpush_available

    def send_to_user(self, db: Session, user_id: int, payload: PushPayload) -> PushSendResult:
        """Send a notification to every device the user has subscribed."""
        if not self._check_available():
            return PushSendResult()

        subscriptions = (
            db.query(PushSubscription).filter(PushSubscription.user_id == user_id).all()
        )
        if not subscriptions:
            logger.info(f"No push subscriptions for user {user_id}")
            return PushSendResult()

        result = self._fan_out(db, subscriptions, payload)
        logger.info(
            f"Sent push to {result.sent}/{len(subscriptions)} devices for user {user_id}"
        )
        return result

    def send_to_all(self, db: Session, payload: PushPayload) -> PushSendResult:
        """Broadcast a notification to every subscribed device."""
        if not self._check_available():
            return PushSendResult()

        subscriptions = db.query(PushSubscription).all()
        if not subscriptions:
            logger.info("No push subscriptions to broadcast to")
            return PushSendResult()

        result = self._fan_out(db, subscriptions, payload)
        logger.info(f"Broadcast push to {result.sent}/{len(subscriptions)} devices")
        return result

    def _check_available(self) -> bool:
        if not self._webpush_available:
            logger.warning("Push notifications not available: VAPID keys are not configured")
        return self._webpush_available

    def _fan_out(
        self, db: Session, subscriptions: list[PushSubscription], payload: PushPayload
    ) -> PushSendResult:
        """Deliver to each subscription independently and prune the dead ones.

        Delivery runs on worker threads; the session is only touched here.
        """
        targets = [PushTarget.from_subscription(sub) for sub in subscriptions]
        data = payload.to_json(self.settings.push_default_icon, self.settings.push_default_badge)

        workers = min(self.max_workers, len(targets))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="webpush") as pool:
            outcomes = list(pool.map(lambda target: self._deliver(target, data), targets))

        for target, outcome in zip(targets, outcomes, strict=True):
            if outcome == DeliveryOutcome.GONE:
                logger.info(f"Removing expired subscription {target.endpoint}")
                remove_subscription(db, target.endpoint)

        sent = sum(1 for outcome in outcomes if outcome == DeliveryOutcome.SENT)
        return PushSendResult(sent=sent, failed=len(outcomes) - sent)

    def _deliver(self, target: PushTarget, data: str) -> DeliveryOutcome:
        """Attempt one delivery and classify the result."""
        try:
            webpush(
                subscription_info={
                    "endpoint": target.endpoint,
                    "keys": {
                        "p256dh": target.p256dh,
                        "auth": target.auth,
                    },
                },
                data=data,
                vapid_private_key=self.settings.vapid_private_key,
                vapid_claims={
                    "sub": self.settings.vapid_claims_subject,
                },
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Push failed for {target.endpoint} (status {status_code}): {e}")
            if status_code in GONE_STATUS_CODES:
                return DeliveryOutcome.GONE
            return DeliveryOutcome.FAILED
        except Exception as e:
            logger.error(f"Push failed for {target.endpoint}: {e}")
            return DeliveryOutcome.FAILED
        return DeliveryOutcome.SENT
