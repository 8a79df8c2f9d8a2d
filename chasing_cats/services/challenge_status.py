"""Challenge lifecycle: status resolution and reconciliation."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from chasing_cats.models.challenge import PhotoChallenge
from chasing_cats.models.enums import ChallengeStatus

logger = logging.getLogger(__name__)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC.

    SQLite drops tzinfo on the way back out, PostgreSQL does not.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def resolve_status(
    now: datetime,
    start_date: datetime,
    end_date: datetime,
    voting_end: datetime,
) -> ChallengeStatus:
    """Return the phase a challenge is in at ``now``.

    Thresholds are checked from the last phase backwards, so the result never
    moves to an earlier phase as ``now`` grows, even when the dates are out of
    order.
    """
    now = ensure_utc(now)
    if now >= ensure_utc(voting_end):
        return ChallengeStatus.COMPLETED
    if now >= ensure_utc(end_date):
        return ChallengeStatus.VOTING
    if now >= ensure_utc(start_date):
        return ChallengeStatus.ACTIVE
    return ChallengeStatus.UPCOMING


def effective_status(challenge: PhotoChallenge, now: datetime) -> ChallengeStatus:
    """Status the challenge should have right now.

    A manual override wins until it is cleared; otherwise the dates decide.
    """
    if challenge.status_overridden:
        return ChallengeStatus(challenge.status)
    return resolve_status(now, challenge.start_date, challenge.end_date, challenge.voting_end)


def reconcile_all_statuses(db: Session, now: datetime | None = None) -> int:
    """Persist the date-derived status of every challenge whose phase changed.

    Overridden challenges are skipped. Only ``status`` is written.

    Returns:
        Number of challenges whose status was updated.
    """
    now = now or datetime.now(UTC)
    updated = 0

    challenges = (
        db.query(PhotoChallenge).filter(PhotoChallenge.status_overridden.is_(False)).all()
    )
    for challenge in challenges:
        resolved = resolve_status(
            now, challenge.start_date, challenge.end_date, challenge.voting_end
        )
        if challenge.status != resolved:
            logger.info(
                f"Challenge {challenge.id} ({challenge.slug}): {challenge.status.value} -> "
                f"{resolved.value}"
            )
            challenge.status = resolved
            updated += 1

    if updated:
        db.commit()
    logger.info(f"Reconciled challenge statuses: {updated} updated of {len(challenges)}")
    return updated
