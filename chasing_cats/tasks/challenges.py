"""Celery tasks for photo challenge maintenance."""

from sqlalchemy.orm import Session

from chasing_cats.celery_app import app as celery_app
from chasing_cats.database import SessionLocal
from chasing_cats.services.challenge_status import reconcile_all_statuses


@celery_app.task
def reconcile_challenge_statuses() -> dict:
    """Move challenges into the phase their dates call for.

    Scheduled by celery-beat. Admin listings also reconcile on demand, so a
    missed run only widens the window in which stored statuses are stale.
    """
    db: Session = SessionLocal()
    try:
        updated = reconcile_all_statuses(db)
        return {"updated": updated}
    finally:
        db.close()
