"""Celery application configuration."""

from celery import Celery

from chasing_cats.config import get_settings

settings = get_settings()

app = Celery(
    "chasing_cats",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["chasing_cats.tasks.challenges", "chasing_cats.tasks.notifications"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
    beat_schedule={
        "reconcile-challenge-statuses": {
            "task": "chasing_cats.tasks.challenges.reconcile_challenge_statuses",
            "schedule": float(settings.challenge_reconcile_interval_seconds),
        },
    },
)
