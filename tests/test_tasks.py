"""Tests for Celery tasks."""

from unittest.mock import MagicMock, patch

import pytest

from chasing_cats.celery_app import app as celery_app
from chasing_cats.services.notification_service import PushPayload, PushSendResult
from chasing_cats.tasks.challenges import reconcile_challenge_statuses
from chasing_cats.tasks.notifications import send_push_notification


class TestReconcileTask:
    """Tests for the scheduled status reconciliation task."""

    def test_reconciles_and_closes_session(self):
        """Test the task runs a pass and always closes its session."""
        mock_db = MagicMock()
        with (
            patch("chasing_cats.tasks.challenges.SessionLocal", return_value=mock_db),
            patch(
                "chasing_cats.tasks.challenges.reconcile_all_statuses", return_value=3
            ) as mock_reconcile,
        ):
            result = reconcile_challenge_statuses()

        assert result == {"updated": 3}
        mock_reconcile.assert_called_once_with(mock_db)
        mock_db.close.assert_called_once()

    def test_closes_session_on_error(self):
        """Test the session is closed when the pass fails."""
        mock_db = MagicMock()
        with (
            patch("chasing_cats.tasks.challenges.SessionLocal", return_value=mock_db),
            patch(
                "chasing_cats.tasks.challenges.reconcile_all_statuses",
                side_effect=RuntimeError("boom"),
            ),
        ):
            with pytest.raises(RuntimeError):
                reconcile_challenge_statuses()

        mock_db.close.assert_called_once()

    def test_scheduled_by_beat(self):
        """Test celery-beat runs the reconciliation periodically."""
        schedule = celery_app.conf.beat_schedule["reconcile-challenge-statuses"]
        assert schedule["task"] == "chasing_cats.tasks.challenges.reconcile_challenge_statuses"
        assert schedule["schedule"] == 300.0


class TestSendPushTask:
    """Tests for the background push delivery task."""

    def test_broadcast(self):
        """Test a task without a user broadcasts."""
        mock_db = MagicMock()
        with (
            patch("chasing_cats.tasks.notifications.SessionLocal", return_value=mock_db),
            patch("chasing_cats.tasks.notifications.NotificationService") as mock_service_cls,
        ):
            service = mock_service_cls.return_value
            service.send_to_all.return_value = PushSendResult(sent=4, failed=1)

            result = send_push_notification({"title": "Hi", "body": "There"})

        assert result == {"sent": 4, "failed": 1}
        service.send_to_all.assert_called_once_with(
            mock_db, PushPayload(title="Hi", body="There")
        )
        service.send_to_user.assert_not_called()
        mock_db.close.assert_called_once()

    def test_single_user(self):
        """Test a task with a user only targets that user."""
        mock_db = MagicMock()
        with (
            patch("chasing_cats.tasks.notifications.SessionLocal", return_value=mock_db),
            patch("chasing_cats.tasks.notifications.NotificationService") as mock_service_cls,
        ):
            service = mock_service_cls.return_value
            service.send_to_user.return_value = PushSendResult(sent=1, failed=0)

            result = send_push_notification(
                {"title": "You won", "body": "First place", "url": "/challenges/cat-naps"},
                user_id=42,
            )

        assert result == {"sent": 1, "failed": 0}
        db_arg, user_arg, payload = service.send_to_user.call_args.args
        assert db_arg is mock_db
        assert user_arg == 42
        assert payload.url == "/challenges/cat-naps"
        service.send_to_all.assert_not_called()
