"""Tests for challenge status resolution and reconciliation."""

from datetime import datetime, timedelta

import pytest

from chasing_cats.models.enums import ChallengeStatus
from chasing_cats.services.challenge_service import ChallengeService
from chasing_cats.services.challenge_status import (
    effective_status,
    ensure_utc,
    reconcile_all_statuses,
    resolve_status,
)

PHASE_ORDER = [
    ChallengeStatus.UPCOMING,
    ChallengeStatus.ACTIVE,
    ChallengeStatus.VOTING,
    ChallengeStatus.COMPLETED,
]


def make_challenge(db, dates, now, slug="golden-hour", **extra):
    """Create a challenge through the service at a fixed clock time."""
    data = {
        "slug": slug,
        "title": "Golden Hour",
        "theme": "Cats in warm light",
        "description": "Catch your cat in the last light of the day.",
        **dates,
        **extra,
    }
    return ChallengeService(db).create_challenge(data, now=now)


class TestResolveStatus:
    """Tests for resolve_status."""

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [
            (timedelta(seconds=-1), ChallengeStatus.UPCOMING),
            (timedelta(0), ChallengeStatus.ACTIVE),
            (timedelta(days=5) - timedelta(seconds=1), ChallengeStatus.ACTIVE),
            (timedelta(days=5), ChallengeStatus.VOTING),
            (timedelta(days=7) - timedelta(seconds=1), ChallengeStatus.VOTING),
            (timedelta(days=7), ChallengeStatus.COMPLETED),
            (timedelta(days=365), ChallengeStatus.COMPLETED),
        ],
    )
    def test_phase_boundaries(self, t0, challenge_dates, offset, expected):
        """Each threshold is inclusive of its own instant."""
        assert resolve_status(t0 + offset, **challenge_dates) == expected

    def test_never_moves_backwards(self, t0, challenge_dates):
        """The phase only advances as time passes."""
        previous = 0
        for hours in range(-48, 24 * 9, 6):
            phase = resolve_status(t0 + timedelta(hours=hours), **challenge_dates)
            index = PHASE_ORDER.index(phase)
            assert index >= previous
            previous = index

    def test_out_of_order_dates(self, t0):
        """Inconsistent dates still resolve without going backwards."""
        start = t0 + timedelta(days=3)
        end = t0 + timedelta(days=1)
        voting_end = t0 + timedelta(days=2)

        assert resolve_status(t0, start, end, voting_end) == ChallengeStatus.UPCOMING
        assert (
            resolve_status(t0 + timedelta(days=1), start, end, voting_end)
            == ChallengeStatus.VOTING
        )
        assert (
            resolve_status(t0 + timedelta(days=2), start, end, voting_end)
            == ChallengeStatus.COMPLETED
        )
        assert (
            resolve_status(t0 + timedelta(days=4), start, end, voting_end)
            == ChallengeStatus.COMPLETED
        )

    def test_naive_datetimes_are_utc(self, t0, challenge_dates):
        """Naive values, as SQLite returns them, compare as UTC."""
        naive = {key: value.replace(tzinfo=None) for key, value in challenge_dates.items()}
        assert resolve_status(t0 + timedelta(days=6), **naive) == ChallengeStatus.VOTING
        assert (
            resolve_status((t0 + timedelta(days=6)).replace(tzinfo=None), **challenge_dates)
            == ChallengeStatus.VOTING
        )

    def test_ensure_utc_keeps_aware_values(self, t0):
        """Aware datetimes are returned unchanged."""
        assert ensure_utc(t0) is t0
        assert ensure_utc(datetime(2026, 3, 1, 12, 0)) == t0


class TestAcceptance:
    """Tests for phase capabilities."""

    def test_only_active_accepts_entries(self):
        """Entries are only accepted while the challenge is active."""
        assert [phase.accepts_entries() for phase in PHASE_ORDER] == [False, True, False, False]

    def test_only_voting_accepts_votes(self):
        """Votes are only accepted during voting."""
        assert [phase.accepts_votes() for phase in PHASE_ORDER] == [False, False, True, False]


class TestReconcile:
    """Tests for reconcile_all_statuses."""

    def test_initial_status_from_dates(self, db, t0, challenge_dates):
        """A new challenge gets the status its dates call for."""
        upcoming = make_challenge(db, challenge_dates, now=t0 - timedelta(days=1))
        active = make_challenge(
            db, challenge_dates, now=t0 + timedelta(hours=1), slug="whiskers"
        )

        assert upcoming.status == ChallengeStatus.UPCOMING
        assert active.status == ChallengeStatus.ACTIVE
        assert upcoming.status_overridden is False

    def test_updates_stale_statuses(self, db, t0, challenge_dates):
        """Challenges whose phase changed are written back."""
        challenge = make_challenge(db, challenge_dates, now=t0 - timedelta(days=1))

        updated = reconcile_all_statuses(db, now=t0 + timedelta(days=6))

        assert updated == 1
        db.refresh(challenge)
        assert challenge.status == ChallengeStatus.VOTING

    def test_idempotent(self, db, t0, challenge_dates):
        """A second pass at the same instant changes nothing."""
        make_challenge(db, challenge_dates, now=t0 - timedelta(days=1))
        make_challenge(db, challenge_dates, now=t0 - timedelta(days=1), slug="whiskers")

        now = t0 + timedelta(days=1)
        assert reconcile_all_statuses(db, now=now) == 2
        assert reconcile_all_statuses(db, now=now) == 0

    def test_leaves_featured_alone(self, db, t0, challenge_dates):
        """Only status is written by reconciliation."""
        challenge = make_challenge(
            db, challenge_dates, now=t0 - timedelta(days=1), featured=True
        )

        reconcile_all_statuses(db, now=t0 + timedelta(days=8))

        db.refresh(challenge)
        assert challenge.status == ChallengeStatus.COMPLETED
        assert challenge.featured is True

    def test_respects_override(self, db, t0, challenge_dates):
        """An admin override survives reconciliation."""
        challenge = make_challenge(db, challenge_dates, now=t0 + timedelta(hours=1))
        service = ChallengeService(db)
        service.update_challenge(challenge.id, {"status": "voting"}, now=t0 + timedelta(hours=1))

        assert reconcile_all_statuses(db, now=t0 + timedelta(days=8)) == 0
        db.refresh(challenge)
        assert challenge.status == ChallengeStatus.VOTING
        assert effective_status(challenge, t0 + timedelta(days=8)) == ChallengeStatus.VOTING

    def test_date_edit_clears_override(self, db, t0, challenge_dates):
        """Moving the dates hands the status back to the clock."""
        challenge = make_challenge(db, challenge_dates, now=t0 + timedelta(hours=1))
        service = ChallengeService(db)
        now = t0 + timedelta(hours=1)
        service.update_challenge(challenge.id, {"status": "completed"}, now=now)

        updated = service.update_challenge(
            challenge.id, {"voting_end": t0 + timedelta(days=10)}, now=now
        )

        assert updated.status_overridden is False
        assert updated.status == ChallengeStatus.ACTIVE

    def test_clear_override_flag(self, db, t0, challenge_dates):
        """clear_override re-derives the status without touching dates."""
        challenge = make_challenge(db, challenge_dates, now=t0 + timedelta(hours=1))
        service = ChallengeService(db)
        now = t0 + timedelta(days=6)
        service.update_challenge(challenge.id, {"status": "active"}, now=now)

        updated = service.update_challenge(challenge.id, {"clear_override": True}, now=now)

        assert updated.status_overridden is False
        assert updated.status == ChallengeStatus.VOTING

    def test_effective_status_without_override(self, db, t0, challenge_dates):
        """A stale stored status does not hide the current phase."""
        challenge = make_challenge(db, challenge_dates, now=t0 - timedelta(days=1))

        assert challenge.status == ChallengeStatus.UPCOMING
        assert effective_status(challenge, t0 + timedelta(days=6)) == ChallengeStatus.VOTING
