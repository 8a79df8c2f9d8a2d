"""Photo challenge service: entries, voting, ranking and admin operations."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chasing_cats.models.challenge import ChallengeEntry, ChallengeVote, PhotoChallenge
from chasing_cats.models.enums import ChallengeStatus
from chasing_cats.services.challenge_status import effective_status, ensure_utc, resolve_status
from chasing_cats.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

ENTRY_FIELD_LIMITS = {
    "title": 100,
    "caption": 500,
    "location": 100,
    "camera_info": 200,
}

WINNER_PLACES = 3


@dataclass
class RankedEntry:
    """An entry's position in a challenge ranking."""

    rank: int
    entry: ChallengeEntry
    vote_count: int
    is_winner: bool = False


def is_absolute_url(value: str) -> bool:
    """Check that a string parses as a URL with both scheme and host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ChallengeService:
    """Service for photo challenge lifecycle operations."""

    def __init__(self, db: Session, clock: Callable[[], datetime] | None = None):
        self.db = db
        self.clock = clock or _utcnow

    # Challenges

    def get_challenge(self, challenge_id: int) -> PhotoChallenge:
        """Get a challenge by id or raise NotFoundError."""
        challenge = self.db.query(PhotoChallenge).filter(PhotoChallenge.id == challenge_id).first()
        if not challenge:
            raise NotFoundError("Challenge not found")
        return challenge

    def get_challenge_by_slug(self, slug: str) -> PhotoChallenge:
        """Get a challenge by slug or raise NotFoundError."""
        challenge = self.db.query(PhotoChallenge).filter(PhotoChallenge.slug == slug).first()
        if not challenge:
            raise NotFoundError("Challenge not found")
        return challenge

    def create_challenge(
        self, data: dict[str, Any], now: datetime | None = None
    ) -> PhotoChallenge:
        """Create a challenge with a date-derived initial status."""
        now = now or self.clock()

        slug = data["slug"]
        if not SLUG_PATTERN.match(slug):
            raise ValidationError(
                "Slug must be lowercase letters and digits separated by single hyphens"
            )
        self._validate_dates(data["start_date"], data["end_date"], data["voting_end"])
        banner = data.get("banner_image_url")
        if banner and not is_absolute_url(banner):
            raise ValidationError("Banner image must be an absolute URL")

        if self.db.query(PhotoChallenge).filter(PhotoChallenge.slug == slug).first():
            raise ConflictError("A challenge with this slug already exists")

        challenge = PhotoChallenge(
            slug=slug,
            title=data["title"],
            theme=data["theme"],
            description=data["description"],
            rules=data.get("rules") or None,
            prize_info=data.get("prize_info") or None,
            banner_image_url=banner or None,
            start_date=data["start_date"],
            end_date=data["end_date"],
            voting_end=data["voting_end"],
            featured=bool(data.get("featured", False)),
            status=resolve_status(now, data["start_date"], data["end_date"], data["voting_end"]),
            status_overridden=False,
        )
        self.db.add(challenge)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("A challenge with this slug already exists") from None
        self.db.refresh(challenge)

        logger.info(
            f"Created challenge {challenge.id} ({challenge.slug}) as {challenge.status.value}"
        )
        return challenge

    def update_challenge(
        self, challenge_id: int, data: dict[str, Any], now: datetime | None = None
    ) -> PhotoChallenge:
        """Apply an admin update.

        Setting ``status`` is a manual override that reconciliation respects.
        Editing any date without setting ``status`` drops the override and
        re-derives the status from the new dates.
        """
        now = now or self.clock()
        challenge = self.get_challenge(challenge_id)

        date_fields = ("start_date", "end_date", "voting_end")
        dates_changed = any(data.get(field) is not None for field in date_fields)
        if dates_changed:
            start = data.get("start_date") or challenge.start_date
            end = data.get("end_date") or challenge.end_date
            voting_end = data.get("voting_end") or challenge.voting_end
            self._validate_dates(start, end, voting_end)
            challenge.start_date = start
            challenge.end_date = end
            challenge.voting_end = voting_end

        if data.get("featured") is not None:
            challenge.featured = data["featured"]

        if data.get("status") is not None:
            challenge.status = ChallengeStatus(data["status"])
            challenge.status_overridden = True
            logger.info(f"Challenge {challenge.id} status overridden to {challenge.status.value}")
        elif dates_changed or data.get("clear_override"):
            challenge.status_overridden = False
            challenge.status = resolve_status(
                now, challenge.start_date, challenge.end_date, challenge.voting_end
            )

        self.db.commit()
        self.db.refresh(challenge)
        return challenge

    def list_challenges(self) -> list[tuple[PhotoChallenge, int]]:
        """List every challenge with its entry count, newest first."""
        rows = (
            self.db.query(PhotoChallenge, func.count(ChallengeEntry.id))
            .outerjoin(ChallengeEntry, ChallengeEntry.challenge_id == PhotoChallenge.id)
            .group_by(PhotoChallenge.id)
            .order_by(PhotoChallenge.created_at.desc(), PhotoChallenge.id.desc())
            .all()
        )
        return [(challenge, count) for challenge, count in rows]

    def get_active_challenges(
        self, now: datetime | None = None, upcoming_window_days: int = 7
    ) -> list[tuple[PhotoChallenge, int]]:
        """Challenges open for entries or votes, plus those starting soon."""
        now = ensure_utc(now or self.clock())
        horizon = now + timedelta(days=upcoming_window_days)

        result = []
        for challenge, count in self.list_challenges():
            current = effective_status(challenge, now)
            starts_soon = ensure_utc(challenge.start_date) <= horizon
            if current in (ChallengeStatus.ACTIVE, ChallengeStatus.VOTING):
                result.append((challenge, count))
            elif current == ChallengeStatus.UPCOMING and starts_soon:
                result.append((challenge, count))

        result.sort(key=lambda row: ensure_utc(row[0].start_date))
        return result

    def effective_status(
        self, challenge: PhotoChallenge, now: datetime | None = None
    ) -> ChallengeStatus:
        """Status the challenge should have right now."""
        return effective_status(challenge, now or self.clock())

    # Entries

    def submit_entry(
        self,
        challenge_id: int,
        user_id: int,
        image_url: str,
        title: str | None = None,
        caption: str | None = None,
        location: str | None = None,
        camera_info: str | None = None,
        now: datetime | None = None,
    ) -> ChallengeEntry:
        """Submit a user's single entry to an active challenge."""
        now = now or self.clock()
        challenge = self.get_challenge(challenge_id)

        if not effective_status(challenge, now).accepts_entries():
            raise InvalidStateError("Challenge is not accepting entries")

        if self.get_user_entry(challenge_id, user_id):
            raise ConflictError("You have already entered this challenge")

        fields = {
            "title": title or None,
            "caption": caption or None,
            "location": location or None,
            "camera_info": camera_info or None,
        }
        for name, value in fields.items():
            limit = ENTRY_FIELD_LIMITS[name]
            if value is not None and len(value) > limit:
                label = name.replace("_", " ").capitalize()
                raise ValidationError(f"{label} exceeds {limit} characters")
        if not image_url or not is_absolute_url(image_url):
            raise ValidationError("Image URL must be an absolute URL")

        entry = ChallengeEntry(
            challenge_id=challenge_id,
            user_id=user_id,
            image_url=image_url,
            created_at=now,
            **fields,
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost the race against a concurrent submission by the same user
            self.db.rollback()
            raise ConflictError("You have already entered this challenge") from None
        self.db.refresh(entry)

        logger.info(f"User {user_id} entered challenge {challenge_id} (entry {entry.id})")
        return entry

    def get_user_entry(self, challenge_id: int, user_id: int) -> ChallengeEntry | None:
        """Get the user's entry for a challenge, if any."""
        return (
            self.db.query(ChallengeEntry)
            .filter(
                ChallengeEntry.challenge_id == challenge_id,
                ChallengeEntry.user_id == user_id,
            )
            .first()
        )

    def delete_entry(self, entry_id: int, now: datetime | None = None) -> None:
        """Delete an entry together with its votes.

        Removing a placed entry from a completed challenge moves the places
        up to the next-ranked entries.
        """
        entry = self._get_entry(entry_id)
        challenge = entry.challenge
        was_placed = entry.winner_place is not None

        self.db.delete(entry)
        self.db.flush()
        if was_placed and self.effective_status(challenge, now) == ChallengeStatus.COMPLETED:
            self._assign_winner_places(challenge.id, now)
        self.db.commit()
        logger.info(f"Deleted entry {entry_id}")

    def list_entries(
        self, challenge_id: int, order: str = "recent", now: datetime | None = None
    ) -> list[RankedEntry]:
        """Entries with vote counts, most recent first or by rank."""
        if order == "rank":
            return self.rank_entries(challenge_id, now=now)

        self.get_challenge(challenge_id)
        rows = (
            self._entries_with_counts(challenge_id)
            .order_by(ChallengeEntry.created_at.desc(), ChallengeEntry.id.desc())
            .all()
        )
        return [
            RankedEntry(rank=index + 1, entry=entry, vote_count=count)
            for index, (entry, count) in enumerate(rows)
        ]

    # Voting

    def cast_vote(
        self, entry_id: int, voter_id: int, now: datetime | None = None
    ) -> ChallengeVote:
        """Record a vote. Repeating a vote raises ConflictError."""
        now = now or self.clock()
        entry = self._get_entry(entry_id)

        if entry.user_id == voter_id:
            raise ForbiddenError("You cannot vote for your own entry")

        if not effective_status(entry.challenge, now).accepts_votes():
            raise InvalidStateError("Voting is not open for this challenge")

        if self.has_user_voted(entry_id, voter_id):
            raise ConflictError("You have already voted for this entry")

        vote = ChallengeVote(entry_id=entry_id, voter_id=voter_id, created_at=now)
        self.db.add(vote)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("You have already voted for this entry") from None
        self.db.refresh(vote)
        return vote

    def has_user_voted(self, entry_id: int, user_id: int) -> bool:
        """Check if the user has voted for an entry."""
        vote = (
            self.db.query(ChallengeVote.id)
            .filter(ChallengeVote.entry_id == entry_id, ChallengeVote.voter_id == user_id)
            .first()
        )
        return vote is not None

    def get_voted_entry_ids(self, challenge_id: int, voter_id: int) -> set[int]:
        """Ids of the entries in a challenge the voter has voted for."""
        rows = (
            self.db.query(ChallengeVote.entry_id)
            .join(ChallengeEntry, ChallengeEntry.id == ChallengeVote.entry_id)
            .filter(
                ChallengeEntry.challenge_id == challenge_id,
                ChallengeVote.voter_id == voter_id,
            )
            .all()
        )
        return {entry_id for (entry_id,) in rows}

    def get_vote_count(self, entry_id: int) -> int:
        """Number of votes an entry has received."""
        return (
            self.db.query(func.count(ChallengeVote.id))
            .filter(ChallengeVote.entry_id == entry_id)
            .scalar()
        )

    # Ranking

    def rank_entries(self, challenge_id: int, now: datetime | None = None) -> list[RankedEntry]:
        """Rank entries by votes, breaking ties by earlier submission then id.

        For completed challenges the top three are flagged as winners.
        """
        challenge = self.get_challenge(challenge_id)
        completed = self.effective_status(challenge, now) == ChallengeStatus.COMPLETED

        rows = (
            self._entries_with_counts(challenge_id)
            .order_by(
                func.count(ChallengeVote.id).desc(),
                ChallengeEntry.created_at.asc(),
                ChallengeEntry.id.asc(),
            )
            .all()
        )
        return [
            RankedEntry(
                rank=index + 1,
                entry=entry,
                vote_count=count,
                is_winner=completed and index < WINNER_PLACES,
            )
            for index, (entry, count) in enumerate(rows)
        ]

    def get_leaderboard(
        self, challenge_id: int, limit: int = 10, now: datetime | None = None
    ) -> list[RankedEntry]:
        """Top of the ranking."""
        return self.rank_entries(challenge_id, now=now)[:limit]

    def select_winners(self, challenge_id: int, now: datetime | None = None) -> list[RankedEntry]:
        """Persist 1st/2nd/3rd place on the top-ranked entries of a completed challenge."""
        challenge = self.get_challenge(challenge_id)
        if self.effective_status(challenge, now) != ChallengeStatus.COMPLETED:
            raise InvalidStateError("Winners can only be selected once voting has ended")

        winners = self._assign_winner_places(challenge_id, now)
        self.db.commit()
        return winners

    # Helpers

    def _assign_winner_places(
        self, challenge_id: int, now: datetime | None = None
    ) -> list[RankedEntry]:
        ranking = self.rank_entries(challenge_id, now=now)
        for ranked in ranking:
            ranked.entry.winner_place = ranked.rank if ranked.is_winner else None

        winners = [ranked for ranked in ranking if ranked.is_winner]
        logger.info(
            f"Winners for challenge {challenge_id}: {[ranked.entry.id for ranked in winners]}"
        )
        return winners

    def _get_entry(self, entry_id: int) -> ChallengeEntry:
        entry = self.db.query(ChallengeEntry).filter(ChallengeEntry.id == entry_id).first()
        if not entry:
            raise NotFoundError("Entry not found")
        return entry

    def _entries_with_counts(self, challenge_id: int):
        return (
            self.db.query(ChallengeEntry, func.count(ChallengeVote.id))
            .outerjoin(ChallengeVote, ChallengeVote.entry_id == ChallengeEntry.id)
            .filter(ChallengeEntry.challenge_id == challenge_id)
            .group_by(ChallengeEntry.id)
        )

    @staticmethod
    def _validate_dates(start_date: datetime, end_date: datetime, voting_end: datetime) -> None:
        start, end, close = ensure_utc(start_date), ensure_utc(end_date), ensure_utc(voting_end)
        if not start < end:
            raise ValidationError("Start date must be before end date")
        if not end <= close:
            raise ValidationError("Voting end must not be before end date")
