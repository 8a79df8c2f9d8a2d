"""Photo challenge schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chasing_cats.models.enums import ChallengeStatus


class ChallengeCreate(BaseModel):
    """Create a photo challenge (admin)."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=120)
    theme: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    rules: str | None = None
    prize_info: str | None = None
    banner_image_url: str | None = Field(None, max_length=1000)
    start_date: datetime
    end_date: datetime
    voting_end: datetime
    featured: bool = False


class ChallengeUpdate(BaseModel):
    """Admin override of status/featured, optionally with new dates."""

    status: ChallengeStatus | None = None
    featured: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    voting_end: datetime | None = None
    clear_override: bool = False


class ChallengeResponse(BaseModel):
    """Photo challenge response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    title: str
    theme: str
    description: str
    rules: str | None
    prize_info: str | None
    banner_image_url: str | None
    start_date: datetime
    end_date: datetime
    voting_end: datetime
    status: ChallengeStatus
    status_overridden: bool
    featured: bool
    created_at: datetime


class ChallengeSummaryResponse(ChallengeResponse):
    """Challenge with its entry count and current phase, for listings."""

    effective_status: ChallengeStatus
    entry_count: int


class EntryCreate(BaseModel):
    """Submit an entry. Length and URL rules are enforced by the service."""

    image_url: str = Field(..., min_length=1)
    title: str | None = None
    caption: str | None = None
    location: str | None = None
    camera_info: str | None = None


class EntryResponse(BaseModel):
    """Challenge entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    challenge_id: int
    user_id: int
    title: str | None
    caption: str | None
    image_url: str
    location: str | None
    camera_info: str | None
    winner_place: int | None
    created_at: datetime


class RankedEntryResponse(BaseModel):
    """Entry with its vote count and position."""

    model_config = ConfigDict(from_attributes=True)

    rank: int
    vote_count: int
    is_winner: bool
    entry: EntryResponse


class ChallengeDetailResponse(BaseModel):
    """A challenge page: the challenge, its entries and the viewer's state."""

    challenge: ChallengeResponse
    effective_status: ChallengeStatus
    order: Literal["recent", "rank"]
    entries: list[RankedEntryResponse]
    has_entered: bool
    voted_entry_ids: list[int]


class VoteResponse(BaseModel):
    """Recorded vote with the entry's updated total."""

    id: int
    entry_id: int
    voter_id: int
    created_at: datetime
    vote_count: int


class ReconcileResponse(BaseModel):
    """Result of a reconciliation pass."""

    updated: int
