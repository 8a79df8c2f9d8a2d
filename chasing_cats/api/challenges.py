"""Photo challenge API endpoints for members."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, status

from chasing_cats.api.dependencies import get_challenge_service, get_current_user
from chasing_cats.config import get_settings
from chasing_cats.models.challenge import PhotoChallenge
from chasing_cats.models.user import User
from chasing_cats.schemas.challenge import (
    ChallengeDetailResponse,
    ChallengeResponse,
    ChallengeSummaryResponse,
    EntryCreate,
    EntryResponse,
    RankedEntryResponse,
    VoteResponse,
)
from chasing_cats.services.challenge_service import ChallengeService

router = APIRouter(prefix="/api/v1/challenges", tags=["challenges"])


def to_summary(
    challenge: PhotoChallenge, entry_count: int, service: ChallengeService
) -> ChallengeSummaryResponse:
    """Build a listing row with the phase the challenge is in right now."""
    return ChallengeSummaryResponse(
        **ChallengeResponse.model_validate(challenge).model_dump(),
        effective_status=service.effective_status(challenge),
        entry_count=entry_count,
    )


@router.get("", response_model=list[ChallengeSummaryResponse])
def list_active_challenges(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """List challenges that are open, in voting, or starting soon."""
    rows = service.get_active_challenges(upcoming_window_days=get_settings().upcoming_window_days)
    return [to_summary(challenge, count, service) for challenge, count in rows]


@router.get("/{slug}", response_model=ChallengeDetailResponse)
def get_challenge(
    slug: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
    order: Literal["recent", "rank"] = Query(default="recent", description="Entry ordering"),
):
    """Get a challenge page with entries and the viewer's participation."""
    challenge = service.get_challenge_by_slug(slug)
    entries = service.list_entries(challenge.id, order=order)

    return ChallengeDetailResponse(
        challenge=ChallengeResponse.model_validate(challenge),
        effective_status=service.effective_status(challenge),
        order=order,
        entries=[RankedEntryResponse.model_validate(ranked) for ranked in entries],
        has_entered=service.get_user_entry(challenge.id, current_user.id) is not None,
        voted_entry_ids=sorted(service.get_voted_entry_ids(challenge.id, current_user.id)),
    )


@router.get("/{challenge_id}/leaderboard", response_model=list[RankedEntryResponse])
def get_leaderboard(
    challenge_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
    limit: int = Query(default=10, ge=1, le=100),
):
    """Get the top-ranked entries of a challenge."""
    return [
        RankedEntryResponse.model_validate(ranked)
        for ranked in service.get_leaderboard(challenge_id, limit=limit)
    ]


@router.get("/{challenge_id}/my-entry", response_model=EntryResponse | None)
def get_my_entry(
    challenge_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Get the current user's entry, or null if they have not entered."""
    service.get_challenge(challenge_id)
    return service.get_user_entry(challenge_id, current_user.id)


@router.post(
    "/{challenge_id}/entries",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_entry(
    challenge_id: int,
    entry_data: EntryCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Submit the current user's entry to an active challenge."""
    return service.submit_entry(
        challenge_id,
        current_user.id,
        image_url=entry_data.image_url,
        title=entry_data.title,
        caption=entry_data.caption,
        location=entry_data.location,
        camera_info=entry_data.camera_info,
    )


@router.post(
    "/entries/{entry_id}/vote",
    response_model=VoteResponse,
    status_code=status.HTTP_201_CREATED,
)
def vote_for_entry(
    entry_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Vote for an entry. Voting twice for the same entry returns 409."""
    vote = service.cast_vote(entry_id, current_user.id)
    return VoteResponse(
        id=vote.id,
        entry_id=vote.entry_id,
        voter_id=vote.voter_id,
        created_at=vote.created_at,
        vote_count=service.get_vote_count(entry_id),
    )
