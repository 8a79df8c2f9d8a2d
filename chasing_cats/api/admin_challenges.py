"""Admin API endpoints for managing photo challenges."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from chasing_cats.api.challenges import to_summary
from chasing_cats.api.dependencies import get_challenge_service, get_current_admin
from chasing_cats.database import get_db
from chasing_cats.models.user import User
from chasing_cats.schemas.challenge import (
    ChallengeCreate,
    ChallengeResponse,
    ChallengeSummaryResponse,
    ChallengeUpdate,
    RankedEntryResponse,
    ReconcileResponse,
)
from chasing_cats.services.challenge_service import ChallengeService
from chasing_cats.services.challenge_status import reconcile_all_statuses

router = APIRouter(prefix="/api/v1/admin/challenges", tags=["admin"])


@router.get("", response_model=list[ChallengeSummaryResponse])
def list_challenges(
    current_user: Annotated[User, Depends(get_current_admin)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """List all challenges with entry counts, after bringing statuses up to date."""
    reconcile_all_statuses(db)
    rows = service.list_challenges()
    return [to_summary(challenge, count, service) for challenge, count in rows]


@router.post("", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED)
def create_challenge(
    challenge_data: ChallengeCreate,
    current_user: Annotated[User, Depends(get_current_admin)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Create a photo challenge."""
    return service.create_challenge(challenge_data.model_dump())


@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile_statuses(
    current_user: Annotated[User, Depends(get_current_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Run a status reconciliation pass now."""
    return ReconcileResponse(updated=reconcile_all_statuses(db))


@router.patch("/{challenge_id}", response_model=ChallengeResponse)
def update_challenge(
    challenge_id: int,
    challenge_data: ChallengeUpdate,
    current_user: Annotated[User, Depends(get_current_admin)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Override status or featured flag, or move the challenge dates."""
    return service.update_challenge(challenge_id, challenge_data.model_dump(exclude_unset=True))


@router.post("/{challenge_id}/winners", response_model=list[RankedEntryResponse])
def select_winners(
    challenge_id: int,
    current_user: Annotated[User, Depends(get_current_admin)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Mark the top three entries of a completed challenge as winners."""
    return [
        RankedEntryResponse.model_validate(ranked)
        for ranked in service.select_winners(challenge_id)
    ]


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: int,
    current_user: Annotated[User, Depends(get_current_admin)],
    service: Annotated[ChallengeService, Depends(get_challenge_service)],
):
    """Delete an entry and its votes."""
    service.delete_entry(entry_id)
