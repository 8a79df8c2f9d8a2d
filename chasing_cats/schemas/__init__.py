"""Pydantic schemas for API requests and responses."""

from chasing_cats.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from chasing_cats.schemas.challenge import (
    ChallengeCreate,
    ChallengeDetailResponse,
    ChallengeResponse,
    ChallengeSummaryResponse,
    ChallengeUpdate,
    EntryCreate,
    EntryResponse,
    RankedEntryResponse,
    VoteResponse,
)
from chasing_cats.schemas.notification import (
    PushSendRequest,
    PushSendResponse,
    PushSubscriptionCreate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "ChallengeCreate",
    "ChallengeUpdate",
    "ChallengeResponse",
    "ChallengeSummaryResponse",
    "ChallengeDetailResponse",
    "EntryCreate",
    "EntryResponse",
    "RankedEntryResponse",
    "VoteResponse",
    "PushSubscriptionCreate",
    "PushSendRequest",
    "PushSendResponse",
]
