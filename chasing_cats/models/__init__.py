"""SQLAlchemy models."""

from chasing_cats.models.challenge import ChallengeEntry, ChallengeVote, PhotoChallenge
from chasing_cats.models.push_subscription import PushSubscription
from chasing_cats.models.user import User

__all__ = [
    "User",
    "PhotoChallenge",
    "ChallengeEntry",
    "ChallengeVote",
    "PushSubscription",
]
