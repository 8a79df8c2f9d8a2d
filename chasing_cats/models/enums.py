"""Enums for model fields."""

from enum import Enum


class UserRole(str, Enum):
    """Roles handed out by the identity provider."""

    MEMBER = "member"
    ADMIN = "admin"


class ChallengeStatus(str, Enum):
    """Lifecycle phases of a photo challenge, in order."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    VOTING = "voting"
    COMPLETED = "completed"

    def accepts_entries(self) -> bool:
        """Check if entries may be submitted in this phase."""
        return self == ChallengeStatus.ACTIVE

    def accepts_votes(self) -> bool:
        """Check if votes may be cast in this phase."""
        return self == ChallengeStatus.VOTING
