"""Photo challenge models: challenges, entries and votes."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from chasing_cats.database import Base
from chasing_cats.models.enums import ChallengeStatus
from chasing_cats.models.mixins import CreatedAtMixin, TimestampMixin


class PhotoChallenge(Base, TimestampMixin):
    """A themed photo contest that moves through timed phases."""

    __tablename__ = "photo_challenges"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    theme = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    rules = Column(Text, nullable=True)
    prize_info = Column(Text, nullable=True)
    banner_image_url = Column(String(1000), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)  # submissions close
    voting_end = Column(DateTime(timezone=True), nullable=False)

    status = Column(
        Enum(
            ChallengeStatus,
            name="challengestatus",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ChallengeStatus.UPCOMING,
        nullable=False,
        index=True,
    )
    # Set by an admin status override; reconciliation leaves these rows alone
    status_overridden = Column(Boolean, default=False, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)

    # Relationships
    entries = relationship(
        "ChallengeEntry",
        back_populates="challenge",
        cascade="all, delete-orphan",
        order_by="ChallengeEntry.created_at",
    )


class ChallengeEntry(Base, TimestampMixin):
    """A participant's single submission to a challenge."""

    __tablename__ = "challenge_entries"
    __table_args__ = (UniqueConstraint("challenge_id", "user_id", name="uq_challenge_user"),)

    id = Column(Integer, primary_key=True, index=True)
    challenge_id = Column(
        Integer, ForeignKey("photo_challenges.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=True)
    caption = Column(String(500), nullable=True)
    image_url = Column(String(1000), nullable=False)
    location = Column(String(100), nullable=True)
    camera_info = Column(String(200), nullable=True)
    winner_place = Column(Integer, nullable=True)  # 1, 2, 3 once winners are selected

    # Relationships
    challenge = relationship("PhotoChallenge", back_populates="entries")
    user = relationship("User", backref="challenge_entries")
    votes = relationship("ChallengeVote", back_populates="entry", cascade="all, delete-orphan")


class ChallengeVote(Base, CreatedAtMixin):
    """One voter's vote for one entry."""

    __tablename__ = "challenge_votes"
    __table_args__ = (UniqueConstraint("entry_id", "voter_id", name="uq_entry_voter"),)

    id = Column(Integer, primary_key=True, index=True)
    entry_id = Column(
        Integer, ForeignKey("challenge_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    voter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    entry = relationship("ChallengeEntry", back_populates="votes")
    voter = relationship("User", backref="challenge_votes")
