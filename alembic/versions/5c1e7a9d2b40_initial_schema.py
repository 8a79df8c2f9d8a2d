"""Initial schema: users, photo challenges and push subscriptions

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-03-01 09:12:07.418552

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1e7a9d2b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=20), server_default="member", nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Values match the Python enum string values
    challengestatus_enum = sa.Enum(
        "upcoming", "active", "voting", "completed", name="challengestatus"
    )

    op.create_table(
        "photo_challenges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("theme", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("rules", sa.Text(), nullable=True),
        sa.Column("prize_info", sa.Text(), nullable=True),
        sa.Column("banner_image_url", sa.String(length=1000), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("voting_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", challengestatus_enum, server_default="upcoming", nullable=False),
        sa.Column("status_overridden", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("featured", sa.Boolean(), server_default=sa.false(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_photo_challenges_id"), "photo_challenges", ["id"], unique=False)
    op.create_index(op.f("ix_photo_challenges_slug"), "photo_challenges", ["slug"], unique=True)
    op.create_index(
        op.f("ix_photo_challenges_status"), "photo_challenges", ["status"], unique=False
    )

    op.create_table(
        "challenge_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=True),
        sa.Column("caption", sa.String(length=500), nullable=True),
        sa.Column("image_url", sa.String(length=1000), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("camera_info", sa.String(length=200), nullable=True),
        sa.Column("winner_place", sa.Integer(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(["challenge_id"], ["photo_challenges.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("challenge_id", "user_id", name="uq_challenge_user"),
    )
    op.create_index(op.f("ix_challenge_entries_id"), "challenge_entries", ["id"], unique=False)
    op.create_index(
        op.f("ix_challenge_entries_challenge_id"),
        "challenge_entries",
        ["challenge_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_challenge_entries_user_id"), "challenge_entries", ["user_id"], unique=False
    )

    op.create_table(
        "challenge_votes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entry_id", sa.Integer(), nullable=False),
        sa.Column("voter_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.ForeignKeyConstraint(["entry_id"], ["challenge_entries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["voter_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entry_id", "voter_id", name="uq_entry_voter"),
    )
    op.create_index(op.f("ix_challenge_votes_id"), "challenge_votes", ["id"], unique=False)
    op.create_index(
        op.f("ix_challenge_votes_entry_id"), "challenge_votes", ["entry_id"], unique=False
    )
    op.create_index(
        op.f("ix_challenge_votes_voter_id"), "challenge_votes", ["voter_id"], unique=False
    )

    op.create_table(
        "push_subscriptions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("endpoint", sa.String(length=1000), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("p256dh_key", sa.String(length=200), nullable=False),
        sa.Column("auth_key", sa.String(length=100), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("endpoint"),
    )
    op.create_index(op.f("ix_push_subscriptions_id"), "push_subscriptions", ["id"], unique=False)
    op.create_index(
        op.f("ix_push_subscriptions_user_id"), "push_subscriptions", ["user_id"], unique=False
    )


def downgrade() -> None:
    op.drop_table("push_subscriptions")
    op.drop_table("challenge_votes")
    op.drop_table("challenge_entries")
    op.drop_table("photo_challenges")
    sa.Enum(name="challengestatus").drop(op.get_bind(), checkfirst=True)
    op.drop_table("users")
