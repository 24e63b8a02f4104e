"""Create StageLink schema

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates every table: identity (accounts, revoked_sessions), profiles,
       media, venues, jobs and applications, groups and memberships, messages.
How:   PostgreSQL types (UUID with gen_random_uuid(), TIMESTAMPTZ, JSONB,
       DECIMAL coordinates). Named unique/check constraints are the ones the
       services translate into 409 messages; keep the names in sync.

Rollback: downgrade() drops everything in reverse dependency order
(destructive: all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def _profile_fk(name: str, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("user_profiles.id", ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    # ── Identity ──────────────────────────────────────────────────────────
    op.create_table(
        "accounts",
        _id(),
        sa.Column("email", sa.String(320), nullable=False, comment="Lower-cased sign-in email"),
        sa.Column("password_hash", sa.String(100), nullable=False, comment="bcrypt hash"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.UniqueConstraint("email", name="accounts_email_key"),
    )

    op.create_table(
        "revoked_sessions",
        _id(),
        sa.Column("jti", sa.String(64), nullable=False),
        sa.Column(
            "account_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "revoked_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_revoked_sessions_jti", "revoked_sessions", ["jti"], unique=True)

    # ── Profiles ──────────────────────────────────────────────────────────
    op.create_table(
        "user_profiles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            primary_key=True,
            comment="Same value as the owning account id",
        ),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("user_type", sa.String(20), nullable=False, server_default=sa.text("'artist'")),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("profile_picture_url", sa.Text(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("role", sa.String(50), nullable=True),
        sa.Column(
            "social_links",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        *_timestamps(),
        sa.CheckConstraint("user_type IN ('artist', 'venue')", name="ck_user_profiles_type"),
    )
    op.create_index("idx_user_profiles_type", "user_profiles", ["user_type"])

    op.create_table(
        "user_media",
        _id(),
        _profile_fk("user_id"),
        sa.Column("media_type", sa.String(20), nullable=False),
        sa.Column("media_url", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "media_type IN ('image', 'video', 'audio')",
            name="ck_user_media_type",
        ),
    )
    op.create_index(
        "idx_user_media_user_created",
        "user_media",
        ["user_id", sa.text("created_at DESC")],
    )

    # ── Venues ────────────────────────────────────────────────────────────
    op.create_table(
        "venues",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("genre", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("latitude", sa.Numeric(10, 8), nullable=False),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        _profile_fk("owner_id", ondelete="SET NULL", nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_venues_coordinates", "venues", ["latitude", "longitude"])
    op.create_index("idx_venues_owner", "venues", ["owner_id"])

    # ── Jobs ──────────────────────────────────────────────────────────────
    op.create_table(
        "jobs",
        _id(),
        _profile_fk("venue_id"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("genre", sa.Text(), nullable=False),
        sa.Column("event_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("latitude", sa.Numeric(10, 8), nullable=True),
        sa.Column("longitude", sa.Numeric(11, 8), nullable=True),
        sa.Column("pay_range", sa.Text(), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("contact_info", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'open'")),
        *_timestamps(),
        sa.CheckConstraint("status IN ('open', 'filled', 'cancelled')", name="ck_jobs_status"),
    )
    op.create_index("idx_jobs_venue_id", "jobs", ["venue_id"])
    op.create_index("idx_jobs_status", "jobs", ["status"])
    op.create_index("idx_jobs_event_date", "jobs", ["event_date"])
    op.create_index("idx_jobs_genre", "jobs", ["genre"])

    op.create_table(
        "job_applications",
        _id(),
        sa.Column(
            "job_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("jobs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk("artist_id"),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.UniqueConstraint("job_id", "artist_id", name="uq_job_applications_job_artist"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_job_applications_status",
        ),
    )
    op.create_index("idx_job_applications_job_id", "job_applications", ["job_id"])
    op.create_index("idx_job_applications_artist_id", "job_applications", ["artist_id"])
    op.create_index("idx_job_applications_status", "job_applications", ["status"])

    # ── Groups ────────────────────────────────────────────────────────────
    op.create_table(
        "groups",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("genre", sa.String(50), nullable=True),
        _profile_fk("created_by"),
        *_timestamps(),
    )
    op.create_index("idx_groups_created_by", "groups", ["created_by"])

    op.create_table(
        "group_members",
        _id(),
        sa.Column(
            "group_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk("user_id"),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column(
            "joined_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
    )
    op.create_index("idx_group_members_group_id", "group_members", ["group_id"])
    op.create_index("idx_group_members_user_id", "group_members", ["user_id"])

    op.create_table(
        "group_job_applications",
        _id(),
        sa.Column(
            "job_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("jobs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "group_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.UniqueConstraint("job_id", "group_id", name="uq_group_job_applications_job_group"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_group_job_applications_status",
        ),
    )
    op.create_index("idx_group_job_applications_job_id", "group_job_applications", ["job_id"])
    op.create_index("idx_group_job_applications_group_id", "group_job_applications", ["group_id"])

    # ── Messages ──────────────────────────────────────────────────────────
    op.create_table(
        "messages",
        _id(),
        _profile_fk("sender_id"),
        _profile_fk("receiver_id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.CheckConstraint("sender_id <> receiver_id", name="ck_messages_sender_not_receiver"),
    )
    op.create_index("idx_messages_sender_id", "messages", ["sender_id"])
    op.create_index("idx_messages_receiver_id", "messages", ["receiver_id"])
    op.create_index("idx_messages_created_at", "messages", [sa.text("created_at DESC")])
    op.create_index(
        "idx_messages_conversation",
        "messages",
        ["sender_id", "receiver_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    for table in (
        "messages",
        "group_job_applications",
        "group_members",
        "groups",
        "job_applications",
        "jobs",
        "venues",
        "user_media",
        "user_profiles",
        "revoked_sessions",
        "accounts",
    ):
        op.drop_table(table)
