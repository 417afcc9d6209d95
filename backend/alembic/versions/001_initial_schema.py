"""Initial schema: users, profiles, usher_profiles, events, bookings, reviews.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Credentials (identity provider side)
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_type", sa.String(20), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("user_type IN ('usher', 'planner')", name="check_profile_user_type"),
    )

    op.create_table(
        "usher_profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("hourly_rate", sa.Float(), nullable=True),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("availability_status", sa.String(20), nullable=False, server_default=sa.text("'available'")),
        sa.Column("rating", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_events", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("certifications", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_usher_profiles_user_id"),
        sa.CheckConstraint("experience_years >= 0", name="check_usher_experience_non_negative"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="check_usher_rating_range"),
        sa.CheckConstraint("total_events >= 0", name="check_usher_total_events_non_negative"),
        sa.CheckConstraint(
            "availability_status IN ('available', 'busy', 'unavailable')",
            name="check_usher_availability_status",
        ),
    )
    op.create_index("ix_usher_profiles_rating", "usher_profiles", ["rating"])

    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("planner_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("venue_address", sa.String(500), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("ushers_needed", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("pay_rate", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("dress_code", sa.String(255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("ushers_needed >= 1", name="check_event_ushers_needed_positive"),
        sa.CheckConstraint("pay_rate >= 0", name="check_event_pay_rate_non_negative"),
        sa.CheckConstraint(
            "status IN ('draft', 'published', 'completed', 'cancelled')",
            name="check_event_status",
        ),
    )
    op.create_index("ix_events_planner_id", "events", ["planner_id"])
    op.create_index("ix_events_event_date", "events", ["event_date"])
    # Open-events listing: WHERE status = 'published' AND event_date >= today ORDER BY event_date
    op.create_index("ix_events_status_date", "events", ["status", "event_date"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("usher_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("applied_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
        # One application per usher per event, even under concurrent Apply calls
        sa.UniqueConstraint("event_id", "usher_id", name="uq_booking_event_usher"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_event_id", "bookings", ["event_id"])
    op.create_index("ix_bookings_usher_id", "bookings", ["usher_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("booking_id", sa.Uuid(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("reviewer_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("reviewee_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # One review per booking
        sa.UniqueConstraint("booking_id", name="uq_reviews_booking_id"),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
    )
    op.create_index("ix_reviews_reviewee_id", "reviews", ["reviewee_id"])


def downgrade() -> None:
    op.drop_table("reviews")
    op.drop_table("bookings")
    op.drop_table("events")
    op.drop_table("usher_profiles")
    op.drop_table("profiles")
    op.drop_table("users")
