"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-12 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    event_category_enum = sa.Enum(
        "productive", "neutral", "waste", "sleep", "untracked",
        name="event_category_enum",
    )
    event_category_enum.create(op.get_bind(), checkfirst=True)

    # --- days ---
    op.create_table(
        "days",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("transcript", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("suggestions", sa.Text(), nullable=True),
        sa.Column("metrics_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_day_user_date"),
    )
    op.create_index("ix_days_id", "days", ["id"])
    op.create_index("ix_days_user_id", "days", ["user_id"])
    op.create_index("ix_days_date", "days", ["date"])

    # --- metrics ---
    op.create_table(
        "metrics",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day_id", sa.Integer(), nullable=False),
        sa.Column("productive_hours", sa.Numeric(8, 4), nullable=False),
        sa.Column("neutral_hours", sa.Numeric(8, 4), nullable=False),
        sa.Column("wasted_hours", sa.Numeric(8, 4), nullable=False),
        sa.Column("sleep_hours", sa.Numeric(8, 4), nullable=False),
        sa.Column("focus_blocks", sa.Integer(), nullable=False),
        sa.Column("context_switches", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_metrics_id", "metrics", ["id"])
    op.create_index("ix_metrics_day_id", "metrics", ["day_id"], unique=True)

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("label", sa.String(256), nullable=False),
        sa.Column("category", sa.Enum(
            "productive", "neutral", "waste", "sleep", "untracked",
            name="event_category_enum", create_type=False,
        ), nullable=False),
        sa.Column("start_time", sa.String(8), nullable=True),
        sa.Column("end_time", sa.String(8), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("carryover_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_day_id", "events", ["day_id"])
    op.create_index("ix_events_user_id", "events", ["user_id"])

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("is_done", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_goals_id", "goals", ["id"])
    op.create_index("ix_goals_user_id", "goals", ["user_id"])

    # --- dashboard_prefs ---
    op.create_table(
        "dashboard_prefs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("pinned_metrics", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_dashboard_prefs_id", "dashboard_prefs", ["id"])
    op.create_index("ix_dashboard_prefs_user_id", "dashboard_prefs", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_table("dashboard_prefs")
    op.drop_table("goals")
    op.drop_table("events")
    op.drop_table("metrics")
    op.drop_table("days")

    op.execute("DROP TYPE IF EXISTS event_category_enum")
