"""Initial planner schema: users, events, tracks, tasks, meetings, meeting notes.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSON

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _json_list(name: str) -> sa.Column:
    return sa.Column(name, JSON(), server_default=sa.text("'[]'::json"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("initials", sa.String(10), nullable=False),
        sa.Column("avatar", sa.String(1000), nullable=True),
        sa.Column("handle", sa.String(200), nullable=True),
        sa.Column("wallet", sa.String(200), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "events",
        _id(),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("slug", sa.String(300), nullable=False),
        sa.Column("type", sa.String(50), server_default=sa.text("'Custom'"), nullable=False),
        sa.Column("status", sa.String(50), server_default=sa.text("'In Planning'"), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        _json_list("participant_ids"),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_events_slug"),
    )

    op.create_table(
        "tracks",
        _id(),
        sa.Column("event_id", UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("lead_id", sa.String(64), server_default=sa.text("''"), nullable=False),
        _json_list("participant_ids"),
        sa.Column("display_order", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_tracks_event_id", "tracks", ["event_id"])

    op.create_table(
        "tasks",
        _id(),
        sa.Column("event_id", UUID(as_uuid=True), nullable=False),
        sa.Column("track_id", UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("assignee_id", UUID(as_uuid=True), nullable=True),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("status", sa.String(50), server_default=sa.text("'pending'"), nullable=False),
        _json_list("support_resources"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_tasks_event_id", "tasks", ["event_id"])
    op.create_index("ix_tasks_track_id", "tasks", ["track_id"])

    op.create_table(
        "meetings",
        _id(),
        sa.Column("event_id", UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(8), nullable=False),
        _json_list("attendee_ids"),
        *_timestamps(),
    )
    op.create_index("ix_meetings_event_id", "meetings", ["event_id"])

    op.create_table(
        "meeting_notes",
        _id(),
        sa.Column("meeting_id", UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("agenda", sa.Text(), nullable=True),
        sa.Column("decisions", sa.Text(), nullable=True),
        _json_list("action_items"),
        sa.Column("created_by", UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("meeting_id", name="uq_meeting_notes_meeting_id"),
    )


def downgrade() -> None:
    op.drop_table("meeting_notes")
    op.drop_index("ix_meetings_event_id", table_name="meetings")
    op.drop_table("meetings")
    op.drop_index("ix_tasks_track_id", table_name="tasks")
    op.drop_index("ix_tasks_event_id", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("ix_tracks_event_id", table_name="tracks")
    op.drop_table("tracks")
    op.drop_table("events")
    op.drop_table("users")
