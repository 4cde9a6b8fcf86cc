"""create users, weeks and schedule_entries

Revision ID: 5b1e0c7a9d21
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e0c7a9d21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=120), nullable=True),
        sa.Column("role", sa.String(length=30), nullable=False),
    )

    op.create_table(
        "weeks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=10), nullable=False),
    )
    op.create_index("ix_weeks_start_date", "weeks", ["start_date"])
    op.create_index("ix_weeks_end_date", "weeks", ["end_date"])
    op.create_index("ix_weeks_status", "weeks", ["status"])

    op.create_table(
        "schedule_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("week_id", sa.Integer(), sa.ForeignKey("weeks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("slot", sa.SmallInteger(), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("teacher", sa.String(length=120), nullable=True),
        sa.Column("room", sa.String(length=50), nullable=True),
        sa.Column("custom_time", sa.Boolean(), nullable=False),
        sa.Column("start_time", sa.String(length=10), nullable=True),
        sa.Column("end_time", sa.String(length=10), nullable=True),
        sa.Column("is_skipped", sa.Boolean(), nullable=False),
        sa.Column("lesson_type", sa.String(length=50), nullable=True),
    )
    op.create_index("ix_schedule_entries_week_id", "schedule_entries", ["week_id"])
    op.create_index("ix_schedule_entries_day", "schedule_entries", ["day"])
    op.create_index("ix_schedule_entries_slot", "schedule_entries", ["slot"])


def downgrade() -> None:
    op.drop_index("ix_schedule_entries_slot", table_name="schedule_entries")
    op.drop_index("ix_schedule_entries_day", table_name="schedule_entries")
    op.drop_index("ix_schedule_entries_week_id", table_name="schedule_entries")
    op.drop_table("schedule_entries")

    op.drop_index("ix_weeks_status", table_name="weeks")
    op.drop_index("ix_weeks_end_date", table_name="weeks")
    op.drop_index("ix_weeks_start_date", table_name="weeks")
    op.drop_table("weeks")

    op.drop_table("users")
