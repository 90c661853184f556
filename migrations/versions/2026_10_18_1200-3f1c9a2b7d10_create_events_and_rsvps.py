"""Create events and rsvps tables.

Stores created before migrations were tracked already hold these tables; they
are adopted as they are and brought forward by the following revisions.

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

import logging
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

logger = logging.getLogger(__name__)

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    existing_tables = sa.inspect(op.get_bind()).get_table_names()

    if "events" in existing_tables:
        logger.info("events table already present, keeping existing rows")
    else:
        op.create_table(
            "events",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("title", sa.Text, nullable=False),
            sa.Column("description", sa.Text, nullable=True),
            sa.Column("playlist", sa.Text, nullable=True),
            sa.Column("format", sa.Text, nullable=True),
            sa.Column("location", sa.Text, nullable=False),
            sa.Column("date", sa.Text, nullable=False),
            sa.Column("time", sa.Text, nullable=False),
            sa.Column("video_recorded", sa.Boolean, server_default=sa.text("0")),
            sa.Column("proficiency", sa.Text, nullable=True),
            sa.Column("artist_type", sa.Text, nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime,
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
        )

    if "rsvps" in existing_tables:
        logger.info("rsvps table already present, keeping existing rows")
    else:
        op.create_table(
            "rsvps",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id"), nullable=False),
            sa.Column("user_identifier", sa.Text, nullable=False),
            sa.Column(
                "created_at",
                sa.DateTime,
                nullable=False,
                server_default=sa.func.current_timestamp(),
            ),
        )


def downgrade() -> None:
    op.drop_table("rsvps")
    op.drop_table("events")
