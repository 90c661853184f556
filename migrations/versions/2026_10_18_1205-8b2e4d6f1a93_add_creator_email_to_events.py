"""Add creator_email column to events table.

Revision ID: 8b2e4d6f1a93
Revises: 3f1c9a2b7d10
Create Date: 2026-10-18 12:05:00.000000

"""

import logging
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

logger = logging.getLogger(__name__)

# revision identifiers, used by Alembic.
revision: str = "8b2e4d6f1a93"
down_revision: str | None = "3f1c9a2b7d10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add creator_email, filling existing events with a placeholder address."""
    columns = {column["name"] for column in sa.inspect(op.get_bind()).get_columns("events")}
    if "creator_email" in columns:
        return

    logger.info("Adding creator_email column to events table...")
    op.add_column(
        "events",
        sa.Column(
            "creator_email",
            sa.Text(),
            nullable=False,
            server_default="unknown@example.com",
        ),
    )


def downgrade() -> None:
    """Remove creator_email column from events table."""
    with op.batch_alter_table("events") as batch_op:
        batch_op.drop_column("creator_email")
