"""Add email column to rsvps table.

Revision ID: c47a0e9d2b58
Revises: 8b2e4d6f1a93
Create Date: 2026-10-18 12:10:00.000000

"""

import logging
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

logger = logging.getLogger(__name__)

# revision identifiers, used by Alembic.
revision: str = "c47a0e9d2b58"
down_revision: str | None = "8b2e4d6f1a93"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add email, filling existing RSVPs with a placeholder address."""
    columns = {column["name"] for column in sa.inspect(op.get_bind()).get_columns("rsvps")}
    if "email" in columns:
        return

    logger.info("Adding email column to rsvps table...")
    op.add_column(
        "rsvps",
        sa.Column(
            "email",
            sa.Text(),
            nullable=False,
            server_default="unknown@example.com",
        ),
    )


def downgrade() -> None:
    """Remove email column from rsvps table."""
    with op.batch_alter_table("rsvps") as batch_op:
        batch_op.drop_column("email")
