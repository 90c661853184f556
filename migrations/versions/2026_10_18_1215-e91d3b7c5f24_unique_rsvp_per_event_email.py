"""Enforce one RSVP per email per event.

Revision ID: e91d3b7c5f24
Revises: c47a0e9d2b58
Create Date: 2026-10-18 12:15:00.000000

"""

import logging
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

logger = logging.getLogger(__name__)

# revision identifiers, used by Alembic.
revision: str = "e91d3b7c5f24"
down_revision: str | None = "c47a0e9d2b58"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

INDEX_NAME = "uq_rsvps_event_id_email"


def upgrade() -> None:
    bind = op.get_bind()
    indexes = {index["name"] for index in sa.inspect(bind).get_indexes("rsvps")}
    if INDEX_NAME in indexes:
        return

    duplicate = bind.execute(
        sa.text(
            "SELECT event_id, email FROM rsvps "
            "GROUP BY event_id, email HAVING COUNT(*) > 1 LIMIT 1"
        )
    ).first()
    if duplicate is not None:
        # Existing rows are never rewritten; the pre-insert check still applies.
        logger.warning(
            f"Skipping {INDEX_NAME}: duplicate RSVPs already stored "
            f"(event {duplicate.event_id}, {duplicate.email})"
        )
        return

    op.create_index(INDEX_NAME, "rsvps", ["event_id", "email"], unique=True)


def downgrade() -> None:
    bind = op.get_bind()
    indexes = {index["name"] for index in sa.inspect(bind).get_indexes("rsvps")}
    if INDEX_NAME in indexes:
        op.drop_index(INDEX_NAME, table_name="rsvps")
