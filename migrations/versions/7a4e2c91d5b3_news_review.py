"""news review workflow

Revision ID: 7a4e2c91d5b3
Revises: 3c1f0a9d2b7e
Create Date: 2026-10-19 16:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "7a4e2c91d5b3"
down_revision: Union[str, Sequence[str], None] = "3c1f0a9d2b7e"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add category, summary and review columns to news."""
    with op.batch_alter_table("news") as batch_op:
        batch_op.add_column(sa.Column("summary", sa.String(length=500), nullable=True))
        batch_op.add_column(
            sa.Column("category", sa.String(length=16), nullable=False, server_default="CAMPUS")
        )
        batch_op.add_column(sa.Column("published_at", sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column("reviewed_by", sa.String(length=36), nullable=True))
        batch_op.add_column(sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column("review_note", sa.String(length=500), nullable=True))
        batch_op.create_foreign_key(
            "fk_news_reviewed_by_profiles", "profiles", ["reviewed_by"], ["id"]
        )
        batch_op.create_index("ix_news_status_created", ["status", "created_at"])

    # Rows published before this revision keep their creation time as publish time.
    op.execute("UPDATE news SET published_at = created_at WHERE status = 'PUBLISHED'")


def downgrade() -> None:
    op.execute("UPDATE news SET status = 'DRAFT' WHERE status IN ('PENDING', 'REJECTED')")
    with op.batch_alter_table("news") as batch_op:
        batch_op.drop_index("ix_news_status_created")
        batch_op.drop_constraint("fk_news_reviewed_by_profiles", type_="foreignkey")
        batch_op.drop_column("review_note")
        batch_op.drop_column("reviewed_at")
        batch_op.drop_column("reviewed_by")
        batch_op.drop_column("published_at")
        batch_op.drop_column("category")
        batch_op.drop_column("summary")
