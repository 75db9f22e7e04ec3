"""add unique_items_count to user_stats

Revision ID: 8d42b6e1c905
Revises: 3c1e9a7f2b40
Create Date: 2026-10-11 18:40:02.551930

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8d42b6e1c905"
down_revision: Union[str, Sequence[str], None] = "3c1e9a7f2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column(
        "user_stats",
        sa.Column("unique_items_count", sa.Integer(), nullable=False, server_default="0"),
    )
    op.execute(
        sa.text(
            """
            UPDATE user_stats
            SET unique_items_count = (
                SELECT COUNT(DISTINCT draws.dish_id)
                FROM draws
                WHERE draws.user_id = user_stats.user_id
                  AND draws.dish_id IS NOT NULL
            )
            """
        )
    )
    op.alter_column("user_stats", "unique_items_count", server_default=None)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column("user_stats", "unique_items_count")
