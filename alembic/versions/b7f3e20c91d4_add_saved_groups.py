"""add saved_groups

Revision ID: b7f3e20c91d4
Revises: 8d42b6e1c905
Create Date: 2026-10-19 09:21:37.604118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "b7f3e20c91d4"
down_revision: Union[str, Sequence[str], None] = "8d42b6e1c905"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "saved_groups",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("group_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "group_id", name="uq_saved_groups_user_id_group_id"),
    )
    op.create_index("ix_saved_groups_group_id", "saved_groups", ["group_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_saved_groups_group_id", table_name="saved_groups")
    op.drop_table("saved_groups")
