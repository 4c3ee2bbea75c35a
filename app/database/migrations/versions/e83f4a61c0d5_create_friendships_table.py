"""create friendships table

Revision ID: e83f4a61c0d5
Revises: 5b1e0c7d92a4
Create Date: 2026-09-28 11:09:17.584120

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy import func

# revision identifiers, used by Alembic.
revision: str = 'e83f4a61c0d5'
down_revision: Union[str, Sequence[str], None] = '5b1e0c7d92a4'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "friendships",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("requester_id", sa.String, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("recipient_id", sa.String, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("user_low_id", sa.String, nullable=False),
        sa.Column("user_high_id", sa.String, nullable=False),
        sa.Column("status", sa.String, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=func.now()),
        sa.UniqueConstraint("user_low_id", "user_high_id", name="unique_friendship_pair"),
        sa.CheckConstraint("requester_id <> recipient_id", name="ck_friendship_not_self"),
    )
    op.create_index("ix_friendships_requester_status", "friendships", ["requester_id", "status"])
    op.create_index("ix_friendships_recipient_status", "friendships", ["recipient_id", "status"])


def downgrade() -> None:
    op.drop_table("friendships")
