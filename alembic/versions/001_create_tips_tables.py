"""Create users and cooking_tips tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  `users` (id → display name) and `cooking_tips` (one row per tip
       document, ratings and comments embedded as JSON).

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "cooking_tips",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("category", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("author_id", sa.String(255), nullable=False),
        sa.Column(
            "author_display_name",
            sa.String(255),
            nullable=False,
            server_default=sa.text("''"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        # {"<user id>": <rating>}
        sa.Column("user_ratings", sa.JSON(), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        # [{id, author_id, author_display_name, text, rating, created_at}, ...] newest first
        sa.Column("comments", sa.JSON(), nullable=False),
        sa.Column("review_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("id"),
    )

    # GET /api/tips/my and GET /api/tips/category
    op.create_index("idx_cooking_tips_author_id", "cooking_tips", ["author_id"])
    op.create_index("idx_cooking_tips_category", "cooking_tips", ["category"])


def downgrade() -> None:
    op.drop_index("idx_cooking_tips_category", table_name="cooking_tips")
    op.drop_index("idx_cooking_tips_author_id", table_name="cooking_tips")
    op.drop_table("cooking_tips")
    op.drop_table("users")
