"""Create categories, users, reviews and comments tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

Mirrors gamereviews.models.*. comment_count is derived at read time and
has no column.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("slug"),
    )

    op.create_table(
        "users",
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("avatar_url", sa.String(500), nullable=False, server_default=sa.text("''")),
        sa.PrimaryKeyConstraint("username"),
    )

    op.create_table(
        "reviews",
        sa.Column("review_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("designer", sa.String(200), nullable=False),
        sa.Column("owner", sa.String(100), nullable=False),
        sa.Column("review_img_url", sa.String(500), nullable=False),
        sa.Column("review_body", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("votes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["owner"], ["users.username"]),
        sa.ForeignKeyConstraint(["category"], ["categories.slug"]),
        sa.PrimaryKeyConstraint("review_id"),
    )
    op.create_index("idx_reviews_created_at", "reviews", [sa.text("created_at DESC")])

    op.create_table(
        "comments",
        sa.Column("comment_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("review_id", sa.Integer(), nullable=False),
        sa.Column("author", sa.String(100), nullable=False),
        sa.Column("votes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["review_id"], ["reviews.review_id"]),
        sa.ForeignKeyConstraint(["author"], ["users.username"]),
        sa.PrimaryKeyConstraint("comment_id"),
    )
    op.create_index(
        "idx_comments_review_id_created_at",
        "comments",
        ["review_id", sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_comments_review_id_created_at", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_reviews_created_at", table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("users")
    op.drop_table("categories")
