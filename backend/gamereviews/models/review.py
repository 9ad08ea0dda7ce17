"""
Game Reviews API — Review ORM Model
=====================================

What:  The `reviews` table: one row per reviewed board game.
How:   Integer surrogate key assigned by the database. ``owner`` and
       ``category`` are foreign keys to users and categories.

comment_count is NOT a column: it is derived at read time by the store
(LEFT OUTER JOIN comments ... GROUP BY review_id) so it can never drift
from the comments table.

Index on created_at DESC:
    Listing endpoints always sort newest first.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gamereviews.database import Base


class Review(Base):
    __tablename__ = "reviews"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    designer: Mapped[str] = mapped_column(String(200), nullable=False)
    owner: Mapped[str] = mapped_column(
        String(100), ForeignKey("users.username"), nullable=False
    )
    review_img_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="https://images.pexels.com/photos/163064/play-stone-network-networked-interactive-163064.jpeg",
    )
    review_body: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(
        String(100), ForeignKey("categories.slug"), nullable=False
    )
    votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Stored in UTC; SQLite drops the offset, the schemas re-attach it
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_reviews_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Review(review_id={self.review_id}, title='{self.title}')>"
