"""
Comment ORM model: the `comments` table.

Comments are attached to a review and authored by a user. They are only
ever created through POST /api/reviews/{review_id}/comments (plus seeding);
votes start at 0 and created_at is stamped at insert time.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gamereviews.database import Base


class Comment(Base):
    __tablename__ = "comments"

    comment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    review_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("reviews.review_id"), nullable=False
    )
    author: Mapped[str] = mapped_column(
        String(100), ForeignKey("users.username"), nullable=False
    )
    votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Comments are always read per review, newest first
    __table_args__ = (
        Index("idx_comments_review_id_created_at", review_id, created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Comment(comment_id={self.comment_id}, review_id={self.review_id})>"
