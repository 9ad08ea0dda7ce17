"""
Game Reviews API — Review Store (Data Access)
===============================================

What:  Every query and insert the API performs against categories, users,
       reviews and comments.
Why:   Keeps SQL out of the service layer. ReviewService only sees schemas
       and tagged lookup results, never ORM rows or sessions.
How:   Each operation opens its own short-lived AsyncSession from the
       session factory. ReviewService.list_comments() awaits two store
       calls at once, and a single AsyncSession cannot serve concurrent
       operations.

Error Handling:
    SQLAlchemy errors are logged with the operation name and wrapped in
    DatabaseError (→ 500, generic message). A missing review is NOT an
    error here: fetch_review_by_id() returns ReviewLookup.not_found().

Ordering:
    Reviews and comments come back newest first; equal timestamps are
    ordered by ascending id so responses are deterministic.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gamereviews.database import async_session_factory
from gamereviews.exceptions import DatabaseError
from gamereviews.models.category import Category
from gamereviews.models.comment import Comment
from gamereviews.models.review import Review
from gamereviews.models.user import User
from gamereviews.schemas.category import CategoryItem
from gamereviews.schemas.comment import CommentItem
from gamereviews.schemas.review import ReviewDetail, ReviewLookup, ReviewSummary
from gamereviews.schemas.user import UserItem

logger = logging.getLogger(__name__)


def _review_fields(review: Review, comment_count: int) -> Dict[str, Any]:
    return {
        "review_id": review.review_id,
        "owner": review.owner,
        "title": review.title,
        "designer": review.designer,
        "review_img_url": review.review_img_url,
        "review_body": review.review_body,
        "category": review.category,
        "votes": review.votes,
        "created_at": review.created_at,
        "comment_count": comment_count,
    }


class ReviewStore:
    """
    Async data-access collaborator for the request handlers.

    Operations:
        fetch_categories()                     → List[CategoryItem]
        fetch_reviews()                        → List[ReviewSummary] with comment_count
        fetch_review_by_id(review_id)          → ReviewLookup (FOUND | NOT_FOUND)
        fetch_comments_by_review_id(review_id) → List[CommentItem] (empty if none)
        insert_comment(review_id, username, body) → CommentItem
        fetch_users()                          → List[UserItem]
        fetch_user_by_username(username)       → Optional[UserItem]
    """

    def __init__(self, session_factory: async_sessionmaker = async_session_factory):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
                raise DatabaseError(
                    context={"operation": operation, "error_type": type(e).__name__},
                ) from e

    @staticmethod
    def _reviews_with_counts():
        """SELECT reviews.*, COUNT(comments.comment_id) ... GROUP BY review_id"""
        return (
            select(Review, func.count(Comment.comment_id).label("comment_count"))
            .outerjoin(Comment, Comment.review_id == Review.review_id)
            .group_by(Review.review_id)
        )

    async def fetch_categories(self) -> List[CategoryItem]:
        async with self._session("fetch_categories") as session:
            result = await session.execute(select(Category).order_by(asc(Category.slug)))
            return [CategoryItem.model_validate(row) for row in result.scalars().all()]

    async def fetch_reviews(self) -> List[ReviewSummary]:
        async with self._session("fetch_reviews") as session:
            result = await session.execute(
                self._reviews_with_counts().order_by(
                    desc(Review.created_at), asc(Review.review_id)
                )
            )
            return [
                ReviewSummary.model_validate(_review_fields(review, count))
                for review, count in result.all()
            ]

    async def fetch_review_by_id(self, review_id: int) -> ReviewLookup:
        """
        Look a review up by its integer id.

        Returns:
            ReviewLookup.found(detail) or ReviewLookup.not_found(review_id).
            Never raises for a missing row.
        """
        async with self._session("fetch_review_by_id") as session:
            result = await session.execute(
                self._reviews_with_counts().where(Review.review_id == review_id)
            )
            row = result.first()
            if row is None:
                logger.debug("Review %s not found", review_id)
                return ReviewLookup.not_found(review_id)
            review, count = row
            return ReviewLookup.found(ReviewDetail.model_validate(_review_fields(review, count)))

    async def fetch_comments_by_review_id(self, review_id: int) -> List[CommentItem]:
        # Empty list both for "no comments" and "no such review": existence
        # is the caller's concern
        async with self._session("fetch_comments_by_review_id") as session:
            result = await session.execute(
                select(Comment)
                .where(Comment.review_id == review_id)
                .order_by(desc(Comment.created_at), asc(Comment.comment_id))
            )
            return [CommentItem.model_validate(row) for row in result.scalars().all()]

    async def insert_comment(self, review_id: int, username: str, body: str) -> CommentItem:
        """
        Insert a comment and return it with its database-assigned comment_id.

        votes starts at 0 and created_at is the current UTC time.
        """
        async with self._session("insert_comment") as session:
            comment = Comment(
                review_id=review_id,
                author=username,
                body=body,
                votes=0,
                created_at=datetime.now(timezone.utc),
            )
            session.add(comment)
            await session.commit()
            logger.info(
                "Comment %d created on review %d by %s",
                comment.comment_id, review_id, username,
            )
            return CommentItem.model_validate(comment)

    async def fetch_users(self) -> List[UserItem]:
        async with self._session("fetch_users") as session:
            result = await session.execute(select(User).order_by(asc(User.username)))
            return [UserItem.model_validate(row) for row in result.scalars().all()]

    async def fetch_user_by_username(self, username: str) -> Optional[UserItem]:
        async with self._session("fetch_user_by_username") as session:
            user = await session.get(User, username)
            return UserItem.model_validate(user) if user is not None else None


review_store = ReviewStore()
