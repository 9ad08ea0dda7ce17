"""
Game Reviews API — Review Service (Request Handling Logic)
============================================================

What:  Turns raw path/body values into store calls and response envelopes.
Why:   Routes stay thin (HTTP only); all validation and error mapping for
       reviews and comments lives here and is testable without HTTP.
How:   Failures are raised as ValidationError (400) or NotFoundError (404);
       the global handlers in main.py render them as {"message": ...}.

review_id validation (shared by every /api/reviews/{review_id} route):
    - must be an optionally signed run of digits that fits a 32-bit
      signed INTEGER column, otherwise → 400 "Bad Request"
    - must name an existing review, otherwise
      → 404 "Review ID: {review_id} Not Found"

Comment creation checks, first failure wins:
    1. review_id malformed                → 400 "Bad Request"
    2. review does not exist              → 404 "Review ID: {id} Not Found"
    3. body is not valid JSON             → 400 "Bad Request"
    4. "username" key absent              → 400 "Bad Request: Missing username property"
    5. "body" key absent                  → 400 "Bad Request: Missing body property"
    6. username is not a string           → 400 "Bad Request: Incorrect data type on username"
    7. body is not a string               → 400 "Bad Request: Incorrect data type on body"
    8. username is not a registered user  → 404 "Username: {username} Not Found"
"""

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Optional

from gamereviews.exceptions import NotFoundError, ValidationError
from gamereviews.schemas.category import CategoryListResponse
from gamereviews.schemas.comment import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
)
from gamereviews.schemas.review import (
    LookupStatus,
    ReviewDetail,
    ReviewListResponse,
    ReviewLookup,
    ReviewResponse,
)
from gamereviews.schemas.user import UserListResponse
from gamereviews.services.review_store import ReviewStore, review_store

logger = logging.getLogger(__name__)

_INTEGER_TOKEN = re.compile(r"-?[0-9]+")
_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1

# Fields a comment body must carry, in the order they are checked
_COMMENT_FIELDS = ("username", "body")


def parse_review_id(raw_id: Any) -> Optional[int]:
    """
    Convert a path token into a review id.

    Returns None when the token is not an integer representation or falls
    outside the INTEGER column range.

    >>> parse_review_id("3")
    3
    >>> parse_review_id("abc") is None
    True
    """
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        value = raw_id
    elif isinstance(raw_id, str) and _INTEGER_TOKEN.fullmatch(raw_id):
        value = int(raw_id)
    else:
        return None
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


class ReviewService:
    """
    Request-handling logic for categories, reviews, comments and users.

    Stateless apart from the injected store, so one shared instance serves
    every request.
    """

    def __init__(self, store: ReviewStore = review_store):
        self.store = store

    # ── Listings ──────────────────────────────────────────────────────────

    async def list_categories(self) -> CategoryListResponse:
        return CategoryListResponse(categories=await self.store.fetch_categories())

    async def list_reviews(self) -> ReviewListResponse:
        return ReviewListResponse(reviews=await self.store.fetch_reviews())

    async def list_users(self) -> UserListResponse:
        return UserListResponse(users=await self.store.fetch_users())

    # ── Single review ─────────────────────────────────────────────────────

    async def lookup_review(self, raw_id: Any) -> ReviewLookup:
        """Tag a raw path token as INVALID_ID, or ask the store for the review."""
        review_id = parse_review_id(raw_id)
        if review_id is None:
            return ReviewLookup.invalid_id(str(raw_id))
        return await self._fetch_review(review_id, raw_id)

    async def _fetch_review(self, review_id: int, raw_id: Any) -> ReviewLookup:
        lookup = await self.store.fetch_review_by_id(review_id)
        if lookup.status is LookupStatus.NOT_FOUND:
            # Echo the id as the client wrote it, e.g. "0100"
            return ReviewLookup.not_found(raw_id)
        return lookup

    @staticmethod
    def _bad_review_id(requested_id: Any) -> ValidationError:
        return ValidationError(
            message="Bad Request",
            field="review_id",
            context={"review_id": requested_id},
        )

    @classmethod
    def require_review(cls, lookup: ReviewLookup) -> ReviewDetail:
        """Unwrap a FOUND lookup or raise the error its tag stands for."""
        if lookup.status is LookupStatus.FOUND and lookup.review is not None:
            return lookup.review
        if lookup.status is LookupStatus.NOT_FOUND:
            raise NotFoundError(resource="Review ID", resource_id=lookup.requested_id)
        raise cls._bad_review_id(lookup.requested_id)

    async def get_review(self, raw_id: Any) -> ReviewResponse:
        review = self.require_review(await self.lookup_review(raw_id))
        return ReviewResponse(review=review)

    # ── Comments ──────────────────────────────────────────────────────────

    async def list_comments(self, raw_id: Any) -> CommentListResponse:
        """
        Comments for a review, newest first.

        The comment query and the review lookup run concurrently. The
        lookup only decides between 200 and 404: a review with no comments
        yields an empty list, a missing review yields NotFoundError even
        though the comment query also returned an empty list. If either
        call raises, gather() surfaces the first exception.
        """
        review_id = parse_review_id(raw_id)
        if review_id is None:
            raise self._bad_review_id(raw_id)

        comments, lookup = await asyncio.gather(
            self.store.fetch_comments_by_review_id(review_id),
            self._fetch_review(review_id, raw_id),
        )
        self.require_review(lookup)
        return CommentListResponse(comments=comments)

    @staticmethod
    def validate_comment_payload(payload: Any) -> CommentCreate:
        """
        Check a raw JSON body and build the typed CommentCreate from it.

        Presence of both fields is checked before either type, so
        {"username": 100} reports the missing body. A body that is not a
        JSON object is treated as an empty one.
        """
        if not isinstance(payload, dict):
            payload = {}

        for field in _COMMENT_FIELDS:
            if field not in payload:
                raise ValidationError(
                    message=f"Bad Request: Missing {field} property", field=field
                )
        for field in _COMMENT_FIELDS:
            if not isinstance(payload[field], str):
                raise ValidationError(
                    message=f"Bad Request: Incorrect data type on {field}",
                    field=field,
                    context={"received_type": type(payload[field]).__name__},
                )

        return CommentCreate(username=payload["username"], body=payload["body"])

    async def create_comment(
        self, raw_id: Any, read_payload: Callable[[], Awaitable[Any]]
    ) -> CommentResponse:
        """
        Validate and store a new comment.

        ``read_payload`` is only awaited once the review is known to exist,
        so review_id problems win over an unreadable body. A body that is
        not valid JSON → 400 "Bad Request".
        """
        review = self.require_review(await self.lookup_review(raw_id))
        try:
            payload = await read_payload()
        except ValueError as e:
            raise ValidationError(
                message="Bad Request",
                field="body",
                context={"error": str(e)},
            ) from e
        comment_in = self.validate_comment_payload(payload)

        if await self.store.fetch_user_by_username(comment_in.username) is None:
            raise NotFoundError(resource="Username", resource_id=comment_in.username)

        comment = await self.store.insert_comment(
            review_id=review.review_id,
            username=comment_in.username,
            body=comment_in.body,
        )
        return CommentResponse(comment=comment)


review_service = ReviewService()
