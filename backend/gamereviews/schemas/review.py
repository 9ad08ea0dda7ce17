"""
Game Reviews API — Review Schemas
===================================

What:  Response models for reviews, plus the tagged result returned by the
       store's single-review lookup.

Why two record shapes:
    - ReviewSummary: list view (GET /api/reviews), no review_body
    - ReviewDetail:  single view (GET /api/reviews/{id}), full body

ReviewLookup:
    fetch_review_by_id() does not raise on a missing row. It returns a
    ReviewLookup tagged FOUND or NOT_FOUND, and the service layer tags
    malformed ids as INVALID_ID before the store is ever called. The
    service inspects the tag and decides which error (if any) to raise.
"""

import enum
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from gamereviews.schemas.common import as_utc


class ReviewSummary(BaseModel):
    """One entry of GET /api/reviews."""
    review_id: int
    owner: str
    title: str
    designer: str
    review_img_url: str
    category: str
    votes: int
    created_at: datetime = Field(description="When the review was posted (UTC ISO 8601)")
    comment_count: int = Field(description="Number of comments, derived at read time")

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ReviewDetail(ReviewSummary):
    """GET /api/reviews/{review_id} payload: the summary plus the body text."""
    review_body: str


class ReviewListResponse(BaseModel):
    reviews: List[ReviewSummary]


class ReviewResponse(BaseModel):
    review: ReviewDetail


class LookupStatus(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    INVALID_ID = "invalid_id"


class ReviewLookup(BaseModel):
    """
    Tagged outcome of looking a review up by id.

    ``requested_id`` keeps the id exactly as the client sent it so error
    messages echo it back (e.g. "Review ID: 100 Not Found").
    """
    status: LookupStatus
    requested_id: Union[int, str]
    review: Optional[ReviewDetail] = None

    @classmethod
    def found(cls, review: ReviewDetail) -> "ReviewLookup":
        return cls(status=LookupStatus.FOUND, requested_id=review.review_id, review=review)

    @classmethod
    def not_found(cls, review_id: Union[int, str]) -> "ReviewLookup":
        return cls(status=LookupStatus.NOT_FOUND, requested_id=review_id)

    @classmethod
    def invalid_id(cls, raw_id: str) -> "ReviewLookup":
        return cls(status=LookupStatus.INVALID_ID, requested_id=raw_id)
