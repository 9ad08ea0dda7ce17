"""
Game Reviews API — Comment Schemas
====================================

What:  Response models for comments and the typed input for creating one.

CommentCreate is deliberately strict (StrictStr): it is only constructed by
ReviewService.validate_comment_payload() after the raw JSON body passed the
presence and type checks, so a CommentCreate in hand means the input is
already known to be well formed.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, StrictStr, field_validator

from gamereviews.schemas.common import as_utc


class CommentItem(BaseModel):
    comment_id: int
    review_id: int
    author: str
    body: str
    votes: int
    created_at: datetime = Field(description="When the comment was posted (UTC ISO 8601)")

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class CommentListResponse(BaseModel):
    comments: List[CommentItem]


class CommentResponse(BaseModel):
    """Returned with HTTP 201 by POST /api/reviews/{review_id}/comments."""
    comment: CommentItem


class CommentCreate(BaseModel):
    """Validated comment input: who is posting and what they wrote."""
    username: StrictStr
    body: StrictStr
