"""
Game Reviews API — Review & Comment Route Handlers
====================================================

What:  GET  /api/reviews
       GET  /api/reviews/{review_id}
       GET  /api/reviews/{review_id}/comments
       POST /api/reviews/{review_id}/comments
How:   Extract path/body values, delegate to ReviewService, return JSON.

review_id is declared as ``str`` on purpose: an ``int`` path parameter
would make FastAPI reject "abc" with its own 422 before our handler runs.
ReviewService owns the integer check and answers 400 "Bad Request".

The POST body is read from the raw request for the same reason: the
missing/incorrect-type messages for username and body are part of the
API contract and are produced by ReviewService.validate_comment_payload(),
and the body is only parsed once the review is known to exist.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request

from gamereviews.schemas.comment import CommentListResponse, CommentResponse
from gamereviews.schemas.common import ErrorResponse
from gamereviews.schemas.review import ReviewListResponse, ReviewResponse
from gamereviews.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reviews"])

_REVIEW_ERRORS = {
    400: {"description": "review_id is not an integer", "model": ErrorResponse},
    404: {"description": "Review not found", "model": ErrorResponse},
}


@router.get(
    "/reviews",
    response_model=ReviewListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List reviews, newest first, with comment counts",
)
async def get_reviews() -> ReviewListResponse:
    return await review_service.list_reviews()


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    responses=_REVIEW_ERRORS,
    summary="Get a single review by id",
)
async def get_review_by_id(review_id: str) -> ReviewResponse:
    return await review_service.get_review(review_id)


@router.get(
    "/reviews/{review_id}/comments",
    response_model=CommentListResponse,
    responses=_REVIEW_ERRORS,
    summary="List a review's comments, newest first",
)
async def get_comments_by_review_id(review_id: str) -> CommentListResponse:
    return await review_service.list_comments(review_id)


@router.post(
    "/reviews/{review_id}/comments",
    status_code=201,
    response_model=CommentResponse,
    responses={
        201: {"description": "Comment created", "model": CommentResponse},
        400: {"description": "Malformed review_id or comment body", "model": ErrorResponse},
        404: {"description": "Review or username not found", "model": ErrorResponse},
    },
    summary="Post a comment on a review",
    description='Body: {"username": "<existing username>", "body": "<comment text>"}',
)
async def post_comment(review_id: str, request: Request) -> CommentResponse:
    logger.info("Comment submitted for review %s", review_id)

    async def read_payload() -> Any:
        # No body at all is an empty comment, not a JSON error
        if not (await request.body()).strip():
            return None
        return await request.json()

    return await review_service.create_comment(review_id, read_payload)
