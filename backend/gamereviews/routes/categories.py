"""
Game Reviews API — Category & User Route Handlers
===================================================

What:  GET /api/categories and GET /api/users.
How:   Thin handlers: delegate to ReviewService, return the envelope.
"""

import logging

from fastapi import APIRouter

from gamereviews.schemas.category import CategoryListResponse
from gamereviews.schemas.common import ErrorResponse
from gamereviews.schemas.user import UserListResponse
from gamereviews.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Categories"])


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all review categories",
)
async def get_categories() -> CategoryListResponse:
    return await review_service.list_categories()


@router.get(
    "/users",
    response_model=UserListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all users",
    tags=["Users"],
)
async def get_users() -> UserListResponse:
    return await review_service.list_users()
