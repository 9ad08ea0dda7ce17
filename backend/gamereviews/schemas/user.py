"""User response schemas."""

from typing import List

from pydantic import BaseModel


class UserItem(BaseModel):
    username: str
    name: str
    avatar_url: str

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    """Envelope for GET /api/users."""
    users: List[UserItem]
