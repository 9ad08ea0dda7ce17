"""Category response schemas."""

from typing import List

from pydantic import BaseModel, Field


class CategoryItem(BaseModel):
    slug: str = Field(description="Unique category key, referenced by reviews")
    description: str

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    """Envelope for GET /api/categories."""
    categories: List[CategoryItem]
