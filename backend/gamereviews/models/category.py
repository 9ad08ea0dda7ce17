"""
Category ORM model: the `categories` table.

A category is a classification tag referenced by ``Review.category``.
The slug is the natural primary key; categories are seeded and never
modified by the API.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gamereviews.database import Base


class Category(Base):
    __tablename__ = "categories"

    slug: Mapped[str] = mapped_column(String(100), primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(slug='{self.slug}')>"
