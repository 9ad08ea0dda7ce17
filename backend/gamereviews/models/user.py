"""
User ORM model: the `users` table.

Users are seeded externally. ``Review.owner`` and ``Comment.author`` both
reference ``User.username``.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gamereviews.database import Base


class User(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    avatar_url: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<User(username='{self.username}')>"
