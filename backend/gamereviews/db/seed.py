"""
Game Reviews API — Database Seeding
=====================================

What:  Rebuilds the schema and loads a dataset of categories, users,
       reviews and comments.
Who:   The test suite (before every endpoint test) and operators setting up
       a development database.
How:   load_dataset() reads four JSON files with aiofiles and validates
       them into SeedData; seed() drops and recreates every table, then
       inserts rows table by table in file order.

Ids are never taken from the files: the database assigns review_id and
comment_id in insertion order, so the first review in reviews.json is
review 1 and comments.json refers to reviews by that position. With the
packaged dataset the next comment created gets comment_id 7.

Usage:
    python -m gamereviews.db.seed                 # packaged test dataset
    python -m gamereviews.db.seed path/to/dataset
"""

import argparse
import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import aiofiles
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from gamereviews.config import settings
from gamereviews.database import Base, async_session_factory, engine
from gamereviews.models.category import Category
from gamereviews.models.comment import Comment
from gamereviews.models.review import Review
from gamereviews.models.user import User

logger = logging.getLogger(__name__)

DATASET_FILES = ("categories", "users", "reviews", "comments")


class CategorySeed(BaseModel):
    slug: str
    description: str


class UserSeed(BaseModel):
    username: str
    name: str
    avatar_url: str = ""


class ReviewSeed(BaseModel):
    title: str
    designer: str
    owner: str
    review_img_url: Optional[str] = None
    review_body: str
    category: str
    created_at: datetime
    votes: int = 0


class CommentSeed(BaseModel):
    body: str
    votes: int = 0
    author: str
    review_id: int
    created_at: datetime


class SeedData(BaseModel):
    categories: List[CategorySeed]
    users: List[UserSeed]
    reviews: List[ReviewSeed]
    comments: List[CommentSeed]


async def load_dataset(data_dir: Union[str, Path, None] = None) -> SeedData:
    """Read <name>.json for every table from ``data_dir`` (default: settings)."""
    directory = Path(data_dir or settings.seed_data_dir)
    raw = {}
    for name in DATASET_FILES:
        async with aiofiles.open(directory / f"{name}.json", encoding="utf-8") as fh:
            raw[name] = json.loads(await fh.read())
    return SeedData.model_validate(raw)


async def seed(
    data: SeedData,
    bind: AsyncEngine = engine,
    session_factory: async_sessionmaker = async_session_factory,
) -> None:
    """Drop and recreate all tables, then insert ``data``."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        session.add_all(Category(**c.model_dump()) for c in data.categories)
        await session.flush()

        session.add_all(User(**u.model_dump()) for u in data.users)
        await session.flush()

        # Flushed one by one so review_id follows file order
        for r in data.reviews:
            session.add(Review(**r.model_dump(exclude_none=True)))
            await session.flush()

        for c in data.comments:
            session.add(Comment(**c.model_dump()))
            await session.flush()

        await session.commit()

    logger.info(
        "Seeded %d categories, %d users, %d reviews, %d comments",
        len(data.categories), len(data.users), len(data.reviews), len(data.comments),
    )


async def _main(data_dir: Optional[str]) -> None:
    try:
        await seed(await load_dataset(data_dir))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset and seed the game reviews database.")
    parser.add_argument("data_dir", nargs="?", default=None, help="directory holding the JSON dataset")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    asyncio.run(_main(args.data_dir))
