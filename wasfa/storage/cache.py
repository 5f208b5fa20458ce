"""Durable recipe cache backed by SQLAlchemy.

Table recipe_caches(id, ingredients, result, created_at) stores one JSON
RecipeResult per row, keyed by the canonical ingredient signature. Rows are
write-once: put() always inserts and get() returns the oldest row for a key,
so a duplicate insert from two concurrent misses is harmless.

SQLite is the default store (CACHE_DB_FILE); any SQLAlchemy URL can be used
through DATABASE_URL. Blocking database work runs in a worker thread.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, MetaData, Table, Text, create_engine, insert, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from wasfa.models.models import CacheEntry, RecipeResult
from wasfa.utils.logger import logger


metadata = MetaData()

recipe_caches = Table(
    "recipe_caches",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("ingredients", Text, nullable=False, index=True),
    Column("result", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


def _create_engine(db_url: str) -> Engine:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(db_url, pool_pre_ping=True)

    if not url.database or url.database == ":memory:":
        # One shared connection, otherwise every thread would see its own empty database
        return create_engine(db_url, connect_args={"check_same_thread": False}, poolclass=StaticPool)

    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(db_url, connect_args={"check_same_thread": False})


class RecipeCache:
    """Write-once memoization table for recipe bundles."""

    def __init__(self, db_url: str = "sqlite://") -> None:
        self.engine = _create_engine(db_url)
        metadata.create_all(self.engine)
        logger.debug(f"Recipe cache ready ({self.engine.url.get_backend_name()})")

    def _get(self, key: str) -> Optional[CacheEntry]:
        query = (
            select(recipe_caches.c.result, recipe_caches.c.created_at)
            .where(recipe_caches.c.ingredients == key)
            .order_by(recipe_caches.c.created_at, recipe_caches.c.id)
            .limit(1)
        )
        with self.engine.connect() as conn:
            row = conn.execute(query).first()
        if row is None:
            return None
        return CacheEntry(
            key=key,
            result=RecipeResult.model_validate_json(row.result),
            created_at=row.created_at,
        )

    def _put(self, key: str, result: RecipeResult) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                insert(recipe_caches).values(
                    ingredients=key,
                    result=result.model_dump_json(by_alias=True, exclude_none=True),
                    created_at=datetime.now(timezone.utc),
                )
            )

    async def get(self, key: str) -> Optional[CacheEntry]:
        """Return the oldest entry stored under key, or None.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: On database errors. The pipeline
                treats any error here as a miss.
        """
        return await asyncio.to_thread(self._get, key)

    async def put(self, key: str, result: RecipeResult) -> None:
        """Insert a new entry for key. Existing rows are never modified."""
        await asyncio.to_thread(self._put, key, result)

    def close(self) -> None:
        self.engine.dispose()
