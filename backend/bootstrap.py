# backend/bootstrap.py
"""Composition root: picks the storage backend.

This is the only module that knows both backends. Everything past this
point talks to ProductRepository / CategoryRepository.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from config import Settings
from database import build_engine, build_session_factory, init_db
from domain.clock import Clock, SystemClock
from domain.repository import CategoryRepository, ProductRepository
from repositories.memory import InMemoryCategoryRepository, InMemoryProductRepository, InMemoryStore
from repositories.sql import SqlCategoryRepository, SqlProductRepository

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    products: ProductRepository
    categories: CategoryRepository
    engine: Optional[Engine] = None

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def in_memory_repositories(clock: Clock | None = None) -> Repositories:
    store = InMemoryStore(clock or SystemClock())
    return Repositories(
        products=InMemoryProductRepository(store),
        categories=InMemoryCategoryRepository(store),
    )


def sql_repositories(database_url: str, clock: Clock | None = None) -> Repositories:
    clock = clock or SystemClock()
    engine = build_engine(database_url)
    try:
        init_db(engine)
    except OperationalError as e:
        # Keep serving; requests will get StorageUnavailableError until the DB is back
        logger.warning("Could not initialize database: %s", e)
    session_factory = build_session_factory(engine)
    return Repositories(
        products=SqlProductRepository(session_factory, clock),
        categories=SqlCategoryRepository(session_factory, clock),
        engine=engine,
    )


def build_repositories(settings: Settings, clock: Clock | None = None) -> Repositories:
    if settings.USE_IN_MEMORY_DB:
        logger.info("Using in-memory storage")
        return in_memory_repositories(clock)

    logger.info("Using relational storage at %s", build_engine_label(settings.DATABASE_URL))
    return sql_repositories(settings.DATABASE_URL, clock)


def build_engine_label(url: str) -> str:
    # Never log credentials
    scheme, _, rest = url.partition("://")
    return f"{scheme}://{rest.rpartition('@')[2]}" if rest else url
