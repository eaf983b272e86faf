"""Engine setup for the candidate store."""

from __future__ import annotations

from pathlib import Path

import structlog
from sqlalchemy import Engine
from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine

from faceoff.core.config import StoreConfig
from faceoff.models import Profile

from .profile_repository import ProfileRepository

logger = structlog.get_logger()


def create_store_engine(config: StoreConfig) -> Engine:
    """Create the database engine and make sure the profile table exists.

    SQLite files get their parent directory created; connections are opened
    per session (NullPool) because store work runs on worker threads.
    """
    url = make_url(config.get_database_url())
    connect_args: dict[str, object] = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, poolclass=NullPool, echo=config.echo, connect_args=connect_args)
    SQLModel.metadata.create_all(engine, tables=[Profile.__table__])
    logger.info("store_init", backend=url.get_backend_name(), database=url.database)
    return engine


def open_profile_repository(config: StoreConfig) -> ProfileRepository:
    """Build a ProfileRepository bound to a freshly created engine."""
    engine = create_store_engine(config)
    return ProfileRepository(engine, timeout_seconds=config.timeout_seconds)
