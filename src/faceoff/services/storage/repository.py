"""Shared async repository helpers for SQLModel session work."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlmodel import Session

from faceoff.core.errors import StoreUnavailableError

if TYPE_CHECKING:
    from sqlalchemy import Engine

T = TypeVar("T")

logger = structlog.get_logger()


class AsyncRepository(Generic[T]):
    """Wrap sync SQLModel session work for async callers.

    Every call is bounded by ``timeout_seconds``. Timeouts and connection
    level failures surface as StoreUnavailableError; other database errors
    propagate unchanged.
    """

    def __init__(self, engine: Engine, timeout_seconds: float | None = None) -> None:
        self._engine = engine
        self._timeout = timeout_seconds

    async def _run_session(self, fn: Callable[[Session], T]) -> T:
        """Run a sync function inside a Session on a worker thread."""

        def _run() -> T:
            with Session(self._engine) as session:
                return fn(session)

        try:
            return await asyncio.wait_for(asyncio.to_thread(_run), timeout=self._timeout)
        except TimeoutError as e:
            logger.warning("store_timeout", operation=fn.__name__, timeout=self._timeout)
            msg = f"Candidate store did not answer within {self._timeout}s"
            raise StoreUnavailableError(msg) from e
        except (OperationalError, InterfaceError) as e:
            logger.warning("store_error", operation=fn.__name__, error=str(e.orig))
            msg = "Candidate store is unavailable"
            raise StoreUnavailableError(msg) from e
