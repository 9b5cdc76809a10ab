"""SQLite-backed event repository (SQLAlchemy async engine over aiosqlite)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy import Column, Integer, MetaData, Table, Text, event as sa_event, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from emergency_log.domain.errors import (
    StorageError,
    StorageReadError,
    StorageUnavailable,
    StorageWriteError,
)
from emergency_log.domain.models import Event

logger = logging.getLogger(__name__)

T = TypeVar("T")

metadata = MetaData()

# AUTOINCREMENT keeps ids of deleted rows from being handed out again.
events_table = Table(
    "events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text),
    Column("description", Text),
    Column("date", Text),
    Column("photo", Text),
    sqlite_autoincrement=True,
)


def _enable_wal(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class EventRepository:
    """Durable CRUD over the ``events`` table.

    Every call runs in its own transaction, so no caller ever sees a half-applied
    insert, update or delete. ``timeout`` (seconds) bounds each call; ``None``
    waits indefinitely.
    """

    def __init__(self, database_url: str, timeout: float | None = None) -> None:
        self._database_url = database_url
        self._timeout = timeout
        self._engine: AsyncEngine | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Connect and create the ``events`` table if it does not exist.

        Raises:
            StorageUnavailable: If the store cannot be opened or the schema
                cannot be created.
        """
        try:
            if self._engine is None:
                self._engine = create_async_engine(self._database_url)
                sa_event.listen(self._engine.sync_engine, "connect", _enable_wal)
            async with self._engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Could not open event store at %s: %s", self._database_url, exc)
            raise StorageUnavailable("Event store could not be opened") from exc
        logger.info("Event store ready at %s", self._database_url)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_all(self) -> list[Event]:
        async def _list(engine: AsyncEngine) -> list[Event]:
            async with engine.connect() as conn:
                result = await conn.execute(select(events_table).order_by(events_table.c.id))
                return [Event(**row._mapping) for row in result]

        return await self._call(_list, StorageReadError, "list events")

    async def get(self, event_id: int) -> Event | None:
        async def _get(engine: AsyncEngine) -> Event | None:
            async with engine.connect() as conn:
                result = await conn.execute(
                    select(events_table).where(events_table.c.id == event_id)
                )
                row = result.first()
                return Event(**row._mapping) if row is not None else None

        return await self._call(_get, StorageReadError, f"read event {event_id}")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, title: str, description: str, date: str, photo: str) -> int:
        """Insert a row and return its newly assigned id."""

        async def _insert(engine: AsyncEngine) -> int:
            async with engine.begin() as conn:
                result = await conn.execute(
                    events_table.insert().values(
                        title=title, description=description, date=date, photo=photo
                    )
                )
                return result.inserted_primary_key[0]

        return await self._call(_insert, StorageWriteError, "insert event")

    async def update(
        self, event_id: int, title: str, description: str, date: str, photo: str
    ) -> None:
        """Replace all mutable fields of ``event_id``. Missing ids are a no-op."""

        async def _update(engine: AsyncEngine) -> None:
            async with engine.begin() as conn:
                await conn.execute(
                    events_table.update()
                    .where(events_table.c.id == event_id)
                    .values(title=title, description=description, date=date, photo=photo)
                )

        await self._call(_update, StorageWriteError, f"update event {event_id}")

    async def delete(self, event_id: int) -> None:
        """Delete ``event_id``. Missing ids are a no-op."""

        async def _delete(engine: AsyncEngine) -> None:
            async with engine.begin() as conn:
                await conn.execute(events_table.delete().where(events_table.c.id == event_id))

        await self._call(_delete, StorageWriteError, f"delete event {event_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _call(
        self,
        operation: Callable[[AsyncEngine], Awaitable[T]],
        error_cls: type[StorageError],
        action: str,
    ) -> T:
        if self._engine is None:
            raise StorageUnavailable("Event store is not open")
        try:
            if self._timeout is None:
                return await operation(self._engine)
            return await asyncio.wait_for(operation(self._engine), self._timeout)
        except (SQLAlchemyError, OSError) as exc:
            # TimeoutError is an OSError, so stalled calls land here too.
            logger.error("Event store failed to %s: %s", action, exc or type(exc).__name__)
            raise error_cls(f"Could not {action}") from exc
