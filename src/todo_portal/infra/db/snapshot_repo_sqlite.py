from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import String, Text, DateTime
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from todo_portal.domain.errors import PersistenceError
from todo_portal.infra.db.snapshot_store import SnapshotStore


class Base(DeclarativeBase):
    pass


class SnapshotRow(Base):
    __tablename__ = "snapshots"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


def make_sqlite_url(db_path: str | Path) -> str:
    # db_path like "./data/todo.db"
    p = Path(db_path).resolve()
    return f"sqlite+aiosqlite:///{p.as_posix()}"


class SQLiteSnapshotStore(SnapshotStore):
    """
    One row per key; a snapshot write is a single upsert in its own
    transaction, so readers see the old value or the new one.
    """

    def __init__(self, engine: AsyncEngine, db_path: Optional[Path] = None):
        self.engine = engine
        self.db_path = db_path
        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(engine, expire_on_commit=False)
        self._ready = False

    @classmethod
    def from_path(cls, db_path: str | Path) -> "SQLiteSnapshotStore":
        return cls(create_async_engine(make_sqlite_url(db_path), future=True), Path(db_path))

    async def init(self) -> None:
        if self._ready:
            return
        try:
            if self.db_path is not None:
                self.db_path.resolve().parent.mkdir(parents=True, exist_ok=True)
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"cannot create snapshot table: {e}") from e
        self._ready = True

    async def get_value(self, key: str) -> Optional[str]:
        await self.init()
        try:
            async with self.sessionmaker() as session:
                row = await session.get(SnapshotRow, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot read snapshot {key!r}: {e}") from e

    async def put_value(self, key: str, value: str) -> None:
        await self.init()
        stmt = sqlite_insert(SnapshotRow).values(
            key=key,
            value=value,
            updated_at=datetime.now(timezone.utc),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SnapshotRow.key],
            set_={"value": stmt.excluded["value"], "updated_at": stmt.excluded["updated_at"]},
        )
        try:
            async with self.sessionmaker() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"cannot write snapshot {key!r}: {e}") from e

    async def close(self) -> None:
        await self.engine.dispose()
