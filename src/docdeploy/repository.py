from __future__ import annotations

from datetime import datetime
from typing import List, Protocol, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class JobRepository(Protocol):
    async def insert_purged_urls(self, job_id: str, urls: Sequence[str]) -> None: ...


class Base(DeclarativeBase):
    pass


class JobRecord(Base):
    __tablename__ = "jobs"
    id: Mapped[str] = mapped_column(sa.Text, primary_key=True)
    purged_urls: Mapped[List[str]] = mapped_column(sa.JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now(), nullable=False
    )


class SqlJobRepository:
    """Job audit storage on an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str) -> SqlJobRepository:
        return cls(create_async_engine(url, pool_pre_ping=True))

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def insert_purged_urls(self, job_id: str, urls: Sequence[str]) -> None:
        """Append purged URLs to the job's history, creating the row if needed."""
        async with self._sessions() as s:
            async with s.begin():
                record = await s.get(JobRecord, job_id)
                if record is None:
                    s.add(JobRecord(id=job_id, purged_urls=list(urls)))
                else:
                    # new list so the JSON column is seen as changed
                    record.purged_urls = [*record.purged_urls, *urls]

    async def get_purged_urls(self, job_id: str) -> List[str]:
        async with self._sessions() as s:
            record = await s.get(JobRecord, job_id)
            return list(record.purged_urls) if record else []

    async def close(self) -> None:
        await self.engine.dispose()
