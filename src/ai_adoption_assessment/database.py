"""Async SQLAlchemy engine, session dependency, and declarative base.

Every entity table extends ``EntityModel`` which supplies the id,
created_by, created_date and updated_date columns shared by all entities.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, func, inspect
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ai_adoption_assessment.observability import get_logger
from ai_adoption_assessment.settings import DatabaseSettings

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class EntityModel(Base):
    """Abstract base adding the columns every entity shares."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID",
    )
    created_by: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Email of the user who created the record",
    )
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @classmethod
    def column_names(cls) -> set[str]:
        """Names of all mapped columns on this entity."""
        return {column.key for column in inspect(cls).columns}

    def to_dict(self) -> dict[str, Any]:
        """Return the entity as a plain dict keyed by column name."""
        return {name: getattr(self, name) for name in self.column_names()}


def init_database(settings: DatabaseSettings) -> None:
    """Create the process-wide engine and session factory.

    Args:
        settings: Database connection settings.
    """
    global _engine, _session_factory

    _engine = create_async_engine(
        settings.url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        echo=settings.echo,
        pool_pre_ping=True,
    )
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    logger.info("Database engine initialised", pool_size=settings.pool_size)


async def dispose_database() -> None:
    """Dispose the engine's connection pool."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session that commits on success.

    Yields:
        An AsyncSession bound to the process-wide engine.

    Raises:
        RuntimeError: If ``init_database`` has not been called.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialised; call init_database() first.")

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
