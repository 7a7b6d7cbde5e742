"""
Database engine, schema and session management

Owns the SQLAlchemy engine for the parameter store and the audit log.
Construct one Database per process and dispose it on shutdown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, Float, Integer, String, Text, create_engine, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from faq_emergence.domain.entities import HealthCheckResult

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class AdaptiveParamRow(Base):
    """Best-known generation parameters per scenario code"""

    __tablename__ = "adaptive_params"

    scenario_code: Mapped[str] = mapped_column(String(50), primary_key=True)
    params: Mapped[str] = mapped_column(Text, nullable=False)  # canonical JSON
    quality_score: Mapped[float] = mapped_column(Float, nullable=False)
    success_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class FaqGenerationRow(Base):
    """Audit log of generation requests"""

    __tablename__ = "faq_generations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[dict] = mapped_column(JSON, nullable=False)
    quality_score: Mapped[float | None] = mapped_column(Float)
    attempts_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    params_used: Mapped[dict | None] = mapped_column(JSON)
    attempt_log: Mapped[list | None] = mapped_column(JSON)
    error_message: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)


class LearningMetricsRow(Base):
    """Daily roll-up of learning performance"""

    __tablename__ = "learning_metrics"

    metric_date: Mapped[date] = mapped_column(Date, primary_key=True)
    total_requests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_requests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avg_quality_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    avg_attempts: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL

    In-memory SQLite shares a single connection so every session sees the
    same database.
    """
    if database_url.startswith("sqlite") and (":memory:" in database_url or database_url == "sqlite://"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def dialect_insert(dialect_name: str):
    """
    Get the INSERT construct supporting ON CONFLICT for a dialect

    Raises:
        ValueError: For dialects without ON CONFLICT support
    """
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise ValueError(f"Unsupported database dialect for upsert: {dialect_name}")


class Database:
    """Engine and session factory with an explicit lifecycle"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = create_db_engine(database_url, echo=echo)
        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def init_schema(self) -> None:
        """Create tables that do not exist yet"""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables initialized")

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> HealthCheckResult:
        """Verify the database answers a trivial query"""
        start_time = time.time()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            return HealthCheckResult(component="database", success=False, latency_ms=None, error=str(e))
        latency_ms = int((time.time() - start_time) * 1000)
        return HealthCheckResult(component="database", success=True, latency_ms=latency_ms, error=None)

    def dispose(self) -> None:
        """Close all pooled connections"""
        self.engine.dispose()
        logger.info("Database connection pool closed")
