"""
Audit Log

Records every generation request and rolls up daily learning metrics.
Appending is fire-and-forget: failures are logged and never surfaced.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime

from sqlalchemy import func, select

from faq_emergence.domain.entities import AttemptRecord, DailyMetrics, GenerationOutcome
from faq_emergence.infrastructure.persistence.database import (
    Database,
    FaqGenerationRow,
    LearningMetricsRow,
    dialect_insert,
)

logger = logging.getLogger(__name__)


class AuditLog(ABC):
    """Collaborator receiving the outcome of each request"""

    @abstractmethod
    def append(self, prompt: str, outcome: GenerationOutcome, attempt_log: list[AttemptRecord]) -> None:
        """Record a request outcome; must not raise"""
        pass


class SqlAuditLog(AuditLog):
    """AuditLog backed by the faq_generations and learning_metrics tables"""

    def __init__(self, database: Database):
        self._db = database

    def append(self, prompt: str, outcome: GenerationOutcome, attempt_log: list[AttemptRecord]) -> None:
        try:
            with self._db.session_scope() as session:
                session.add(_generation_row(prompt, outcome, attempt_log))
                session.execute(self._metrics_upsert(outcome))
        except Exception as e:
            logger.warning("Failed to record generation: %s", e)

    def _metrics_upsert(self, outcome: GenerationOutcome):
        """Daily roll-up with running averages of quality and attempts"""
        insert = dialect_insert(self._db.dialect_name)
        table = LearningMetricsRow.__table__
        stmt = insert(table).values(
            metric_date=date.today(),
            total_requests=1,
            successful_requests=1 if outcome.success else 0,
            avg_quality_score=float(outcome.quality.overall),
            avg_attempts=float(outcome.attempts),
        )
        total = table.c.total_requests
        return stmt.on_conflict_do_update(
            index_elements=[table.c.metric_date],
            set_={
                "total_requests": total + 1,
                "successful_requests": table.c.successful_requests + stmt.excluded.successful_requests,
                "avg_quality_score": (table.c.avg_quality_score * total + stmt.excluded.avg_quality_score) / (total + 1),
                "avg_attempts": (table.c.avg_attempts * total + stmt.excluded.avg_attempts) / (total + 1),
            },
        )

    def get_daily_metrics(self, limit: int = 30) -> list[DailyMetrics]:
        """Most recent daily metrics, newest first"""
        stmt = select(LearningMetricsRow).order_by(LearningMetricsRow.metric_date.desc()).limit(limit)
        with self._db.session_scope() as session:
            return [
                DailyMetrics(
                    metric_date=row.metric_date,
                    total_requests=row.total_requests,
                    successful_requests=row.successful_requests,
                    avg_quality_score=row.avg_quality_score,
                    avg_attempts=row.avg_attempts,
                )
                for row in session.scalars(stmt)
            ]

    def count_generations(self) -> int:
        with self._db.session_scope() as session:
            return session.scalar(select(func.count()).select_from(FaqGenerationRow)) or 0


def _generation_row(prompt: str, outcome: GenerationOutcome, attempt_log: list[AttemptRecord]) -> FaqGenerationRow:
    error_message = None
    if not outcome.success:
        error_message = f"Failed to meet quality threshold after {outcome.attempts} attempts"
    return FaqGenerationRow(
        prompt=prompt,
        response=outcome.faq.to_dict() if outcome.faq else {},
        quality_score=outcome.quality.overall,
        attempts_count=outcome.attempts,
        params_used=outcome.config.to_dict() if outcome.config else {},
        attempt_log=[record.to_dict() for record in attempt_log],
        error_message=error_message,
        created_at=datetime.now(),
    )
