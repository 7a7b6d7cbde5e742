"""
Parameter Store

Durable best-known generation parameters per scenario code. Writes follow the
keep-better rule: the stored configuration is only replaced by a strictly
higher score, while the success counter grows on every write.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy import case, select
from sqlalchemy.exc import SQLAlchemyError

from faq_emergence.domain.entities import ScenarioRecord
from faq_emergence.domain.errors import StoreReadError, StoreWriteError
from faq_emergence.domain.value_objects import ParameterConfig
from faq_emergence.infrastructure.persistence.database import AdaptiveParamRow, Database, dialect_insert

logger = logging.getLogger(__name__)

# Tie-break for "best" lookups: highest score, then most successes, then most recent
_BEST_ORDER = (
    AdaptiveParamRow.quality_score.desc(),
    AdaptiveParamRow.success_count.desc(),
    AdaptiveParamRow.updated_at.desc(),
)


class ParameterStore(ABC):
    """Persistence boundary for learned configurations"""

    @abstractmethod
    def get_best(self, scenario_code: str) -> ParameterConfig | None:
        """Best configuration for a scenario, or None (never raises)"""
        pass

    @abstractmethod
    def upsert(self, scenario_code: str, config: ParameterConfig, score: float) -> None:
        """Record a successful configuration (keep-better). Raises StoreWriteError."""
        pass


class SqlParameterStore(ParameterStore):
    """ParameterStore backed by the adaptive_params table"""

    def __init__(self, database: Database):
        self._db = database

    def get_best(self, scenario_code: str) -> ParameterConfig | None:
        """
        Retrieve the best known parameters for a scenario

        Any retrieval error is logged and treated as a cache miss.

        Args:
            scenario_code: Scenario code

        Returns:
            ParameterConfig, or None when nothing was learned (or the read failed)
        """
        try:
            record = self.get_record(scenario_code)
        except StoreReadError as e:
            logger.warning("Failed to get parameters for '%s', using defaults: %s", scenario_code, e)
            return None

        if record is None:
            logger.debug("No learned parameters for '%s'", scenario_code)
            return None

        logger.debug("Found learned parameters for '%s' (score=%.3f)", scenario_code, record.best_score)
        return record.best_config

    def get_record(self, scenario_code: str) -> ScenarioRecord | None:
        """Full record for a scenario code. Raises StoreReadError."""
        stmt = (
            select(AdaptiveParamRow)
            .where(AdaptiveParamRow.scenario_code == str(scenario_code))
            .order_by(*_BEST_ORDER)
            .limit(1)
        )
        try:
            with self._db.session_scope() as session:
                row = session.scalars(stmt).first()
                return _to_record(row) if row is not None else None
        except (SQLAlchemyError, ValueError) as e:
            raise StoreReadError(f"Failed to read parameters for '{scenario_code}': {e}") from e

    def list_records(self) -> list[ScenarioRecord]:
        """All learned records, best first. Raises StoreReadError."""
        stmt = select(AdaptiveParamRow).order_by(*_BEST_ORDER)
        try:
            with self._db.session_scope() as session:
                return [_to_record(row) for row in session.scalars(stmt)]
        except (SQLAlchemyError, ValueError) as e:
            raise StoreReadError(f"Failed to list learned parameters: {e}") from e

    def upsert(self, scenario_code: str, config: ParameterConfig, score: float) -> None:
        """
        Store successful parameters for adaptive learning

        Executed as a single INSERT ... ON CONFLICT DO UPDATE statement so
        concurrent writers for the same scenario never lose the higher score
        or an increment of success_count.

        Args:
            scenario_code: Scenario code
            config: Parameters that produced a passing result
            score: Quality score of that result

        Raises:
            StoreWriteError: If the write fails (nothing is persisted)
        """
        code = str(scenario_code)
        now = datetime.now()
        try:
            insert = dialect_insert(self._db.dialect_name)
        except ValueError as e:
            raise StoreWriteError(str(e)) from e

        table = AdaptiveParamRow.__table__
        stmt = insert(table).values(
            scenario_code=code,
            params=config.canonical_json(),
            quality_score=float(score),
            success_count=1,
            created_at=now,
            updated_at=now,
        )
        improved = stmt.excluded.quality_score > table.c.quality_score
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.scenario_code],
            set_={
                "success_count": table.c.success_count + 1,
                "params": case((improved, stmt.excluded.params), else_=table.c.params),
                "quality_score": case((improved, stmt.excluded.quality_score), else_=table.c.quality_score),
                "updated_at": stmt.excluded.updated_at,
            },
        )

        try:
            with self._db.session_scope() as session:
                session.execute(stmt)
        except SQLAlchemyError as e:
            logger.warning("Failed to store parameters for '%s': %s", code, e)
            raise StoreWriteError(f"Failed to store parameters for '{code}': {e}") from e

        logger.info("Stored params for scenario '%s' (score=%.3f)", code, score)


def _to_record(row: AdaptiveParamRow) -> ScenarioRecord:
    return ScenarioRecord(
        scenario_code=row.scenario_code,
        best_config=ParameterConfig.from_json(row.params),
        best_score=row.quality_score,
        success_count=row.success_count,
        updated_at=row.updated_at,
    )
