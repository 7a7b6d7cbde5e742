"""
Application Wiring

Builds the orchestrator and its collaborators from configuration and tears
them down again. Nothing here is cached at module level.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass

from faq_emergence.app_config import AppConfig, load_config
from faq_emergence.generation_client import GenerationClient
from faq_emergence.infrastructure.model_clients.base import ModelClient
from faq_emergence.infrastructure.model_clients.factory import create_client
from faq_emergence.infrastructure.persistence.audit_log import SqlAuditLog
from faq_emergence.infrastructure.persistence.database import Database
from faq_emergence.infrastructure.persistence.parameter_store import SqlParameterStore
from faq_emergence.use_cases.learning import LearningOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Live collaborators for one process"""
    config: AppConfig
    database: Database
    store: SqlParameterStore
    audit_log: SqlAuditLog
    orchestrator: LearningOrchestrator


def build_orchestrator(
    config: AppConfig,
    database: Database,
    model_client: ModelClient | None = None,
) -> AppContext:
    """
    Construct the orchestrator with injected collaborators

    Args:
        config: Application configuration
        database: Open database (schema is created if missing)
        model_client: Model client to use (created from config.model when omitted)

    Returns:
        AppContext
    """
    if model_client is None:
        model_client = create_client(config.model.model_name, config)

    database.init_schema()
    store = SqlParameterStore(database)
    audit_log = SqlAuditLog(database)
    orchestrator = LearningOrchestrator(
        GenerationClient(model_client),
        store,
        audit_log,
        default_config=config.learning.default_params(),
        max_attempts=config.learning.max_attempts,
        request_timeout_seconds=config.learning.request_timeout_seconds,
    )
    logger.info("Learning orchestrator initialized (model=%s)", model_client.model_name)
    return AppContext(
        config=config,
        database=database,
        store=store,
        audit_log=audit_log,
        orchestrator=orchestrator,
    )


@contextmanager
def open_app(
    config: AppConfig | None = None,
    model_client: ModelClient | None = None,
) -> Generator[AppContext, None, None]:
    """
    Open the application for the duration of a with-block

    The database engine is disposed on exit, including on errors.
    """
    if config is None:
        config = load_config()

    database = Database(config.store.database_url, echo=config.store.echo)
    try:
        yield build_orchestrator(config, database, model_client)
    finally:
        database.dispose()
