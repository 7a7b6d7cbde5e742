"""
faq-emergence CLI Runner

Minimal CLI for generating FAQ entries with adaptive parameter learning.

Usage:
    python -m faq_emergence.runner --prompt "What is a black hole?"
    python -m faq_emergence.runner --prompt "What is a black hole?" --model mock --json

Inspect what has been learned so far:
    python -m faq_emergence.runner --stats

Check connectivity:
    python -m faq_emergence.runner --health-check
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from functools import partial

from dotenv import load_dotenv

from faq_emergence.app_config import AppConfig, load_config
from faq_emergence.domain.entities import GenerationOutcome
from faq_emergence.domain.errors import ValidationError
from faq_emergence.infrastructure.model_clients.factory import create_client
from faq_emergence.infrastructure.persistence.audit_log import SqlAuditLog
from faq_emergence.infrastructure.persistence.database import Database
from faq_emergence.infrastructure.persistence.parameter_store import SqlParameterStore
from faq_emergence.use_cases.health_check import run_health_check
from faq_emergence.use_cases.reporting import attempt_frame, metrics_frame, scenario_frame, summarize_metrics
from faq_emergence.use_cases.validation import validate_prompt
from faq_emergence.wiring import open_app


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="faq-emergence: Generate FAQ entries with adaptive parameter learning",
    )
    parser.add_argument(
        "--prompt",
        default=None,
        help="Question to generate an FAQ entry for (5-5000 characters)",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model name (default: FAQ_MODEL from .env; 'mock' runs offline)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Maximum generation calls per request (default: FAQ_MAX_ATTEMPTS from .env)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: DATABASE_URL from .env)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full response as JSON",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the database tables and exit",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show learned parameters and daily metrics",
    )
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Check the model and database connections",
    )
    args = parser.parse_args(argv)
    if not (args.prompt is not None or args.init_db or args.stats or args.health_check):
        parser.error("one of --prompt, --init-db, --stats or --health-check is required")
    if args.max_attempts is not None and args.max_attempts < 1:
        parser.error("--max-attempts must be at least 1")
    return args


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.model:
        config.model.model_name = args.model
    if args.max_attempts is not None:
        config.learning.max_attempts = args.max_attempts
    if args.database_url:
        config.store.database_url = args.database_url
    return config


def _print_outcome(outcome: GenerationOutcome) -> None:
    status = "SUCCESS" if outcome.success else "BELOW THRESHOLD"
    print(f"\n=== {status} ({outcome.attempts} attempt(s), {outcome.duration_ms}ms) ===\n")
    if outcome.faq is not None:
        print(f"  Title:    {outcome.faq.title}")
        print(f"  Category: {outcome.faq.category}")
        print(f"  Keywords: {', '.join(outcome.faq.keywords)}")
        print()
        print(outcome.faq.answer)
        print()
    print(f"  Quality: {outcome.quality.overall:.3f} ({outcome.quality.level})")
    for metric, value in outcome.quality.breakdown.items():
        print(f"    {metric:<13} {value:.2f}")
    print()
    print("=== Attempts ===\n")
    print(attempt_frame(outcome).to_string(index=False))
    print()
    for warning in outcome.warnings:
        print(f"  WARNING: {warning}")


def _print_stats(database: Database) -> None:
    store = SqlParameterStore(database)
    audit_log = SqlAuditLog(database)

    print("=== Learned Parameters ===\n")
    records = store.list_records()
    if records:
        print(scenario_frame(records).to_string(index=False))
    else:
        print("  (nothing learned yet)")
    print()

    print("=== Daily Metrics ===\n")
    metrics = audit_log.get_daily_metrics()
    if metrics:
        print(metrics_frame(metrics).to_string(index=False))
        summary = summarize_metrics(metrics)
        print()
        print(
            f"  Total: {summary['total_requests']} requests, "
            f"success rate {summary['success_rate']:.1%}, "
            f"avg quality {summary['avg_quality_score']:.3f}, "
            f"avg attempts {summary['avg_attempts']:.2f}"
        )
    else:
        print("  (no requests recorded yet)")
    print()


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)

    logging.basicConfig(
        level=os.environ.get("FAQ_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = _apply_overrides(load_config(), args)

    if args.health_check:
        database = Database(config.store.database_url, echo=config.store.echo)
        try:
            healthy, _ = run_health_check(
                config.model.model_name,
                database,
                partial(create_client, config=config),
            )
        finally:
            database.dispose()
        if not healthy:
            sys.exit(1)

    if args.init_db or args.stats:
        database = Database(config.store.database_url, echo=config.store.echo)
        try:
            database.init_schema()
            if args.init_db:
                print(f"Database initialized: {config.store.database_url}")
            if args.stats:
                _print_stats(database)
        finally:
            database.dispose()

    if args.prompt is None:
        return

    try:
        prompt = validate_prompt(args.prompt)
    except ValidationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    with open_app(config) as app:
        outcome = app.orchestrator.generate_with_learning(prompt)

    if args.json:
        print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_outcome(outcome)


if __name__ == "__main__":
    main()
