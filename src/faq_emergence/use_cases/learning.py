"""
Adaptive Learning Orchestrator

Drives one request through learned, default and scenario-specific parameter
configurations until a candidate passes the quality bar or the attempt budget
is spent, and remembers which configurations worked.

Attempt order:
  1. learned   - best configuration stored under the "success" scenario (if any)
  2. default   - the generator's default parameters
  3. adaptive  - strategies for the scenario the default attempt failed with
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from faq_emergence.domain.constants import MAX_ATTEMPTS
from faq_emergence.domain.entities import AttemptRecord, GenerationOutcome
from faq_emergence.domain.errors import GenerationError, StoreError, StoreReadError
from faq_emergence.domain.scenarios import ScenarioCode, lookup
from faq_emergence.domain.value_objects import FaqArtifact, ParameterConfig, QualityScore
from faq_emergence.generation_client import GeneratedFaq
from faq_emergence.infrastructure.persistence.audit_log import AuditLog
from faq_emergence.infrastructure.persistence.parameter_store import ParameterStore
from faq_emergence.scoring.scorer import classify_failure, evaluate_quality

logger = logging.getLogger(__name__)

TIMEOUT_WARNING = "request timed out"


class FaqGenerator(Protocol):
    """What the orchestrator needs from a generation client"""

    model_name: str

    def generate(self, prompt: str, config: ParameterConfig) -> GeneratedFaq: ...


@dataclass
class _Attempt:
    record: AttemptRecord
    quality: QualityScore
    faq: FaqArtifact | None = None
    model_name: str | None = None

    @property
    def passed(self) -> bool:
        return self.quality.passed


class LearningOrchestrator:
    """
    Generates an FAQ with adaptive parameter learning

    Each request is independent; the parameter store is the only shared state.
    Attempts run strictly one after another because each escalation depends on
    how the previous attempt failed.
    """

    def __init__(
        self,
        generator: FaqGenerator,
        store: ParameterStore,
        audit_log: AuditLog | None = None,
        *,
        default_config: ParameterConfig | None = None,
        max_attempts: int = MAX_ATTEMPTS,
        request_timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            generator: Generation client (raises GenerationError on failure)
            store: Parameter store holding learned configurations
            audit_log: Receives every request outcome (optional)
            default_config: Parameters of the default attempt
            max_attempts: Maximum generation calls per request (default: 3)
            request_timeout_seconds: Wall-clock budget per request (None: unlimited)
            clock: Monotonic time source in seconds
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self._generator = generator
        self._store = store
        self._audit_log = audit_log
        self.default_config = default_config or ParameterConfig()
        self.max_attempts = max_attempts
        self.request_timeout_seconds = request_timeout_seconds
        self._clock = clock

    def generate_with_learning(self, prompt: str) -> GenerationOutcome:
        """
        Generate an FAQ for a (validated) prompt

        Args:
            prompt: The user's question

        Returns:
            GenerationOutcome: the first passing candidate, or the best
            candidate seen when every attempt fell short
        """
        started = self._clock()
        deadline = started + self.request_timeout_seconds if self.request_timeout_seconds else None
        attempt_log: list[AttemptRecord] = []
        warnings: list[str] = []
        best: _Attempt | None = None
        scenario: ScenarioCode | None = None

        logger.info("Starting adaptive generation for: %r", prompt[:50])

        # Phase 1: learned parameters
        learned = self._learned_config()
        if learned is not None:
            logger.info("Using learned parameters from previous successes")
            attempt = self._run_attempt(prompt, learned, "learned", attempt_log)
            if attempt.passed:
                return self._finish_success(prompt, attempt, ScenarioCode.SUCCESS, attempt_log, warnings, started)
            best = _better(best, attempt)

        # Phase 2: default parameters
        if not self._should_stop(attempt_log, deadline, warnings):
            attempt = self._run_attempt(prompt, self.default_config, "default", attempt_log)
            if attempt.passed:
                return self._finish_success(prompt, attempt, ScenarioCode.SUCCESS, attempt_log, warnings, started)
            best = _better(best, attempt)

            # Phase 3: scenario-specific strategies
            scenario = classify_failure(attempt.quality)
            logger.info("Quality issue detected: %s, trying adaptive strategies", scenario)
            for strategy in lookup(scenario):
                if self._should_stop(attempt_log, deadline, warnings):
                    break
                attempt = self._run_attempt(prompt, strategy.config, strategy.name, attempt_log)
                if attempt.passed:
                    return self._finish_success(prompt, attempt, scenario, attempt_log, warnings, started)
                best = _better(best, attempt)

        # Exhausted: return the best candidate seen
        if best is None:
            raise RuntimeError("No generation attempt was made.")
        logger.warning(
            "Max attempts reached (%d). Best quality: %.3f", len(attempt_log), best.quality.overall
        )
        outcome = GenerationOutcome(
            success=False,
            faq=best.faq,
            quality=best.quality,
            attempts=len(attempt_log),
            attempt_log=attempt_log,
            scenario_code=str(scenario) if scenario is not None else None,
            model_name=best.model_name or getattr(self._generator, "model_name", None),
            config=best.record.config,
            duration_ms=self._elapsed_ms(started),
            warnings=warnings,
        )
        self._record(prompt, outcome)
        return outcome

    def _learned_config(self) -> ParameterConfig | None:
        try:
            return self._store.get_best(ScenarioCode.SUCCESS)
        except StoreReadError as e:
            logger.warning("Failed to read learned parameters, using defaults: %s", e)
            return None

    def _should_stop(self, attempt_log: list[AttemptRecord], deadline: float | None, warnings: list[str]) -> bool:
        """True when the attempt budget is spent or the request deadline has passed"""
        if len(attempt_log) >= self.max_attempts:
            return True
        if attempt_log and deadline is not None and self._clock() >= deadline:
            if TIMEOUT_WARNING not in warnings:
                logger.warning("Request deadline reached after %d attempt(s)", len(attempt_log))
                warnings.append(TIMEOUT_WARNING)
            return True
        return False

    def _run_attempt(
        self,
        prompt: str,
        config: ParameterConfig,
        strategy_name: str,
        attempt_log: list[AttemptRecord],
    ) -> _Attempt:
        """Generate and score one candidate; generation errors become failed attempts"""
        logger.info("Attempt %d: strategy=%s params=%s", len(attempt_log) + 1, strategy_name, config.to_dict())
        start = time.perf_counter()
        try:
            generated = self._generator.generate(prompt, config)
        except GenerationError as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.warning("Attempt %s failed: %s", strategy_name, e.reason)
            record = AttemptRecord(strategy_name, config, duration_ms, error=e.reason)
            attempt_log.append(record)
            return _Attempt(record=record, quality=QualityScore.failed())

        quality = evaluate_quality(generated.faq, prompt)
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info("Quality: %.3f (%s), Duration: %dms", quality.overall, quality.level, duration_ms)

        record = AttemptRecord(strategy_name, config, duration_ms, score=quality)
        attempt_log.append(record)
        return _Attempt(record=record, quality=quality, faq=generated.faq, model_name=generated.model_name)

    def _finish_success(
        self,
        prompt: str,
        attempt: _Attempt,
        scenario: ScenarioCode,
        attempt_log: list[AttemptRecord],
        warnings: list[str],
        started: float,
    ) -> GenerationOutcome:
        config = attempt.record.config
        score = attempt.quality.overall

        # Learn under the failure scenario, and under "success" so the next
        # request starts from this configuration.
        codes = [scenario] if scenario is ScenarioCode.SUCCESS else [scenario, ScenarioCode.SUCCESS]
        for code in codes:
            try:
                self._store.upsert(code, config, score)
            except StoreError as e:
                logger.warning("Failed to learn parameters for '%s': %s", code, e)
                warnings.append(f"failed to store learned parameters for '{code}': {e}")

        logger.info("FAQ generated successfully in %d attempt(s)", len(attempt_log))
        outcome = GenerationOutcome(
            success=True,
            faq=attempt.faq,
            quality=attempt.quality,
            attempts=len(attempt_log),
            attempt_log=attempt_log,
            scenario_code=str(scenario),
            model_name=attempt.model_name,
            config=config,
            duration_ms=self._elapsed_ms(started),
            warnings=warnings,
        )
        self._record(prompt, outcome)
        return outcome

    def _record(self, prompt: str, outcome: GenerationOutcome) -> None:
        if self._audit_log is None:
            return
        try:
            self._audit_log.append(prompt, outcome, outcome.attempt_log)
        except Exception as e:
            logger.warning("Audit log failed: %s", e)

    def _elapsed_ms(self, started: float) -> int:
        return int((self._clock() - started) * 1000)


def _better(best: _Attempt | None, attempt: _Attempt) -> _Attempt:
    """Keep the higher-scoring attempt; the earlier one wins ties"""
    if best is None or attempt.quality.overall > best.quality.overall:
        return attempt
    return best
