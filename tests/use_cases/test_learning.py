"""
Tests for the adaptive learning orchestrator

Verifies:
- Attempt order: learned, default, then the failure scenario's strategies
- The attempt budget and request deadline are never exceeded
- Successful configurations are learned; store and audit failures never fail a request
- The best candidate is returned when every attempt falls short
"""

import pytest
from unittest.mock import MagicMock, call

from faq_emergence.domain.errors import GenerationError, StoreReadError, StoreWriteError
from faq_emergence.domain.scenarios import ScenarioCode, lookup
from faq_emergence.domain.value_objects import FaqArtifact, ParameterConfig
from faq_emergence.generation_client import GeneratedFaq, GenerationClient
from faq_emergence.infrastructure.model_clients.mock import MockClient
from faq_emergence.infrastructure.persistence.audit_log import AuditLog, SqlAuditLog
from faq_emergence.infrastructure.persistence.database import Database
from faq_emergence.infrastructure.persistence.parameter_store import ParameterStore, SqlParameterStore
from faq_emergence.use_cases.learning import TIMEOUT_WARNING, LearningOrchestrator

PROMPT = "What is photosynthesis?"
LEARNED = ParameterConfig(temperature=0.5, max_tokens=1200, top_p=0.85)


def _good_faq() -> FaqArtifact:
    sentence = "Photosynthesis lets green plants turn sunlight, water and carbon dioxide into sugar."
    return FaqArtifact(
        title="What is photosynthesis",
        answer=f"{sentence} {sentence} {sentence}\n\n{sentence} {sentence} {sentence}",
        category="Science",
        keywords=["plants", "energy"],
    )


def _poor_faq() -> FaqArtifact:
    """Scores about 0.25 and classifies as incomplete_response"""
    return FaqArtifact(title="", answer="Too short.", category="", keywords=[])


def _mediocre_faq() -> FaqArtifact:
    """Scores about 0.34, still below the bar"""
    return FaqArtifact(title="", answer="Too short.", category="Science", keywords=["x"])


def _generator(*results):
    """Generator returning each FAQ (or raising each exception) in turn"""
    generator = MagicMock()
    generator.model_name = "test-model"
    generator.generate.side_effect = [
        r if isinstance(r, Exception) else GeneratedFaq(faq=r, model_name="test-model", latency_ms=5)
        for r in results
    ]
    return generator


def _always(faq_factory):
    generator = MagicMock()
    generator.model_name = "test-model"
    generator.generate.side_effect = lambda prompt, config: GeneratedFaq(
        faq=faq_factory(), model_name="test-model", latency_ms=5
    )
    return generator


@pytest.fixture
def store():
    store = MagicMock(spec=ParameterStore)
    store.get_best.return_value = None
    return store


@pytest.fixture
def audit_log():
    return MagicMock(spec=AuditLog)


def _configs(generator):
    return [c.args[1] for c in generator.generate.call_args_list]


class TestAttemptOrder:
    def test_default_passes_first_time(self, store):
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is True
        assert outcome.attempts == 1
        assert [r.strategy_name for r in outcome.attempt_log] == ["default"]
        assert outcome.quality.overall == 1.0
        assert outcome.model_name == "test-model"
        store.get_best.assert_called_once_with(ScenarioCode.SUCCESS)
        store.upsert.assert_called_once_with(ScenarioCode.SUCCESS, ParameterConfig(), 1.0)

    def test_custom_default_config(self, store):
        default = ParameterConfig(temperature=0.6, max_tokens=800, top_p=0.8)
        generator = _generator(_good_faq())

        LearningOrchestrator(generator, store, default_config=default).generate_with_learning(PROMPT)

        assert _configs(generator) == [default]

    def test_learned_config_used_first(self, store):
        store.get_best.return_value = LEARNED
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.attempts == 1
        assert outcome.attempt_log[0].strategy_name == "learned"
        assert _configs(generator) == [LEARNED]
        assert outcome.config == LEARNED
        store.upsert.assert_called_once_with(ScenarioCode.SUCCESS, LEARNED, 1.0)

    def test_learned_fails_then_default_passes(self, store):
        store.get_best.return_value = LEARNED
        generator = _generator(_poor_faq(), _good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is True
        assert [r.strategy_name for r in outcome.attempt_log] == ["learned", "default"]
        assert _configs(generator) == [LEARNED, ParameterConfig()]

    def test_adaptive_strategy_success_is_learned_twice(self, store):
        generator = _generator(_poor_faq(), _good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        strategy = lookup(ScenarioCode.INCOMPLETE_RESPONSE)[0]
        assert outcome.success is True
        assert outcome.scenario_code == "incomplete_response"
        assert [r.strategy_name for r in outcome.attempt_log] == ["default", strategy.name]
        assert store.upsert.call_args_list == [
            call(ScenarioCode.INCOMPLETE_RESPONSE, strategy.config, 1.0),
            call(ScenarioCode.SUCCESS, strategy.config, 1.0),
        ]

    def test_strategies_follow_failure_scenario(self, store):
        """A length failure escalates through the length strategies"""
        generator = _always(_mediocre_faq)

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        names = [s.name for s in lookup(ScenarioCode.LENGTH_ISSUE)]
        assert outcome.scenario_code == "length_issue"
        assert [r.strategy_name for r in outcome.attempt_log] == ["default"] + names


class TestExhaustion:
    def test_always_failing_uses_all_attempts(self, store):
        generator = _always(_poor_faq)

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is False
        assert outcome.attempts == 3
        assert generator.generate.call_count == 3
        assert [r.strategy_name for r in outcome.attempt_log] == [
            "default", "increase_tokens", "structured_prompt",
        ]
        assert outcome.faq is not None
        assert outcome.message == "FAQ generated but quality threshold not met"
        store.upsert.assert_not_called()

    def test_learned_counts_against_budget(self, store):
        store.get_best.return_value = LEARNED
        generator = _always(_poor_faq)

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert [r.strategy_name for r in outcome.attempt_log] == ["learned", "default", "increase_tokens"]

    def test_returns_highest_scoring_candidate(self, store):
        best = _mediocre_faq()
        generator = _generator(_poor_faq(), best, _poor_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.faq is best
        assert outcome.config == lookup(ScenarioCode.INCOMPLETE_RESPONSE)[0].config
        assert outcome.quality.overall == outcome.attempt_log[1].score.overall

    def test_ties_keep_earliest_candidate(self, store):
        first = _poor_faq()
        generator = _generator(first, _poor_faq(), _poor_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.faq is first
        assert outcome.config == ParameterConfig()

    @pytest.mark.parametrize("max_attempts", [1, 2, 3, 4, 5])
    @pytest.mark.parametrize("learned", [None, LEARNED])
    def test_never_exceeds_max_attempts(self, store, max_attempts, learned):
        store.get_best.return_value = learned
        generator = _always(_poor_faq)

        outcome = LearningOrchestrator(generator, store, max_attempts=max_attempts).generate_with_learning(PROMPT)

        assert generator.generate.call_count == outcome.attempts == len(outcome.attempt_log)
        assert outcome.attempts <= max_attempts

    def test_single_attempt_budget_skips_default(self, store):
        store.get_best.return_value = LEARNED
        generator = _always(_poor_faq)

        outcome = LearningOrchestrator(generator, store, max_attempts=1).generate_with_learning(PROMPT)

        assert outcome.attempts == 1
        assert outcome.attempt_log[0].strategy_name == "learned"
        assert outcome.scenario_code is None

    def test_no_attempt_made_raises(self, store):
        orchestrator = LearningOrchestrator(_always(_poor_faq), store)
        orchestrator.max_attempts = 0

        with pytest.raises(RuntimeError, match="No generation attempt"):
            orchestrator.generate_with_learning(PROMPT)

    def test_max_attempts_must_be_positive(self, store):
        with pytest.raises(ValueError, match="max_attempts"):
            LearningOrchestrator(_always(_poor_faq), store, max_attempts=0)


class TestGenerationErrors:
    def test_error_counts_as_attempt(self, store):
        generator = _generator(GenerationError("ConnectionError: down"), _good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is True
        assert outcome.attempts == 2
        assert outcome.attempt_log[0].error == "ConnectionError: down"
        assert outcome.attempt_log[0].score is None
        # No breakdown to classify: quality_low strategies
        assert outcome.attempt_log[1].strategy_name == lookup(ScenarioCode.QUALITY_LOW)[0].name

    def test_all_errors(self, store):
        generator = _generator(*(GenerationError("boom") for _ in range(3)))

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is False
        assert outcome.attempts == 3
        assert outcome.faq is None
        assert outcome.quality.level == "failed"
        assert outcome.model_name == "test-model"
        assert all(r.error == "boom" for r in outcome.attempt_log)

    def test_errored_attempt_does_not_beat_scored_one(self, store):
        scored = _poor_faq()
        generator = _generator(scored, GenerationError("boom"), GenerationError("boom"))

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.faq is scored


class TestStoreFailures:
    def test_read_failure_falls_back_to_default(self, store):
        store.get_best.side_effect = StoreReadError("db down")
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is True
        assert outcome.attempt_log[0].strategy_name == "default"

    def test_write_failure_becomes_warning(self, store):
        store.upsert.side_effect = StoreWriteError("disk full")
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(generator, store).generate_with_learning(PROMPT)

        assert outcome.success is True
        assert outcome.faq is not None
        assert outcome.warnings == ["failed to store learned parameters for 'success': disk full"]


class TestTimeout:
    def test_deadline_stops_escalation(self, store):
        now = [0.0]

        def slow_generate(prompt, config):
            now[0] += 100.0
            return GeneratedFaq(faq=_poor_faq(), model_name="test-model", latency_ms=5)

        generator = MagicMock()
        generator.model_name = "test-model"
        generator.generate.side_effect = slow_generate

        orchestrator = LearningOrchestrator(
            generator, store, request_timeout_seconds=150, clock=lambda: now[0]
        )
        outcome = orchestrator.generate_with_learning(PROMPT)

        assert outcome.success is False
        assert outcome.attempts == 2
        assert outcome.warnings == [TIMEOUT_WARNING]
        assert outcome.duration_ms == 200_000

    def test_first_attempt_always_runs(self, store):
        now = [0.0]
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(
            generator, store, request_timeout_seconds=0.001, clock=lambda: now[0]
        ).generate_with_learning(PROMPT)

        assert outcome.success is True
        assert outcome.warnings == []


class TestAuditLog:
    def test_success_recorded(self, store, audit_log):
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(generator, store, audit_log).generate_with_learning(PROMPT)

        audit_log.append.assert_called_once_with(PROMPT, outcome, outcome.attempt_log)

    def test_failure_recorded(self, store, audit_log):
        outcome = LearningOrchestrator(_always(_poor_faq), store, audit_log).generate_with_learning(PROMPT)

        audit_log.append.assert_called_once_with(PROMPT, outcome, outcome.attempt_log)

    def test_audit_errors_are_swallowed(self, store, audit_log):
        audit_log.append.side_effect = RuntimeError("audit down")
        generator = _generator(_good_faq())

        outcome = LearningOrchestrator(generator, store, audit_log).generate_with_learning(PROMPT)

        assert outcome.success is True


class TestWithSqlStore:
    """End to end with the offline mock model and in-memory SQLite"""

    @pytest.fixture
    def database(self):
        db = Database("sqlite://")
        db.init_schema()
        yield db
        db.dispose()

    def test_second_request_starts_from_learned_config(self, database):
        store = SqlParameterStore(database)
        audit_log = SqlAuditLog(database)
        orchestrator = LearningOrchestrator(GenerationClient(MockClient()), store, audit_log)

        first = orchestrator.generate_with_learning("What is a black hole?")
        second = orchestrator.generate_with_learning("How do vaccines work?")

        assert first.success is True
        assert first.attempt_log[0].strategy_name == "default"
        assert second.attempt_log[0].strategy_name == "learned"
        record = store.get_record("success")
        assert record.success_count == 2
        assert record.best_config == ParameterConfig()
        assert audit_log.count_generations() == 2
