"""
Domain Entities

Defines the primary data structures used by the learning loop.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from faq_emergence.domain.value_objects import FaqArtifact, ParameterConfig, QualityScore


@dataclass
class ScenarioRecord:
    """Best-known configuration learned for a scenario code"""
    scenario_code: str
    best_config: ParameterConfig
    best_score: float
    success_count: int
    updated_at: datetime


@dataclass
class AttemptRecord:
    """One generation-plus-scoring cycle"""
    strategy_name: str
    config: ParameterConfig
    duration_ms: int
    score: QualityScore | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        entry = {
            "strategy": self.strategy_name,
            "params": self.config.to_dict(),
            "duration": self.duration_ms,
        }
        if self.score is not None:
            entry["qualityScore"] = self.score.overall
            entry["qualityLevel"] = self.score.level
            entry["breakdown"] = dict(self.score.breakdown)
        if self.error is not None:
            entry["error"] = self.error
        return entry


@dataclass
class GenerationOutcome:
    """Result of one generate-with-learning request"""
    success: bool
    faq: FaqArtifact | None
    quality: QualityScore
    attempts: int
    attempt_log: list[AttemptRecord]
    scenario_code: str | None = None
    model_name: str | None = None
    config: ParameterConfig | None = None
    duration_ms: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.success:
            return "FAQ generated successfully with adaptive learning"
        return "FAQ generated but quality threshold not met"

    def to_dict(self) -> dict:
        """Response shape returned at the system boundary"""
        return {
            "success": self.success,
            "faq": self.faq.to_dict() if self.faq else None,
            "quality": self.quality.to_dict(),
            "metadata": {
                "attempts": self.attempts,
                "attemptLog": [record.to_dict() for record in self.attempt_log],
                "model": self.model_name,
                "warnings": list(self.warnings),
                "durationMs": self.duration_ms,
            },
            "message": self.message,
        }


@dataclass
class DailyMetrics:
    """Per-day learning performance"""
    metric_date: date
    total_requests: int
    successful_requests: int
    avg_quality_score: float
    avg_attempts: float

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests


@dataclass
class HealthCheckResult:
    """Health check result"""
    component: str
    success: bool
    latency_ms: int | None
    error: str | None
