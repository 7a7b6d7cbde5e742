"""
Domain Layer

Defines constants, entities, value objects, scenario codes and errors that form
the core of the learning loop. Has no dependencies on external libraries.
"""

from faq_emergence.domain.constants import (
    ACCEPTABLE_THRESHOLD,
    MAX_ATTEMPTS,
    QUALITY_THRESHOLDS,
    QUALITY_WEIGHTS,
)
from faq_emergence.domain.entities import (
    AttemptRecord,
    DailyMetrics,
    GenerationOutcome,
    HealthCheckResult,
    ScenarioRecord,
)
from faq_emergence.domain.errors import (
    GenerationError,
    StoreError,
    StoreReadError,
    StoreWriteError,
    ValidationError,
)
from faq_emergence.domain.scenarios import ScenarioCode, lookup
from faq_emergence.domain.value_objects import (
    FaqArtifact,
    ModelResponse,
    ParameterConfig,
    QualityScore,
    Strategy,
)

__all__ = [
    # constants
    "ACCEPTABLE_THRESHOLD",
    "MAX_ATTEMPTS",
    "QUALITY_THRESHOLDS",
    "QUALITY_WEIGHTS",
    # entities
    "AttemptRecord",
    "DailyMetrics",
    "GenerationOutcome",
    "HealthCheckResult",
    "ScenarioRecord",
    # errors
    "GenerationError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "ValidationError",
    # scenarios
    "ScenarioCode",
    "lookup",
    # value objects
    "FaqArtifact",
    "ModelResponse",
    "ParameterConfig",
    "QualityScore",
    "Strategy",
]
