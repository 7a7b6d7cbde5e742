"""
Use Cases Layer

Aggregates business logic and provides use cases called from the runner.
"""

from faq_emergence.use_cases.health_check import (
    HEALTH_CHECK_PROMPT,
    health_check_model,
    run_health_check,
)
from faq_emergence.use_cases.learning import LearningOrchestrator
from faq_emergence.use_cases.reporting import (
    attempt_frame,
    metrics_frame,
    scenario_frame,
    summarize_metrics,
)
from faq_emergence.use_cases.validation import validate_prompt

__all__ = [
    # health_check
    "HEALTH_CHECK_PROMPT",
    "health_check_model",
    "run_health_check",
    # learning
    "LearningOrchestrator",
    # reporting
    "attempt_frame",
    "metrics_frame",
    "scenario_frame",
    "summarize_metrics",
    # validation
    "validate_prompt",
]
