"""
Quality evaluation and failure classification

Combines the text metrics into a weighted quality score and maps a failing
score to the scenario code that selects the remediation strategies.
"""

from __future__ import annotations

from faq_emergence.domain.constants import (
    METRIC_FAILURE_THRESHOLD,
    QUALITY_THRESHOLDS,
    QUALITY_WEIGHTS,
)
from faq_emergence.domain.scenarios import ScenarioCode
from faq_emergence.domain.value_objects import FaqArtifact, QualityScore
from faq_emergence.scoring.text_scorers import (
    score_completeness,
    score_length,
    score_relevance,
    score_structure,
)

# Breakdown metric checked (in this order) -> scenario reported when it fails
_FAILURE_PRIORITY: tuple[tuple[str, ScenarioCode], ...] = (
    ("completeness", ScenarioCode.INCOMPLETE_RESPONSE),
    ("length", ScenarioCode.LENGTH_ISSUE),
    ("structure", ScenarioCode.STRUCTURE_ISSUE),
    ("relevance", ScenarioCode.RELEVANCE_ISSUE),
)


def quality_level(overall: float) -> str:
    """Map an overall score to its quality level"""
    for level in ("excellent", "good", "acceptable", "poor"):
        if overall >= QUALITY_THRESHOLDS[level]:
            return level
    return "failed"


def evaluate_quality(faq: FaqArtifact, prompt: str) -> QualityScore:
    """
    Calculate the quality score of an FAQ candidate

    Args:
        faq: Generated FAQ candidate
        prompt: Original request prompt

    Returns:
        QualityScore (overall rounded to 3 decimals, breakdown, level, passed)
    """
    breakdown = {
        "completeness": score_completeness(faq),
        "length": score_length(faq),
        "structure": score_structure(faq),
        "relevance": score_relevance(faq, prompt),
    }
    total = sum(breakdown[metric] * weight for metric, weight in QUALITY_WEIGHTS.items())
    overall = round(min(max(total, 0.0), 1.0), 3)
    return QualityScore(
        overall=overall,
        breakdown=breakdown,
        level=quality_level(overall),
        passed=overall >= QUALITY_THRESHOLDS["acceptable"],
    )


def classify_failure(score: QualityScore) -> ScenarioCode:
    """
    Determine the scenario code for a quality score

    Args:
        score: Quality evaluation of an attempt

    Returns:
        SUCCESS when passed, otherwise the first failing metric's scenario
        (completeness, length, structure, relevance), else QUALITY_LOW
    """
    if score.passed:
        return ScenarioCode.SUCCESS

    for metric, scenario in _FAILURE_PRIORITY:
        value = score.breakdown.get(metric)
        if value is not None and value < METRIC_FAILURE_THRESHOLD:
            return scenario

    return ScenarioCode.QUALITY_LOW
