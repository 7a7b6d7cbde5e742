"""
Scoring sub-package

Provides the heuristic FAQ quality metrics, the weighted evaluator and the
failure classification used by the learning loop.
"""

from faq_emergence.domain.value_objects import QualityScore
from faq_emergence.scoring.scorer import classify_failure, evaluate_quality, quality_level
from faq_emergence.scoring.text_scorers import (
    count_paragraphs,
    count_sentences,
    count_words,
    extract_prompt_keywords,
    score_completeness,
    score_length,
    score_relevance,
    score_structure,
)

__all__ = [
    # value objects (re-exported from domain)
    "QualityScore",
    # evaluator
    "evaluate_quality",
    "classify_failure",
    "quality_level",
    # text metrics
    "count_paragraphs",
    "count_sentences",
    "count_words",
    "extract_prompt_keywords",
    "score_completeness",
    "score_length",
    "score_relevance",
    "score_structure",
]
