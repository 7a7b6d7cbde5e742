"""
Text-based quality metrics

Implements the structural and lexical heuristics used to score an FAQ
candidate. Every metric returns a value between 0.0 and 1.0.
"""

from __future__ import annotations

import re
import string

from faq_emergence.domain.constants import REQUIRED_FAQ_FIELDS, STOP_WORDS
from faq_emergence.domain.value_objects import FaqArtifact

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def count_words(text: str) -> int:
    """Number of whitespace-separated words"""
    return len(text.split())


def count_paragraphs(text: str) -> int:
    """Number of non-blank blocks separated by a blank line"""
    return sum(1 for p in text.split("\n\n") if p.strip())


def count_sentences(text: str) -> int:
    """Number of non-blank fragments between sentence-ending punctuation"""
    return sum(1 for s in _SENTENCE_SPLIT_RE.split(text) if s.strip())


def extract_prompt_keywords(prompt: str) -> list[str]:
    """
    Extract the non-trivial words of a prompt

    Words are lowercased and stripped of surrounding punctuation; words of
    3 characters or fewer and stop words are dropped.

    Args:
        prompt: Original request prompt

    Returns:
        Keywords in prompt order (duplicates kept)
    """
    keywords = []
    for raw in prompt.lower().split():
        word = raw.strip(string.punctuation)
        if len(word) > 3 and word not in STOP_WORDS:
            keywords.append(word)
    return keywords


def _is_filled(value) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return any(isinstance(v, str) and v.strip() for v in value)
    return False


def score_completeness(faq: FaqArtifact) -> float:
    """Each required field (title, answer, category, keywords) adds an equal share"""
    share = 1.0 / len(REQUIRED_FAQ_FIELDS)
    filled = sum(1 for name in REQUIRED_FAQ_FIELDS if _is_filled(getattr(faq, name, None)))
    return filled * share


def score_length(faq: FaqArtifact) -> float:
    """
    Word-count banding of the answer

    50-300 words: 1.0, 30-500 words: 0.7, under 10 words: 0.1, otherwise 0.5
    """
    words = count_words(faq.answer or "")
    if 50 <= words <= 300:
        return 1.0
    if 30 <= words <= 500:
        return 0.7
    if words < 10:
        return 0.1
    return 0.5


def score_structure(faq: FaqArtifact) -> float:
    """Paragraphs, sentences and title length, capped at 1.0"""
    answer = faq.answer or ""
    total = 0.0

    paragraphs = count_paragraphs(answer)
    if paragraphs >= 2:
        total += 0.4
    elif paragraphs == 1:
        total += 0.2

    if count_sentences(answer) >= 3:
        total += 0.3

    if 3 <= count_words(faq.title or "") <= 15:
        total += 0.3

    return min(total, 1.0)


def score_relevance(faq: FaqArtifact, prompt: str) -> float:
    """
    Share of prompt keywords found in the answer or title

    Starts from 0.5 and adds up to 0.5 proportionally to the match ratio.
    A prompt without keywords scores 0.5.
    """
    keywords = extract_prompt_keywords(prompt)
    if not keywords:
        return 0.5

    answer = (faq.answer or "").lower()
    title = (faq.title or "").lower()
    matches = sum(1 for kw in keywords if kw in answer or kw in title)
    return min(0.5 + (matches / len(keywords)) * 0.5, 1.0)
