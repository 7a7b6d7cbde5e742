"""
Domain Value Objects

Defines immutable data structures representing values such as generation
parameters, model responses, FAQ candidates and quality scores.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from faq_emergence.domain.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
)

# Legacy camelCase keys written by earlier deployments
_LEGACY_KEYS = {"maxTokens": "max_tokens", "topP": "top_p", "topK": "top_k"}


@dataclass(frozen=True)
class ParameterConfig:
    """Tunable generation parameters (compared by value)"""

    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    top_p: float = DEFAULT_TOP_P
    top_k: int | None = None

    def __post_init__(self):
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("temperature must be between 0 and 2")
        if isinstance(self.max_tokens, bool) or not isinstance(self.max_tokens, int) or self.max_tokens < 1:
            raise ValueError("max_tokens must be a positive integer")
        if not 0.0 <= self.top_p <= 1.0:
            raise ValueError("top_p must be between 0 and 1")
        if self.top_k is not None and self.top_k < 1:
            raise ValueError("top_k must be a positive integer")

    def to_dict(self) -> dict:
        """Canonical dictionary (unset optional fields are omitted)"""
        data = {
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
        }
        if self.top_k is not None:
            data["top_k"] = self.top_k
        return data

    def canonical_json(self) -> str:
        """Sorted-key JSON; equal configs always serialize identically"""
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, data: dict) -> ParameterConfig:
        """Create from a dictionary (accepts snake_case and legacy camelCase keys)"""
        normalized = {_LEGACY_KEYS.get(key, key): value for key, value in data.items()}
        kwargs = {}
        if normalized.get("temperature") is not None:
            kwargs["temperature"] = float(normalized["temperature"])
        if normalized.get("max_tokens") is not None:
            kwargs["max_tokens"] = int(normalized["max_tokens"])
        if normalized.get("top_p") is not None:
            kwargs["top_p"] = float(normalized["top_p"])
        if normalized.get("top_k") is not None:
            kwargs["top_k"] = int(normalized["top_k"])
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> ParameterConfig:
        return cls.from_dict(json.loads(text))


@dataclass(frozen=True)
class Strategy:
    """A named parameter override tried against a failure scenario"""
    name: str
    config: ParameterConfig


@dataclass
class ModelResponse:
    """Model response"""
    output: str
    latency_ms: int
    model_name: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class FaqArtifact:
    """A generated FAQ entry"""
    title: str
    answer: str
    category: str = DEFAULT_CATEGORY
    keywords: list[str] = field(default_factory=list)
    raw_response: str | None = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "answer": self.answer,
            "category": self.category,
            "keywords": list(self.keywords),
        }


@dataclass(frozen=True)
class QualityScore:
    """Quality evaluation of one FAQ candidate"""

    overall: float
    breakdown: dict[str, float]
    level: str
    passed: bool

    @classmethod
    def failed(cls) -> QualityScore:
        """Score recorded for an attempt that produced no candidate"""
        return cls(overall=0.0, breakdown={}, level="failed", passed=False)

    def to_dict(self) -> dict:
        return {
            "score": self.overall,
            "level": self.level,
            "breakdown": dict(self.breakdown),
        }
