"""
Scenario Codes and Strategy Catalog

Each failure scenario carries the ordered list of parameter overrides the
orchestrator escalates through. Unknown codes resolve to QUALITY_LOW.
"""

from __future__ import annotations

from enum import Enum

from faq_emergence.domain.value_objects import ParameterConfig, Strategy


class ScenarioCode(str, Enum):
    """Why a generation attempt did (or did not) pass the quality bar"""

    SUCCESS = "success"
    INCOMPLETE_RESPONSE = "incomplete_response"
    LENGTH_ISSUE = "length_issue"
    STRUCTURE_ISSUE = "structure_issue"
    RELEVANCE_ISSUE = "relevance_issue"
    QUALITY_LOW = "quality_low"

    @classmethod
    def _missing_(cls, value):
        return cls.QUALITY_LOW

    @property
    def strategies(self) -> tuple[Strategy, ...]:
        return _STRATEGIES.get(self, _STRATEGIES[ScenarioCode.QUALITY_LOW])

    def __str__(self) -> str:
        return self.value


def _strategy(name: str, temperature: float, max_tokens: int, top_p: float) -> Strategy:
    return Strategy(name, ParameterConfig(temperature=temperature, max_tokens=max_tokens, top_p=top_p))


_STRATEGIES: dict[ScenarioCode, tuple[Strategy, ...]] = {
    # Missing fields: give the model more room, then constrain it
    ScenarioCode.INCOMPLETE_RESPONSE: (
        _strategy("increase_tokens", 0.7, 1500, 0.9),
        _strategy("structured_prompt", 0.5, 1200, 0.85),
    ),
    ScenarioCode.LENGTH_ISSUE: (
        _strategy("adjust_length", 0.6, 1200, 0.88),
        _strategy("balanced_output", 0.7, 1000, 0.9),
    ),
    ScenarioCode.STRUCTURE_ISSUE: (
        _strategy("lower_temp", 0.4, 1024, 0.8),
        _strategy("focused_gen", 0.5, 1100, 0.85),
    ),
    ScenarioCode.RELEVANCE_ISSUE: (
        _strategy("precise_mode", 0.3, 1024, 0.75),
        _strategy("conservative", 0.4, 900, 0.8),
    ),
    ScenarioCode.QUALITY_LOW: (
        _strategy("creative_boost", 0.8, 1200, 0.92),
        _strategy("balanced", 0.6, 1100, 0.87),
    ),
}


def lookup(scenario_code: ScenarioCode | str) -> tuple[Strategy, ...]:
    """
    Get the escalation order for a scenario code

    Args:
        scenario_code: Scenario code (enum member or its string value)

    Returns:
        Ordered strategies; the QUALITY_LOW list for codes without their own
    """
    return ScenarioCode(scenario_code).strategies
