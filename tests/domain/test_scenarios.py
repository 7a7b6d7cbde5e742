"""Tests for scenario codes and the strategy catalog"""

import pytest

from faq_emergence.domain.scenarios import ScenarioCode, lookup
from faq_emergence.domain.value_objects import ParameterConfig


class TestScenarioCode:
    def test_string_values(self):
        assert ScenarioCode.SUCCESS == "success"
        assert ScenarioCode("incomplete_response") is ScenarioCode.INCOMPLETE_RESPONSE
        assert str(ScenarioCode.LENGTH_ISSUE) == "length_issue"

    def test_unknown_code_is_quality_low(self):
        assert ScenarioCode("no_such_scenario") is ScenarioCode.QUALITY_LOW


class TestLookup:
    @pytest.mark.parametrize("code", [c for c in ScenarioCode if c is not ScenarioCode.SUCCESS])
    def test_every_failure_scenario_has_two_or_more(self, code):
        strategies = lookup(code)
        assert len(strategies) >= 2
        assert all(isinstance(s.config, ParameterConfig) for s in strategies)

    def test_incomplete_response_order(self):
        names = [s.name for s in lookup(ScenarioCode.INCOMPLETE_RESPONSE)]
        assert names == ["increase_tokens", "structured_prompt"]

    def test_incomplete_response_raises_token_cap(self):
        first = lookup("incomplete_response")[0]
        assert first.config.max_tokens > ParameterConfig().max_tokens

    def test_structure_issue_lowers_temperature(self):
        first = lookup("structure_issue")[0]
        assert first.name == "lower_temp"
        assert first.config.temperature < ParameterConfig().temperature

    def test_quality_low_raises_temperature(self):
        first = lookup("quality_low")[0]
        assert first.name == "creative_boost"
        assert first.config.temperature > ParameterConfig().temperature

    def test_relevance_issue_values(self):
        strategies = lookup(ScenarioCode.RELEVANCE_ISSUE)
        assert strategies[0].config == ParameterConfig(temperature=0.3, max_tokens=1024, top_p=0.75)
        assert strategies[1].config == ParameterConfig(temperature=0.4, max_tokens=900, top_p=0.8)

    def test_unknown_falls_back_to_quality_low(self):
        assert lookup("something_else") == lookup(ScenarioCode.QUALITY_LOW)

    def test_success_falls_back_to_quality_low(self):
        assert lookup(ScenarioCode.SUCCESS) == lookup(ScenarioCode.QUALITY_LOW)
