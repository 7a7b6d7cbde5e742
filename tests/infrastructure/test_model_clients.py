"""
Model client tests

Covers the RetryMixin._with_retry() retry behavior, the create_client()
factory branches and how each client maps ParameterConfig onto its API.
"""

import json

import pytest
from unittest.mock import patch, MagicMock

from faq_emergence.domain.value_objects import ParameterConfig
from faq_emergence.infrastructure.model_clients.base import RetryMixin
from faq_emergence.infrastructure.model_clients.claude import ClaudeClient
from faq_emergence.infrastructure.model_clients.factory import create_client
from faq_emergence.infrastructure.model_clients.gemini import GeminiClient
from faq_emergence.infrastructure.model_clients.lmstudio import LMStudioClient
from faq_emergence.infrastructure.model_clients.mock import MockClient


class TestRetryMixin:
    """Tests for RetryMixin._with_retry()"""

    def _make_mixin(self, max_retries=3, retry_delay_seconds=1.0):
        mixin = RetryMixin()
        mixin.max_retries = max_retries
        mixin.retry_delay_seconds = retry_delay_seconds
        return mixin

    @patch("faq_emergence.infrastructure.model_clients.base.time.sleep")
    def test_success_on_first_attempt(self, mock_sleep):
        """Returns the value without retrying when the first call succeeds"""
        mixin = self._make_mixin()
        fn = MagicMock(return_value="ok")

        result = mixin._with_retry(fn)

        assert result == "ok"
        fn.assert_called_once()
        mock_sleep.assert_not_called()

    @patch("faq_emergence.infrastructure.model_clients.base.time.sleep")
    def test_success_after_two_failures(self, mock_sleep):
        """Succeeds on the third call after two failures"""
        mixin = self._make_mixin(max_retries=3)
        fn = MagicMock(side_effect=[ValueError("1"), ValueError("2"), "ok"])

        result = mixin._with_retry(fn)

        assert result == "ok"
        assert fn.call_count == 3
        # Exponential backoff: sleep(1), sleep(2)
        assert mock_sleep.call_count == 2
        mock_sleep.assert_any_call(1)
        mock_sleep.assert_any_call(2)

    @patch("faq_emergence.infrastructure.model_clients.base.time.sleep")
    def test_backoff_scales_with_base_delay(self, mock_sleep):
        mixin = self._make_mixin(max_retries=3, retry_delay_seconds=0.5)
        fn = MagicMock(side_effect=[ValueError("1"), ValueError("2"), "ok"])

        mixin._with_retry(fn)

        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

    @patch("faq_emergence.infrastructure.model_clients.base.time.sleep")
    def test_raises_after_all_retries_exhausted(self, mock_sleep):
        """Raises the last exception once every retry has failed"""
        mixin = self._make_mixin(max_retries=3)
        fn = MagicMock(
            side_effect=[ValueError("1"), ValueError("2"), ValueError("final")]
        )

        with pytest.raises(ValueError, match="final"):
            mixin._with_retry(fn)

        assert fn.call_count == 3

    def test_max_retries_zero_raises_value_error(self):
        """max_retries=0 raises ValueError immediately"""
        mixin = self._make_mixin(max_retries=0)
        fn = MagicMock(return_value="ok")

        with pytest.raises(ValueError, match="max_retries must be at least 1"):
            mixin._with_retry(fn)

        fn.assert_not_called()

    @patch("faq_emergence.infrastructure.model_clients.base.time.sleep")
    def test_retryable_exceptions_filter(self, mock_sleep):
        """Exceptions outside retryable_exceptions propagate immediately"""
        mixin = self._make_mixin(max_retries=3)
        fn = MagicMock(side_effect=TypeError("not retryable"))

        with pytest.raises(TypeError, match="not retryable"):
            mixin._with_retry(fn, retryable_exceptions=(ValueError,))

        fn.assert_called_once()
        mock_sleep.assert_not_called()


class TestCreateClient:
    """Tests for the create_client() factory"""

    @patch.dict("os.environ", {"GEMINI_API_KEY": "test-key"})
    def test_gemini_model_returns_gemini_client(self):
        client = create_client("gemini-2.5-flash")
        assert isinstance(client, GeminiClient)

    @patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"})
    def test_claude_model_returns_claude_client(self):
        client = create_client("claude-haiku-4-5-20251001")
        assert isinstance(client, ClaudeClient)

    def test_lmstudio_model_returns_lmstudio_client(self):
        client = create_client("lmstudio/qwen2.5-7b")
        assert isinstance(client, LMStudioClient)
        assert client.api_model_name == "qwen2.5-7b"

    def test_mock_model_returns_mock_client(self):
        client = create_client("mock")
        assert isinstance(client, MockClient)

    @patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key", "FAQ_MAX_RETRIES": "5"})
    def test_retry_settings_come_from_config(self):
        client = create_client("claude-haiku-4-5-20251001")
        assert client.max_retries == 5

    @patch.dict("os.environ", {}, clear=True)
    def test_gemini_without_credentials_raises(self):
        with pytest.raises(ValueError, match="GEMINI_API_KEY or GCP_PROJECT_ID"):
            GeminiClient("gemini-2.5-flash")


class TestClaudeClient:
    def _client(self):
        client = ClaudeClient("claude-haiku-4-5-20251001", api_key="test-key", max_retries=1)
        client.client = MagicMock()
        response = MagicMock()
        response.content = [MagicMock(text="  answer  ")]
        response.usage.input_tokens = 10
        response.usage.output_tokens = 20
        client.client.messages.create.return_value = response
        return client

    def test_passes_parameters(self):
        client = self._client()
        result = client.generate("hi", ParameterConfig(temperature=0.4, max_tokens=900, top_p=0.8))

        kwargs = client.client.messages.create.call_args.kwargs
        assert kwargs["temperature"] == 0.4
        assert kwargs["max_tokens"] == 900
        assert kwargs["top_p"] == 0.8
        assert "top_k" not in kwargs
        assert result.output == "answer"
        assert result.input_tokens == 10
        assert result.output_tokens == 20

    def test_clamps_temperature(self):
        client = self._client()
        client.generate("hi", ParameterConfig(temperature=1.5))
        assert client.client.messages.create.call_args.kwargs["temperature"] == 1.0

    def test_passes_top_k_when_set(self):
        client = self._client()
        client.generate("hi", ParameterConfig(top_k=40))
        assert client.client.messages.create.call_args.kwargs["top_k"] == 40


class TestLMStudioClient:
    def test_passes_parameters(self):
        client = LMStudioClient("lmstudio/qwen2.5-7b", max_retries=1)
        client.client = MagicMock()
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = "answer"
        response.usage = None
        client.client.chat.completions.create.return_value = response

        result = client.generate("hi", ParameterConfig(temperature=0.3, max_tokens=512, top_p=0.75))

        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "qwen2.5-7b"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 512
        assert kwargs["top_p"] == 0.75
        assert result.output == "answer"
        assert result.model_name == "lmstudio/qwen2.5-7b"


class TestMockClient:
    def test_returns_faq_json(self):
        response = MockClient().generate("What is a black hole?")
        data = json.loads(response.output)
        assert set(data) == {"title", "answer", "category", "keywords"}
        assert response.model_name == "mock"

    def test_reflects_temperature(self):
        response = MockClient().generate("q", ParameterConfig(temperature=0.3))
        assert "temperature 0.3" in json.loads(response.output)["answer"]
