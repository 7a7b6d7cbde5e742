"""
Gemini (Google GenAI SDK) model client
"""

import os
import time

from google import genai
from google.api_core import exceptions as google_exceptions
from google.genai import errors as genai_errors
from google.genai.types import GenerateContentConfig, HttpOptions

from faq_emergence.domain.value_objects import ModelResponse, ParameterConfig
from faq_emergence.infrastructure.model_clients.base import ModelClient, RetryMixin


class GeminiClient(RetryMixin, ModelClient):
    """Model client using Google GenAI SDK (Gemini API key or Vertex AI)"""

    def __init__(
        self,
        model_name: str,
        api_key: str | None = None,
        project_id: str | None = None,
        location: str | None = None,
        timeout_seconds: int = 60,
        max_retries: int = 3,
        retry_delay_seconds: float = 1.0,
    ):
        """
        Args:
            model_name: Model name (e.g. gemini-2.5-flash)
            api_key: Gemini API key (falls back to GEMINI_API_KEY)
            project_id: GCP project ID for Vertex AI (falls back to GCP_PROJECT_ID),
                used only when no API key is available
            location: Vertex AI region (default: global)
            timeout_seconds: Timeout in seconds (default: 60)
            max_retries: Maximum number of retries (default: 3)
            retry_delay_seconds: Base delay of the exponential backoff (default: 1.0)
        """
        self.model_name = model_name
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.project_id = project_id or os.environ.get("GCP_PROJECT_ID")
        self.location = location or "global"
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds

        # Timeout is configured via HttpOptions (milliseconds)
        http_options = HttpOptions(timeout=timeout_seconds * 1000)
        if self.api_key:
            self.client = genai.Client(api_key=self.api_key, http_options=http_options)
        elif self.project_id:
            self.client = genai.Client(
                vertexai=True,
                project=self.project_id,
                location=self.location,
                http_options=http_options,
            )
        else:
            raise ValueError("GEMINI_API_KEY or GCP_PROJECT_ID must be set")

    def generate(self, prompt: str, config: ParameterConfig | None = None) -> ModelResponse:
        """
        Send a prompt and retrieve the response

        Args:
            prompt: Input prompt
            config: Generation parameters (defaults when omitted)

        Returns:
            ModelResponse: The model's response

        Raises:
            Exception: If the maximum number of retries is exceeded
        """
        params = config or ParameterConfig()
        generation_config = GenerateContentConfig(
            temperature=params.temperature,
            max_output_tokens=params.max_tokens,
            top_p=params.top_p,
            top_k=params.top_k,
        )

        def _call():
            start_time = time.time()
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=generation_config,
            )
            end_time = time.time()

            latency_ms = int((end_time - start_time) * 1000)

            # Retrieve token usage
            input_tokens = 0
            output_tokens = 0
            if hasattr(response, "usage_metadata") and response.usage_metadata:
                input_tokens = getattr(response.usage_metadata, "prompt_token_count", 0) or 0
                output_tokens = getattr(response.usage_metadata, "candidates_token_count", 0) or 0

            if not response.text:
                raise ValueError("No response generated from Gemini")

            return ModelResponse(
                output=response.text.strip(),
                latency_ms=latency_ms,
                model_name=self.model_name,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
            )

        return self._with_retry(
            _call,
            retryable_exceptions=(
                genai_errors.ServerError,
                google_exceptions.DeadlineExceeded,
                google_exceptions.ServiceUnavailable,
                google_exceptions.ResourceExhausted,
            ),
        )
