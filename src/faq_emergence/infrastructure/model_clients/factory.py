"""
Model client factory

Creates the appropriate client instance based on the model name.
"""

from __future__ import annotations

from faq_emergence.app_config import AppConfig, load_config
from faq_emergence.infrastructure.model_clients.base import ModelClient
from faq_emergence.infrastructure.model_clients.claude import ClaudeClient
from faq_emergence.infrastructure.model_clients.gemini import GeminiClient
from faq_emergence.infrastructure.model_clients.lmstudio import LMStudioClient
from faq_emergence.infrastructure.model_clients.mock import MockClient


def create_client(model_name: str, config: AppConfig | None = None) -> ModelClient:
    """
    Create the appropriate client based on the model name

    Args:
        model_name: Model name ("mock", "lmstudio/...", "claude...", otherwise Gemini)
        config: AppConfig (loads from env if not provided)

    Returns:
        ModelClient: The appropriate client instance
    """
    if config is None:
        config = load_config()

    timeout = config.model.timeout_seconds
    retries = config.model.max_retries
    retry_delay = config.model.retry_delay_seconds

    if model_name == "mock":
        return MockClient(model_name)
    elif model_name.startswith("lmstudio/"):
        return LMStudioClient(
            model_name,
            base_url=config.lmstudio.base_url,
            api_key=config.lmstudio.api_key,
            max_retries=retries,
            retry_delay_seconds=retry_delay,
        )
    elif model_name.startswith("claude"):
        return ClaudeClient(model_name, max_retries=retries, retry_delay_seconds=retry_delay)
    else:
        return GeminiClient(model_name, timeout_seconds=timeout, max_retries=retries, retry_delay_seconds=retry_delay)
