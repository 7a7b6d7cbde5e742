"""
Model client package

Provides a unified interface to each LLM provider.
"""

from faq_emergence.infrastructure.model_clients.base import ModelClient
from faq_emergence.infrastructure.model_clients.factory import create_client
from faq_emergence.domain.value_objects import ModelResponse

__all__ = ["ModelClient", "ModelResponse", "create_client"]
