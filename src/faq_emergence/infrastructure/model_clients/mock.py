"""
Offline mock model client

Returns a canned FAQ answer so the learning loop can run without provider
credentials (development and demos).
"""

import json

from faq_emergence.domain.value_objects import ModelResponse, ParameterConfig
from faq_emergence.infrastructure.model_clients.base import ModelClient


class MockClient(ModelClient):
    """Deterministic client that answers every prompt with the same FAQ entry"""

    def __init__(self, model_name: str = "mock"):
        self.model_name = model_name

    def generate(self, prompt: str, config: ParameterConfig | None = None) -> ModelResponse:
        params = config or ParameterConfig()
        answer = {
            "title": "Understanding the Topic",
            "answer": (
                f"This is a comprehensive answer generated with temperature {params.temperature}.\n\n"
                "The response addresses the question thoroughly while maintaining clarity and accuracy. "
                "The content is structured to provide immediate value to the reader.\n\n"
                "Additional context and details are provided here to ensure complete understanding of the topic."
            ),
            "category": "General",
            "keywords": ["faq", "information", "help"],
        }
        return ModelResponse(
            output=json.dumps(answer),
            latency_ms=0,
            model_name=self.model_name,
            input_tokens=100,
            output_tokens=150,
        )
