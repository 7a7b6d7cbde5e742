"""
FAQ Generation Client

Sends the FAQ prompt to a model client with the requested parameters and
parses the answer into an FaqArtifact. Every failure surfaces as
GenerationError so the learning loop can record it as a failed attempt.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

from faq_emergence.domain.constants import DEFAULT_CATEGORY
from faq_emergence.domain.errors import GenerationError
from faq_emergence.domain.value_objects import FaqArtifact, ParameterConfig
from faq_emergence.infrastructure.model_clients.base import ModelClient
from faq_emergence.prompt_builder import build_prompt

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")
_BARE_JSON_RE = re.compile(r"\{[\s\S]*\}")

FALLBACK_TITLE = "FAQ Response"


@dataclass
class GeneratedFaq:
    """A parsed FAQ together with call metadata"""
    faq: FaqArtifact
    model_name: str
    latency_ms: int
    tokens_used: int = 0


def parse_faq_response(text: str) -> FaqArtifact:
    """
    Parse a model response into an FAQ entry

    Parse order:
    1. ```json fenced block
    2. First {...} span
    3. Plain text (used as the answer)

    Args:
        text: Raw model output

    Returns:
        FaqArtifact

    Raises:
        GenerationError: When JSON is present but invalid or lacks title/answer
    """
    match = _FENCED_JSON_RE.search(text) or _BARE_JSON_RE.search(text)
    if match is None:
        return FaqArtifact(
            title=FALLBACK_TITLE,
            answer=text,
            category=DEFAULT_CATEGORY,
            keywords=[],
            raw_response=text,
        )

    json_text = match.group(1) if match.groups() else match.group(0)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Failed to parse FAQ response: {e}") from e

    if not isinstance(data, dict) or not data.get("title") or not data.get("answer"):
        raise GenerationError("Failed to parse FAQ response: missing required fields: title and answer")

    keywords = data.get("keywords")
    if isinstance(keywords, str):
        keywords = [k.strip() for k in keywords.split(",") if k.strip()]
    elif not isinstance(keywords, (list, tuple)):
        # null, numbers, booleans and objects carry no usable keywords
        keywords = []

    return FaqArtifact(
        title=str(data["title"]),
        answer=str(data["answer"]),
        category=str(data.get("category") or DEFAULT_CATEGORY),
        keywords=[str(k) for k in keywords],
        raw_response=text,
    )


class GenerationClient:
    """Generates FAQ entries through a model client"""

    def __init__(self, model_client: ModelClient):
        self._client = model_client

    @property
    def model_name(self) -> str:
        return self._client.model_name

    def generate(self, prompt: str, config: ParameterConfig) -> GeneratedFaq:
        """
        Generate an FAQ entry for a question

        Args:
            prompt: The user's question
            config: Generation parameters

        Returns:
            GeneratedFaq

        Raises:
            GenerationError: On provider failure or an unusable response
        """
        try:
            response = self._client.generate(build_prompt(prompt), config)
        except Exception as e:
            logger.warning("Generation failed: %s", e)
            raise GenerationError(f"{type(e).__name__}: {e}") from e

        try:
            faq = parse_faq_response(response.output)
        except GenerationError:
            raise
        except Exception as e:
            logger.warning("Unusable FAQ response: %s", e)
            raise GenerationError(f"Failed to parse FAQ response: {type(e).__name__}: {e}") from e

        return GeneratedFaq(
            faq=faq,
            model_name=response.model_name,
            latency_ms=response.latency_ms,
            tokens_used=response.input_tokens + response.output_tokens,
        )
