"""
Request Validation

Rejects malformed prompts before they reach the learning loop.
"""

from faq_emergence.domain.constants import PROMPT_MAX_LENGTH, PROMPT_MIN_LENGTH
from faq_emergence.domain.errors import ValidationError


def validate_prompt(prompt) -> str:
    """
    Validate a request prompt

    Args:
        prompt: Raw prompt value from the caller

    Returns:
        The prompt, unchanged

    Raises:
        ValidationError: If the prompt is not a string or its length is outside [5, 5000]
    """
    if not isinstance(prompt, str) or not prompt:
        raise ValidationError('Invalid request. "prompt" field is required and must be a string.')
    if len(prompt) < PROMPT_MIN_LENGTH:
        raise ValidationError(
            f"Prompt is too short. Please provide a meaningful question (at least {PROMPT_MIN_LENGTH} characters)."
        )
    if len(prompt) > PROMPT_MAX_LENGTH:
        raise ValidationError(f"Prompt is too long. Please keep it under {PROMPT_MAX_LENGTH} characters.")
    return prompt
