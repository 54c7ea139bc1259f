"""Validation utilities for composer inputs."""

import logging

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_prompt_content(prompt: str | None, max_length: int = 100000) -> None:
    """Validate prompt text content.

    Args:
        prompt: Prompt text to validate
        max_length: Maximum allowed prompt length (default: 100,000 characters)

    Raises:
        ValidationError: If the prompt is empty or too long
    """
    if not prompt or not prompt.strip():
        raise ValidationError("Please enter a prompt")

    if len(prompt) > max_length:
        raise ValidationError(
            f"Prompt is too long ({len(prompt)} characters). Maximum is {max_length} characters."
        )
