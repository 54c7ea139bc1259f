"""Gradio composer for promptgate.

- composer: request composition (image encoding, validation) and the
  ``httpx`` call to the gateway
- handlers: Gradio event handlers for the form
- app: Blocks layout and the ``promptgate-ui`` entry point
"""

from .composer import PromptComposer, RelayError, compose_request, encode_image
from .models import ComposerState
from .validation import ValidationError

__all__ = [
    "ComposerState",
    "PromptComposer",
    "RelayError",
    "ValidationError",
    "compose_request",
    "encode_image",
]
