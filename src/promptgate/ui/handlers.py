"""Gradio event handlers for the composer form."""

import logging
from typing import Any

import gradio as gr

from .composer import PromptComposer, RelayError, compose_request
from .models import BUSY_MESSAGE, GENERIC_FAILURE_MESSAGE, ComposerState
from .validation import ValidationError

logger = logging.getLogger(__name__)


def lock_form() -> dict:
    """Disable the submit button while a request is outstanding."""
    return gr.update(interactive=False, value="Generating...")


def unlock_form() -> dict:
    """Re-enable the submit button once the request has resolved."""
    return gr.update(interactive=True, value="Submit")


def submit_prompt(
    prompt: str,
    image_path: str | None,
    state: ComposerState,
    composer: PromptComposer,
) -> tuple[Any, str, ComposerState]:
    """Compose a request from the form and send it to the gateway.

    Args:
        prompt: Prompt text
        image_path: Path of the uploaded image, or None
        state: Session state (carries the loading guard)
        composer: Composer used to reach the gateway

    Returns:
        Tuple of (response_to_display, status_markdown, updated_state)
    """
    if state is None:
        state = ComposerState()

    if state.loading:
        logger.info("Submission ignored: request already outstanding")
        gr.Warning(BUSY_MESSAGE)
        return state.last_response, f"⏳ {BUSY_MESSAGE}", state

    state.loading = True
    try:
        request = compose_request(prompt, image_path)
        response = composer.submit(request)
    except ValidationError as e:
        logger.warning(f"Validation error: {e}")
        return state.last_response, f"❌ **Validation Error**\n\n{e}", state
    except RelayError as e:
        logger.error(f"Gateway call failed: {e.__cause__!r}")
        gr.Warning(GENERIC_FAILURE_MESSAGE)
        return state.last_response, f"❌ **Error**\n\n{GENERIC_FAILURE_MESSAGE}", state
    except Exception as e:
        logger.error(f"Unexpected error submitting prompt: {e}", exc_info=True)
        gr.Warning(GENERIC_FAILURE_MESSAGE)
        return state.last_response, f"❌ **Error**\n\n{GENERIC_FAILURE_MESSAGE}", state
    finally:
        state.loading = False

    state.last_response = response
    image_note = " with image" if request.image is not None else ""
    return response, f"✅ **Response received**{image_note}", state


def clear_form(state: ComposerState) -> tuple[str, None, None, str, ComposerState]:
    """Reset the form inputs and the displayed response.

    Returns:
        Tuple of (prompt, image, response, status_markdown, updated_state)
    """
    state = ComposerState()
    return "", None, None, "*Ready*", state
