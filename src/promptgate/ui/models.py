"""Data models for composer UI state."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ComposerState:
    """Session state for the Gradio composer.

    Each browser session gets its own instance, so the loading guard is per
    form rather than global.

    Attributes
    ----------
    loading : bool
        True while a gateway call for this session is outstanding
    last_response : Any | None
        Most recent successful gateway response, stored verbatim
    """

    loading: bool = False
    last_response: Any | None = None

    def __repr__(self) -> str:
        return (
            f"ComposerState(loading={self.loading}, "
            f"has_response={self.last_response is not None})"
        )


# Shown for every gateway failure; the underlying error is only logged.
GENERIC_FAILURE_MESSAGE = "Something went wrong while generating a response. Please try again."
BUSY_MESSAGE = "A request is already in progress."
