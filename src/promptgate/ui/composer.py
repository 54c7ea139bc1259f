"""Request composition and submission to the gateway.

This module is the non-UI half of the composer.  It turns form input into a
:class:`~promptgate.api.models.PromptRequest` and sends it to the gateway
with ``httpx``.  The Gradio handlers call into it; it can also be used on its
own from scripts.

Flow
----
1. :func:`encode_image` reads the selected file, checks it is an image the
   upstream accepts, and base64-encodes the bytes.
2. :func:`compose_request` validates the prompt and attaches the encoded
   image.  Encoding finishes before anything is sent.
3. :meth:`PromptComposer.submit` makes exactly one POST and returns the
   parsed JSON body.  Any failure is raised as :class:`RelayError`.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any

import httpx
from PIL import Image, UnidentifiedImageError

from promptgate.api.models import SUPPORTED_IMAGE_MIME_TYPES, InlineImage, PromptRequest

from .validation import ValidationError, validate_prompt_content

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """The call to the gateway failed.

    Raised for transport errors, non-2xx statuses and non-JSON bodies alike.
    The message is generic; the cause is chained for logging.
    """


def encode_image(path: str | Path) -> InlineImage:
    """Read an image file and encode it for the gateway.

    The MIME type is the one declared by the file's actual format (as
    identified by Pillow), not by its extension or the browser's upload
    type.  A ``.png`` file holding JPEG data is sent as ``image/jpeg``.
    Damaged files, including ones whose chunk checksums fail, are rejected.

    Args:
        path: Path to the image file

    Returns:
        InlineImage with the MIME type and base64 data

    Raises:
        ValidationError: If the file is missing, not an image, or in a
            format the upstream does not accept
    """
    path = Path(path)
    if not path.is_file():
        raise ValidationError(f"File not found: {path.name}")

    try:
        with Image.open(path) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationError(f"{path.name} is not a readable image") from e

    mime_type = Image.MIME.get(image_format or "")
    if mime_type not in SUPPORTED_IMAGE_MIME_TYPES:
        raise ValidationError(
            f"Unsupported image type ({mime_type or image_format}). "
            f"Supported: {', '.join(SUPPORTED_IMAGE_MIME_TYPES)}"
        )

    data = base64.b64encode(path.read_bytes()).decode("ascii")
    logger.debug(f"Encoded {path.name} as {mime_type} ({len(data)} base64 chars)")
    return InlineImage(mime_type=mime_type, data=data)


def compose_request(prompt: str | None, image_path: str | Path | None = None) -> PromptRequest:
    """Build a validated prompt request from form values.

    Args:
        prompt: Prompt text (required)
        image_path: Optional path to an image file

    Returns:
        PromptRequest ready to send

    Raises:
        ValidationError: If the prompt is empty or the image is unusable
    """
    validate_prompt_content(prompt)
    image = encode_image(image_path) if image_path else None
    return PromptRequest(prompt=prompt, image=image)


class PromptComposer:
    """Sends composed requests to the gateway.

    The composer holds no per-request state.  The loading guard belongs to
    whoever owns the form (see :class:`~promptgate.ui.models.ComposerState`).

    Args:
        gateway_url: URL of the gateway's generate route
        client: Optional ``httpx.Client`` to send through.  When omitted, one
            is created with ``timeout`` and closed by :meth:`close`.
        timeout: Timeout in seconds for a client created here
    """

    def __init__(
        self,
        gateway_url: str,
        client: httpx.Client | None = None,
        timeout: float = 120.0,
    ) -> None:
        self.gateway_url = gateway_url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def submit(self, request: PromptRequest) -> Any:
        """Send one request to the gateway.

        Args:
            request: Composed prompt request

        Returns:
            The gateway's JSON body, unmodified

        Raises:
            RelayError: If the call fails for any reason
        """
        body = request.model_dump(by_alias=True, exclude_none=True)
        try:
            response = self._client.post(self.gateway_url, json=body)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Gateway returned {e.response.status_code}")
            raise RelayError("Gateway request failed") from e
        except httpx.HTTPError as e:
            logger.warning(f"Gateway unreachable: {type(e).__name__}: {e}")
            raise RelayError("Gateway request failed") from e
        except ValueError as e:
            logger.warning("Gateway returned a non-JSON body")
            raise RelayError("Gateway request failed") from e

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> PromptComposer:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
