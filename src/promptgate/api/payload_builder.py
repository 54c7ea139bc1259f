"""Upstream payload compilation for the gateway.

The gateway receives a :class:`~promptgate.api.models.PromptRequest` from the
composer and forwards a ``generateContent`` body to the external AI service.
This module performs that transformation.

Payload Structure
-----------------
::

    {
      "contents": [
        {
          "parts": [
            {"text": "<prompt>"},
            {"inline_data": {"mime_type": "<mimeType>", "data": "<base64>"}}
          ]
        }
      ]
    }

The text part always comes first.  The inline-data part is only appended
when the request carries an image.  Parts built from falsy values are
dropped, so the parts list never contains an empty entry.  The image MIME
type and data are copied verbatim; the gateway does not decode or inspect
the image.

Usage
-----
::

    payload = build_upstream_payload(PromptRequest(prompt="hello"))
    payload.model_dump()
    # {"contents": [{"parts": [{"text": "hello"}]}]}
"""

from __future__ import annotations

from promptgate.api.models import (
    Content,
    InlineData,
    InlineDataPart,
    PromptRequest,
    TextPart,
    UpstreamPayload,
)


def build_upstream_payload(request: PromptRequest) -> UpstreamPayload:
    """Compile the upstream body from a validated prompt request.

    Args:
        request: The validated gateway request.

    Returns:
        An :class:`UpstreamPayload` with one content entry.

    Raises:
        pydantic.ValidationError: If every part was filtered out.  A request
            that passed :class:`PromptRequest` validation always has a
            non-empty prompt, so this only fires for hand-built requests.
    """
    candidates: list[TextPart | InlineDataPart | None] = [
        TextPart(text=request.prompt) if request.prompt else None,
    ]

    image = request.image
    if image is not None and image.mime_type and image.data:
        candidates.append(
            InlineDataPart(inline_data=InlineData(mime_type=image.mime_type, data=image.data))
        )

    parts = [part for part in candidates if part is not None]
    return UpstreamPayload(contents=[Content(parts=parts)])
