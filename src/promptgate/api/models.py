"""Pydantic request and payload models for the gateway API.

These models define the JSON schema for the gateway's input and for the
payload it forwards upstream.  FastAPI uses :class:`PromptRequest` for
automatic request validation and OpenAPI documentation generation.

Models
------
PromptRequest
    Payload for ``POST /api/generate``: a text prompt and an optional
    inline image.
InlineImage
    Base64-encoded image with its MIME type, as sent by the composer.
UpstreamPayload
    Body of the ``generateContent`` call: one content entry holding a
    non-empty list of parts.
GatewayError
    Structured error returned to the composer (405 or 500).
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field


class InlineImage(BaseModel):
    """Image attached to a prompt.

    Attributes:
        mime_type: Declared MIME type of the image (JSON key ``mimeType``).
        data: Base64-encoded image bytes.
    """

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(
        ...,
        alias="mimeType",
        min_length=1,
        description="Declared MIME type of the image (e.g. 'image/png').",
    )
    data: str = Field(
        ...,
        min_length=1,
        description="Base64-encoded image bytes.",
    )


class PromptRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    Attributes:
        prompt: Text prompt.  Must be non-empty.
        image: Optional inline image.  When present, both ``mimeType`` and
            ``data`` are required.
    """

    prompt: str = Field(
        ...,
        min_length=1,
        description="Text prompt sent as the first part.",
    )
    image: InlineImage | None = Field(
        default=None,
        description="Optional image sent as an inline-data part.",
    )


class TextPart(BaseModel):
    text: str


class InlineData(BaseModel):
    mime_type: str
    data: str


class InlineDataPart(BaseModel):
    inline_data: InlineData


class Content(BaseModel):
    parts: list[TextPart | InlineDataPart] = Field(..., min_length=1)


class UpstreamPayload(BaseModel):
    """Body of the upstream ``generateContent`` request.

    Serialises to ``{"contents": [{"parts": [...]}]}``.  Validation rejects
    a content entry with no parts.
    """

    contents: list[Content] = Field(..., min_length=1)

    @property
    def parts(self) -> list[TextPart | InlineDataPart]:
        """Parts of the single content entry."""
        return self.contents[0].parts


@dataclass(frozen=True)
class GatewayError:
    """Error surfaced to the composer.

    Only two causes are distinguished: a method other than POST (405) and any
    internal or upstream failure (500).
    """

    status_code: int
    message: str

    def to_response(self, headers: dict[str, str] | None = None) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"message": self.message},
            headers=headers,
        )


# Image formats the upstream accepts as inline data that Pillow can identify.
SUPPORTED_IMAGE_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/webp",
)

METHOD_NOT_ALLOWED = GatewayError(status_code=405, message="Method not allowed")
INTERNAL_SERVER_ERROR = GatewayError(status_code=500, message="Internal Server Error")
