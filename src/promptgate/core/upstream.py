"""Client for the external generative-AI service.

The gateway makes exactly one outbound call per inbound request.  This
module owns that call and reports its outcome as a value instead of an
exception, so the route's "collapse every failure to a generic 500" step is
an explicit mapping rather than an incidental ``except`` block.

Result Types
------------
UpstreamSuccess
    The upstream answered with a 2xx status and a JSON body.  ``body`` holds
    the raw response bytes so they can be relayed without re-serialisation.
UpstreamFailure
    Anything else: transport errors (connection refused, DNS, timeout),
    non-2xx statuses, and 2xx responses whose body is not JSON.
    ``detail`` is for server-side logs only and must never reach a client.

Retry behavior:
    None.  Each request is attempted once.  Timeouts are the transport's
    ceiling from :attr:`GatewayConfig.upstream_timeout`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import httpx

from promptgate.api.models import UpstreamPayload
from promptgate.core.config import GatewayConfig

logger = logging.getLogger(__name__)

# Upper bound on how much of an upstream error body is written to the log.
_ERROR_EXCERPT_CHARS = 500


@dataclass(frozen=True)
class UpstreamSuccess:
    body: bytes
    status_code: int = 200


@dataclass(frozen=True)
class UpstreamFailure:
    reason: str
    status_code: int | None = None
    detail: str = ""


UpstreamResult = UpstreamSuccess | UpstreamFailure


class UpstreamClient:
    """Sends compiled payloads to the configured ``generateContent`` endpoint.

    The client holds no per-request state.  A single instance is shared by
    all concurrent requests; the underlying ``httpx.AsyncClient`` is safe for
    concurrent use.

    Args:
        config: Gateway configuration providing the endpoint and credential.
        http_client: Shared ``httpx.AsyncClient``.  The caller owns its
            lifecycle.
    """

    def __init__(self, config: GatewayConfig, http_client: httpx.AsyncClient) -> None:
        self._endpoint = config.upstream_endpoint
        self._headers = {"Content-Type": "application/json", **config.auth_headers()}
        self._client = http_client

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def generate(self, payload: UpstreamPayload) -> UpstreamResult:
        """POST one payload upstream and classify the outcome.

        Args:
            payload: Compiled upstream body.

        Returns:
            :class:`UpstreamSuccess` for a 2xx JSON response, otherwise
            :class:`UpstreamFailure`.  Never raises for upstream problems.
        """
        try:
            response = await self._client.post(
                self._endpoint,
                headers=self._headers,
                json=payload.model_dump(),
            )
        except httpx.TimeoutException as e:
            return UpstreamFailure(reason="timeout", detail=type(e).__name__)
        except httpx.HTTPError as e:
            return UpstreamFailure(reason="transport_error", detail=f"{type(e).__name__}: {e}")

        if not response.is_success:
            return UpstreamFailure(
                reason="http_status",
                status_code=response.status_code,
                detail=response.text[:_ERROR_EXCERPT_CHARS],
            )

        try:
            json.loads(response.content)
        except ValueError:
            return UpstreamFailure(
                reason="malformed_response",
                status_code=response.status_code,
                detail=response.text[:_ERROR_EXCERPT_CHARS],
            )

        logger.debug(f"Upstream returned {response.status_code} ({len(response.content)} bytes)")
        return UpstreamSuccess(body=response.content, status_code=response.status_code)
