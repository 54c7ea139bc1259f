"""Unit tests for the upstream client."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator

import httpx
import pytest
from respx import MockRouter

from promptgate.api.models import PromptRequest
from promptgate.api.payload_builder import build_upstream_payload
from promptgate.core.config import GatewayConfig
from promptgate.core.upstream import UpstreamClient, UpstreamFailure, UpstreamSuccess


@pytest.fixture
async def upstream_client(test_config: GatewayConfig) -> AsyncIterator[UpstreamClient]:
    """Create upstream client with real httpx client for respx mocking."""
    async with httpx.AsyncClient() as http_client:
        yield UpstreamClient(test_config, http_client)


@pytest.fixture
def text_payload():
    return build_upstream_payload(PromptRequest(prompt="hello"))


@pytest.mark.asyncio
async def test_success_returns_raw_body(
    upstream_client: UpstreamClient, respx_mock: MockRouter, upstream_url: str, text_payload
) -> None:
    """A 2xx JSON response is returned as the exact upstream bytes."""
    raw = b'{"candidates": [{"content": {"parts": [{"text": "hi"}]}}],   "extra": 1}'
    respx_mock.post(upstream_url).mock(return_value=httpx.Response(200, content=raw))

    result = await upstream_client.generate(text_payload)

    assert isinstance(result, UpstreamSuccess)
    assert result.body == raw
    assert result.status_code == 200


@pytest.mark.asyncio
async def test_sends_credential_and_json_body(
    upstream_client: UpstreamClient, respx_mock: MockRouter, upstream_url: str, text_payload
) -> None:
    """The request carries the credential header and the compiled payload."""
    route = respx_mock.post(upstream_url).mock(return_value=httpx.Response(200, json={}))

    await upstream_client.generate(text_payload)

    assert route.call_count == 1
    request = route.calls.last.request
    assert request.headers["x-goog-api-key"] == "test-secret-key-123"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"contents": [{"parts": [{"text": "hello"}]}]}


@pytest.mark.asyncio
async def test_bearer_header(respx_mock: MockRouter, text_payload) -> None:
    """A configured bearer scheme is sent in the Authorization header."""
    config = GatewayConfig(
        api_key="tok",
        api_key_header="Authorization",
        api_key_scheme="Bearer",
        _env_file=None,
    )
    route = respx_mock.post(config.upstream_endpoint).mock(
        return_value=httpx.Response(200, json={})
    )

    async with httpx.AsyncClient() as http_client:
        await UpstreamClient(config, http_client).generate(text_payload)

    assert route.calls.last.request.headers["authorization"] == "Bearer tok"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 403, 429, 500, 503])
async def test_non_2xx_is_failure(
    upstream_client: UpstreamClient,
    respx_mock: MockRouter,
    upstream_url: str,
    text_payload,
    status: int,
) -> None:
    """Any non-2xx status is reported as a failure with the status kept."""
    respx_mock.post(upstream_url).mock(
        return_value=httpx.Response(status, json={"error": {"message": "nope"}})
    )

    result = await upstream_client.generate(text_payload)

    assert isinstance(result, UpstreamFailure)
    assert result.reason == "http_status"
    assert result.status_code == status
    assert "nope" in result.detail


@pytest.mark.asyncio
async def test_connection_error_is_failure(
    upstream_client: UpstreamClient, respx_mock: MockRouter, upstream_url: str, text_payload
) -> None:
    """Transport errors are reported, not raised."""
    respx_mock.post(upstream_url).mock(side_effect=httpx.ConnectError("connection refused"))

    result = await upstream_client.generate(text_payload)

    assert isinstance(result, UpstreamFailure)
    assert result.reason == "transport_error"
    assert result.status_code is None
    assert "ConnectError" in result.detail


@pytest.mark.asyncio
async def test_timeout_is_failure(
    upstream_client: UpstreamClient, respx_mock: MockRouter, upstream_url: str, text_payload
) -> None:
    """Timeouts are reported as their own failure reason."""
    respx_mock.post(upstream_url).mock(side_effect=httpx.ReadTimeout("slow"))

    result = await upstream_client.generate(text_payload)

    assert isinstance(result, UpstreamFailure)
    assert result.reason == "timeout"


@pytest.mark.asyncio
async def test_malformed_body_is_failure(
    upstream_client: UpstreamClient, respx_mock: MockRouter, upstream_url: str, text_payload
) -> None:
    """A 2xx response that is not JSON is a failure."""
    respx_mock.post(upstream_url).mock(
        return_value=httpx.Response(200, content=b"<html>gateway</html>")
    )

    result = await upstream_client.generate(text_payload)

    assert isinstance(result, UpstreamFailure)
    assert result.reason == "malformed_response"
    assert result.status_code == 200


@pytest.mark.asyncio
async def test_error_detail_is_bounded(
    upstream_client: UpstreamClient, respx_mock: MockRouter, upstream_url: str, text_payload
) -> None:
    """Very large error bodies are truncated before logging."""
    respx_mock.post(upstream_url).mock(return_value=httpx.Response(500, text="x" * 10_000))

    result = await upstream_client.generate(text_payload)

    assert isinstance(result, UpstreamFailure)
    assert len(result.detail) == 500


def test_endpoint_property(test_config: GatewayConfig) -> None:
    """The client posts to the configured endpoint."""
    client = UpstreamClient(test_config, httpx.AsyncClient())
    assert client.endpoint == test_config.upstream_endpoint
