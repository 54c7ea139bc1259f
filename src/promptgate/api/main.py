"""promptgate: FastAPI gateway application.

This module defines the application factory, the REST routes, and the
``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The gateway is a stateless relay:

- **Configuration** is a frozen :class:`~promptgate.core.config.GatewayConfig`
  passed to :func:`create_app`.  The credential never leaves the server.
- **Validation** happens at the boundary: FastAPI parses the body into
  :class:`~promptgate.api.models.PromptRequest`.
- **Forwarding** is performed by :class:`~promptgate.core.upstream.UpstreamClient`,
  which returns an explicit success/failure result.
- **Error mapping** collapses every failure to a generic 500.  Upstream error
  detail is logged and never relayed.

Endpoints
---------
========  ==================  =========================================
Method    Path                Purpose
========  ==================  =========================================
GET       ``/``               Landing page
GET       ``/api/health``     Liveness check
GET       ``/api/config``     Non-secret settings for the frontend
POST      ``/api/generate``   Relay a prompt (and image) upstream
========  ==================  =========================================

Any other method on ``/api/generate`` answers 405
``{"message": "Method not allowed"}`` without contacting the upstream.

Usage
-----
CLI (installed entry point)::

    promptgate

Direct invocation::

    python -m promptgate.api.main
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from promptgate import __version__
from promptgate.api.models import (
    INTERNAL_SERVER_ERROR,
    METHOD_NOT_ALLOWED,
    SUPPORTED_IMAGE_MIME_TYPES,
    PromptRequest,
)
from promptgate.api.payload_builder import build_upstream_payload
from promptgate.core.config import ConfigurationError, GatewayConfig, load_gateway_config
from promptgate.core.upstream import UpstreamClient, UpstreamSuccess

logger = logging.getLogger(__name__)

TEMPLATES_DIR: Path = Path(__file__).resolve().parent.parent / "templates"


def create_app(
    config: GatewayConfig,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the gateway application.

    Args:
        config: Frozen gateway configuration, including the credential.
        http_client: Optional pre-built ``httpx.AsyncClient`` for the upstream
            call.  When omitted, the lifespan creates one with the configured
            timeout and closes it on shutdown.

    Returns:
        The configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the upstream client on startup and close it on shutdown."""
        # --- Startup -------------------------------------------------------
        owned = http_client is None
        client = http_client or httpx.AsyncClient(timeout=config.upstream_timeout)
        app.state.upstream = UpstreamClient(config, client)
        logger.info(f"Gateway ready (upstream={app.state.upstream.endpoint}).")

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        if owned:
            await client.aclose()
        logger.info("Gateway upstream client closed on shutdown.")

    app = FastAPI(
        title="promptgate",
        description="Server-side relay to a generative-AI API.",
        version=__version__,
        lifespan=lifespan,
    )

    # Allow cross-origin requests so a frontend served from another port can
    # reach the gateway.  Restrict ``cors_allow_origins`` in production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Error mapping.
    # -----------------------------------------------------------------------

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        """Give 405s the gateway's structured body; defer everything else."""
        if exc.status_code == 405:
            return METHOD_NOT_ALLOWED.to_response(headers=exc.headers)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> Response:
        """Log any local failure and answer with the generic 500 body."""
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return INTERNAL_SERVER_ERROR.to_response()

    # -----------------------------------------------------------------------
    # Routes.
    # -----------------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Serve the landing page.

        Raises:
            HTTPException: 404 if ``index.html`` is not found.
        """
        index_path = TEMPLATES_DIR / "index.html"
        if index_path.exists():
            return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
        raise HTTPException(status_code=404, detail="index.html not found")

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/api/config")
    async def get_config() -> dict:
        """Return the settings a frontend needs.

        The credential and upstream URL are not included.
        """
        return {
            "version": __version__,
            "model_name": config.model_name,
            "image_mime_types": list(SUPPORTED_IMAGE_MIME_TYPES),
        }

    @app.post("/api/generate")
    async def generate(req: PromptRequest, request: Request) -> Response:
        """Relay one prompt to the upstream service.

        This endpoint:

        1. Compiles the upstream payload (text part, then optional image).
        2. Makes a single upstream call with the server-side credential.
        3. Relays the upstream JSON verbatim on success, or a generic 500.

        Args:
            req: Validated :class:`PromptRequest` payload.
            request: The raw request (for access to ``app.state``).

        Returns:
            200 with the upstream body, or 500 ``{"message": "Internal Server Error"}``.
        """
        request_id = str(uuid.uuid4())
        start_time = time.monotonic()

        payload = build_upstream_payload(req)
        logger.info(
            f"generate request_id={request_id} parts={len(payload.parts)} "
            f"has_image={req.image is not None}"
        )

        upstream: UpstreamClient = request.app.state.upstream
        result = await upstream.generate(payload)
        elapsed_ms = int((time.monotonic() - start_time) * 1000)

        if isinstance(result, UpstreamSuccess):
            logger.info(
                f"generate request_id={request_id} upstream_status={result.status_code} "
                f"elapsed_ms={elapsed_ms}"
            )
            return Response(content=result.body, status_code=200, media_type="application/json")

        logger.error(
            f"generate request_id={request_id} upstream_failure={result.reason} "
            f"upstream_status={result.status_code} elapsed_ms={elapsed_ms} "
            f"detail={result.detail!r}"
        )
        return INTERNAL_SERVER_ERROR.to_response()

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :class:`GatewayConfig` (``PROMPTGATE_SERVER_HOST``
    and ``PROMPTGATE_SERVER_PORT``).  Exits immediately if the credential is
    not configured.

    This function is registered as the ``promptgate`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    try:
        config = load_gateway_config()
    except ConfigurationError as e:
        raise SystemExit(str(e)) from None

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
    )


if __name__ == "__main__":
    main()
