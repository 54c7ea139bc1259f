"""Shared pytest fixtures for promptgate tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from promptgate.api.main import create_app
from promptgate.core.config import GatewayConfig

TEST_API_KEY = "test-secret-key-123"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path) -> None:
    """Keep tests independent of the developer's environment.

    Removes any PROMPTGATE_* variables and runs each test from an empty
    directory so no stray ``.env`` file is picked up.
    """
    for name in list(os.environ):
        if name.upper().startswith("PROMPTGATE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def test_config() -> GatewayConfig:
    """Create a gateway configuration with a dummy credential.

    Returns:
        GatewayConfig instance for testing
    """
    return GatewayConfig(api_key=TEST_API_KEY, _env_file=None)


@pytest.fixture
def upstream_url(test_config: GatewayConfig) -> str:
    """Full URL of the upstream generateContent endpoint."""
    return test_config.upstream_endpoint


@pytest.fixture
def test_client(test_config: GatewayConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient with the lifespan (and upstream client) running.

    Upstream calls go through the real httpx transport, so tests mock them
    with the ``respx_mock`` fixture.
    """
    app = create_app(test_config)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    """Create a small PNG image on disk.

    Returns:
        Path to the PNG file
    """
    path = tmp_path / "photo.png"
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(path, format="PNG")
    return path


@pytest.fixture
def damaged_png_file(tmp_path: Path) -> Path:
    """Create a PNG whose last IDAT chunk fails its CRC check."""
    path = tmp_path / "damaged.png"
    Image.new("RGB", (32, 32), color=(10, 20, 30)).save(path, format="PNG")
    raw = bytearray(path.read_bytes())
    # The final 12 bytes are IEND; -20 falls inside the last IDAT payload.
    raw[-20] ^= 0xFF
    path.write_bytes(bytes(raw))
    return path


@pytest.fixture
def jpeg_file(tmp_path: Path) -> Path:
    """Create a small JPEG image on disk with a misleading extension."""
    path = tmp_path / "photo.png.bin"
    Image.new("RGB", (8, 8), color=(30, 200, 30)).save(path, format="JPEG")
    return path


@pytest.fixture
def gemini_response() -> dict:
    """Typical successful generateContent response body."""
    return {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [{"text": "A red square on a plain background."}],
                },
                "finishReason": "STOP",
                "index": 0,
            }
        ],
        "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 9},
        "modelVersion": "gemini-2.0-flash",
    }
