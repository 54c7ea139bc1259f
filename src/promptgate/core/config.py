"""Configuration management for promptgate.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PROMPTGATE_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PROMPTGATE_* prefix)
2. .env file in the working directory
3. Default values defined on the settings classes

Example .env file:
    PROMPTGATE_API_KEY=...
    PROMPTGATE_MODEL_NAME=gemini-2.0-flash
    PROMPTGATE_SERVER_PORT=8000

Two Settings Classes
--------------------
The gateway and the composer run as separate processes and read separate
settings:

- ``GatewayConfig`` holds the upstream credential.  It is only ever built by
  the gateway process.
- ``ComposerConfig`` holds the gateway URL and UI server options.  It has no
  credential field, so the composer can never read or display the key.

Both are frozen after construction.  There is no module-level instance:
entry points call :func:`load_gateway_config` or
:func:`load_composer_config` once and pass the result down.

Usage Example
-------------
    from promptgate.core.config import load_gateway_config

    config = load_gateway_config()
    print(config.upstream_endpoint)
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or invalid at startup."""


class GatewayConfig(BaseSettings):
    """Settings for the gateway process.

    Attributes
    ----------
    Upstream Credential:
        api_key : SecretStr
            Secret credential for the external AI service (required)
        api_key_header : str
            Header that carries the credential
        api_key_scheme : str
            Optional scheme prefixed to the key (e.g. ``Bearer``)

    Upstream Endpoint:
        upstream_base_url : str
            Base URL of the generation API
        model_name : str
            Model whose ``generateContent`` endpoint is called
        upstream_timeout : float
            Transport timeout ceiling in seconds for the single upstream call

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        cors_allow_origins : list[str]
            Origins allowed by the CORS middleware
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root logging level

    Notes
    -----
    - ``api_key`` has no default; construction fails without it
    - ``repr()`` masks the key because it is a ``SecretStr``
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMPTGATE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Upstream credential
    api_key: SecretStr = Field(
        ...,
        description="Secret credential for the external AI service",
    )
    api_key_header: str = Field(
        default="x-goog-api-key",
        description="Header name used to send the credential upstream",
    )
    api_key_scheme: str = Field(
        default="",
        description="Optional scheme prefixed to the key, e.g. 'Bearer'",
    )

    # Upstream endpoint
    upstream_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generation API",
    )
    model_name: str = Field(
        default="gemini-2.0-flash",
        description="Model whose generateContent endpoint is called",
    )
    upstream_timeout: float = Field(
        default=120.0,
        description="Transport timeout ceiling (seconds) for the upstream call",
        gt=0,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=8000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )
    log_level: LogLevel = Field(default="INFO")

    @field_validator("api_key")
    @classmethod
    def _reject_blank_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("api_key must not be blank")
        return value

    @property
    def upstream_endpoint(self) -> str:
        """Full URL of the model's ``generateContent`` endpoint."""
        return f"{self.upstream_base_url.rstrip('/')}/models/{self.model_name}:generateContent"

    def auth_headers(self) -> dict[str, str]:
        """Return the credential header to attach to upstream requests."""
        key = self.api_key.get_secret_value()
        value = f"{self.api_key_scheme} {key}" if self.api_key_scheme else key
        return {self.api_key_header: value}


class ComposerConfig(BaseSettings):
    """Settings for the Gradio composer process.

    Attributes
    ----------
    gateway_url : str
        Full URL of the gateway's generate route
    request_timeout : float
        Timeout in seconds for the call to the gateway
    ui_server_name : str
        Gradio bind address
    ui_server_port : int
        Gradio port (1024-65535)
    ui_share : bool
        Create public gradio.live link (keep False for local-only)
    log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
        Root logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMPTGATE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    gateway_url: str = Field(
        default="http://127.0.0.1:8000/api/generate",
        description="Gateway generate route",
    )
    request_timeout: float = Field(
        default=120.0,
        description="Timeout (seconds) for the call to the gateway",
        gt=0,
    )
    ui_server_name: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    ui_server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    ui_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )
    log_level: LogLevel = Field(default="INFO")


def load_gateway_config(**overrides) -> GatewayConfig:
    """Build the gateway configuration, failing fast when it is unusable.

    Args:
        **overrides: Explicit field values that take precedence over the
            environment (mainly for tests).

    Returns:
        A frozen :class:`GatewayConfig`.

    Raises:
        ConfigurationError: If the credential is missing or any field is
            invalid.  The message names the offending fields but never
            includes their values.
    """
    try:
        return GatewayConfig(**overrides)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(
            f"Invalid gateway configuration ({fields}). "
            "Set PROMPTGATE_API_KEY in the environment or .env file."
        ) from None


def load_composer_config(**overrides) -> ComposerConfig:
    """Build the composer configuration.

    Raises:
        ConfigurationError: If any field is invalid.
    """
    try:
        return ComposerConfig(**overrides)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(f"Invalid composer configuration ({fields}).") from None
