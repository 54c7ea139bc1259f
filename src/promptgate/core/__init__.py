"""Core configuration and upstream transport.

- **GatewayConfig / ComposerConfig**: Pydantic Settings loaded from
  ``PROMPTGATE_*`` environment variables
- **UpstreamClient**: the single outbound call to the generation API,
  returning an explicit success/failure result
"""

from promptgate.core.config import (
    ComposerConfig,
    ConfigurationError,
    GatewayConfig,
    load_composer_config,
    load_gateway_config,
)
from promptgate.core.upstream import (
    UpstreamClient,
    UpstreamFailure,
    UpstreamResult,
    UpstreamSuccess,
)

__all__ = [
    "ComposerConfig",
    "ConfigurationError",
    "GatewayConfig",
    "load_composer_config",
    "load_gateway_config",
    "UpstreamClient",
    "UpstreamFailure",
    "UpstreamResult",
    "UpstreamSuccess",
]
