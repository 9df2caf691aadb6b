"""Shared configuration models for dasync services.

Examples:
    ```yaml
    remote:
      host: mt-batcher.internal
      port: 8080
      timeout: 15.0
    ```
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class RemoteConfig(BaseModel):
    """Connection settings for the remote data-availability API.

    Attributes:
        scheme: URL scheme of the API.
        host: API hostname.
        port: API port.
        timeout: Total per-request timeout in seconds.
        connect_timeout: Connection timeout in seconds (capped to ``timeout``).
        max_response_size: Maximum response body size in bytes.
        latest_index_fallback: Value used when the latest batch index cannot
            be fetched. ``None`` makes that failure a transport error.

    See Also:
        [DaClient][dasync.services.common.client.DaClient]: The client built
            from this configuration.
    """

    scheme: Literal["http", "https"] = Field(default="http", description="URL scheme")
    host: str = Field(default="localhost", min_length=1, description="Remote API hostname")
    port: int = Field(default=8080, ge=1, le=65535, description="Remote API port")
    timeout: float = Field(default=30.0, ge=0.1, le=300.0, description="Request timeout")
    connect_timeout: float = Field(
        default=10.0,
        ge=0.1,
        le=60.0,
        description="HTTP connection timeout (capped to total timeout)",
    )
    max_response_size: int = Field(
        default=52_428_800,
        ge=1024,
        le=524_288_000,
        description="Maximum response body size in bytes (default: 50 MB)",
    )
    latest_index_fallback: int | None = Field(
        default=None,
        ge=0,
        description="Latest batch index to assume when the remote call fails (None = raise)",
    )

    @property
    def base_url(self) -> str:
        """Root URL all endpoint paths are appended to."""
        return f"{self.scheme}://{self.host}:{self.port}"
