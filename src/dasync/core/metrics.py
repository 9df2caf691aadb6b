"""
Prometheus metrics collection and HTTP exposition.

Defines module-level metric objects (singletons, thread-safe) shared by
every service. [BaseService.run_forever()][dasync.core.base_service.BaseService.run_forever]
records pass durations and failure streaks automatically; services add
their own values through ``set_gauge()`` and ``inc_counter()``.

The ``MetricsServer`` exposes the registry on an aiohttp endpoint for
Prometheus scraping. ``MetricsConfig`` can be embedded in any service's
YAML configuration.

Architecture:
    SERVICE_INFO:            Static metadata set once at startup.
    SERVICE_GAUGE:           Point-in-time values (e.g. synced_batch_index).
    SERVICE_COUNTER:         Cumulative totals (e.g. missing_element_count).
    CYCLE_DURATION_SECONDS:  Histogram of sync pass durations.
"""

from __future__ import annotations

from aiohttp import web
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from pydantic import BaseModel, Field


class MetricsConfig(BaseModel):
    """Configuration for the Prometheus metrics endpoint.

    Set ``host`` to ``"0.0.0.0"`` in container environments to allow
    external scraping. The endpoint is only started when ``enabled``
    is True.
    """

    enabled: bool = Field(default=False, description="Enable metrics collection")
    port: int = Field(default=7878, ge=1024, le=65535, description="Metrics HTTP port")
    host: str = Field(default="127.0.0.1", description="Metrics HTTP bind address")
    path: str = Field(default="/metrics", description="Metrics endpoint path")


SERVICE_INFO = Info(
    "dasync_service",
    "Service information and metadata",
)

# Sync passes are short (one window of remote calls), hence the sub-second buckets
CYCLE_DURATION_SECONDS = Histogram(
    "dasync_cycle_duration_seconds",
    "Duration of one sync pass in seconds",
    ["service"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60, 120),
)


# Labels set by BaseService.run_forever:
#   gauge:   consecutive_failures, last_cycle_timestamp
#   counter: cycles_success, missing_element_count, unhandled_error_count,
#            errors_{type}
# Labels set by the ingestion service:
#   gauge:   synced_batch_index
#   counter: batches_processed, transactions_synced, transport_error_count

SERVICE_GAUGE = Gauge(
    "dasync_service_gauge",
    "Service gauge values (point-in-time state)",
    ["service", "name"],
)

SERVICE_COUNTER = Counter(
    "dasync_service_counter",
    "Service counter values (cumulative totals)",
    ["service", "name"],
)


class MetricsServer:
    """Async HTTP server exposing a Prometheus-compatible endpoint.

    Example:
        server = MetricsServer(MetricsConfig(enabled=True, port=7879))
        await server.start()
        # ... service runs ...
        await server.stop()
    """

    def __init__(self, config: MetricsConfig) -> None:
        self._config = config
        self._runner: web.AppRunner | None = None

    @property
    def is_running(self) -> bool:
        """Whether the HTTP endpoint is currently bound."""
        return self._runner is not None

    async def start(self) -> None:
        """Start listening for Prometheus scrape requests.

        No-op if metrics are disabled in the configuration.

        Raises:
            OSError: If the port is already in use or binding fails.
        """
        if not self._config.enabled or self._runner is not None:
            return

        app = web.Application()
        app.router.add_get(self._config.path, self._handle_metrics)

        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self._config.host, self._config.port)
        await site.start()
        self._runner = runner

    async def stop(self) -> None:
        """Stop the HTTP server and release resources. Idempotent."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    @staticmethod
    async def _handle_metrics(_request: web.Request) -> web.Response:
        """Serve the latest Prometheus metrics in exposition format."""
        return web.Response(
            body=generate_latest(),
            headers={"Content-Type": CONTENT_TYPE_LATEST},
        )


async def start_metrics_server(config: MetricsConfig | None = None) -> MetricsServer:
    """Create and start a metrics server.

    Args:
        config: Metrics configuration. Uses defaults if not provided.

    Returns:
        A MetricsServer instance; callers should ``stop()`` it on shutdown.
    """
    server = MetricsServer(config or MetricsConfig())
    await server.start()
    return server
