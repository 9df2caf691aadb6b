"""
Unit tests for core.metrics module.

Tests:
- MetricsConfig defaults and validation
- MetricsServer start/stop lifecycle
- start_metrics_server helper
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import ValidationError

from dasync.core.metrics import (
    SERVICE_COUNTER,
    SERVICE_GAUGE,
    MetricsConfig,
    MetricsServer,
    start_metrics_server,
)


class TestMetricsConfig:
    """MetricsConfig Pydantic model."""

    def test_defaults(self) -> None:
        config = MetricsConfig()
        assert config.enabled is False
        assert config.port == 7878
        assert config.host == "127.0.0.1"
        assert config.path == "/metrics"

    @pytest.mark.parametrize("port", [80, 70000])
    def test_port_bounds(self, port: int) -> None:
        with pytest.raises(ValidationError):
            MetricsConfig(port=port)


class TestMetricsServer:
    """Server lifecycle."""

    async def test_disabled_does_not_bind(self) -> None:
        server = MetricsServer(MetricsConfig(enabled=False))
        with patch("dasync.core.metrics.web.AppRunner") as runner_cls:
            await server.start()
        runner_cls.assert_not_called()
        assert not server.is_running

    async def test_start_and_stop(self) -> None:
        server = MetricsServer(MetricsConfig(enabled=True, port=7979))
        runner = MagicMock()
        runner.setup = AsyncMock()
        runner.cleanup = AsyncMock()
        site = MagicMock()
        site.start = AsyncMock()
        with (
            patch("dasync.core.metrics.web.AppRunner", return_value=runner),
            patch("dasync.core.metrics.web.TCPSite", return_value=site) as site_cls,
        ):
            await server.start()
            assert server.is_running
            site_cls.assert_called_once_with(runner, "127.0.0.1", 7979)

        await server.stop()
        runner.cleanup.assert_awaited_once()
        assert not server.is_running

    async def test_stop_idempotent(self) -> None:
        server = MetricsServer(MetricsConfig())
        await server.stop()
        await server.stop()

    async def test_handler_returns_exposition(self) -> None:
        SERVICE_GAUGE.labels(service="test", name="synced_batch_index").set(12)
        SERVICE_COUNTER.labels(service="test", name="batches_processed").inc()
        response = await MetricsServer._handle_metrics(MagicMock())
        body = response.body.decode()
        assert response.headers["Content-Type"] == CONTENT_TYPE_LATEST
        assert "dasync_service_gauge" in body
        assert 'name="synced_batch_index"' in body
        assert "dasync_service_counter_total" in body


class TestStartMetricsServer:
    """start_metrics_server() helper."""

    async def test_defaults_to_disabled(self) -> None:
        server = await start_metrics_server()
        assert isinstance(server, MetricsServer)
        assert not server.is_running
