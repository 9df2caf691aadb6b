"""
Abstract base class for long-running dasync services.

``BaseService[ConfigT]`` provides the standard lifecycle for all services:
structured logging via [Logger][dasync.core.logger.Logger], graceful
shutdown via ``asyncio.Event``, interval-based cycling with
[run_forever()][dasync.core.base_service.BaseService.run_forever], and
automatic Prometheus metrics tracking via
[MetricsServer][dasync.core.metrics.MetricsServer].

Failures raised by a cycle are handled by their
[ErrorKind][dasync.core.exceptions.ErrorKind] rather than their type:

- ``MISSING_ELEMENT``: warn and retry after the idle interval.
- ``TRANSPORT``: retry after the polling interval, up to
  ``max_consecutive_failures`` in a row; past the limit it is fatal.
- ``FATAL``: swallowed (counted, logged with traceback, retried after the
  polling interval) while shutting down or when
  ``dangerously_catch_all_errors`` is set; otherwise re-raised.

Services persist their progress through
[Store][dasync.core.store.Store] rather than in memory.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, ClassVar, Generic, Self, TypeVar, cast

from pydantic import BaseModel, Field

from dasync.models.constants import ServiceName

from .exceptions import DaSyncError, ErrorKind, error_kind
from .logger import Logger
from .metrics import (
    CYCLE_DURATION_SECONDS,
    SERVICE_COUNTER,
    SERVICE_GAUGE,
    SERVICE_INFO,
    MetricsConfig,
)
from .store import Store
from .yaml import load_yaml


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class BaseServiceConfig(BaseModel):
    """Base configuration shared by all services that run in a loop.

    Intervals are in milliseconds.

    See Also:
        [BaseService][dasync.core.base_service.BaseService]: The abstract
            service class that consumes this configuration.
        [MetricsConfig][dasync.core.metrics.MetricsConfig]: Embedded
            configuration for the Prometheus metrics endpoint.
    """

    polling_interval: int = Field(
        default=5000,
        ge=0,
        description="Milliseconds to wait after a cycle that did work or failed",
    )
    idle_interval: int | None = Field(
        default=None,
        ge=0,
        description="Milliseconds to wait after a cycle with no work (None = polling_interval)",
    )
    max_consecutive_failures: int = Field(
        default=5,
        ge=0,
        description="Transport failures tolerated in a row before they are fatal (0 = unlimited)",
    )
    dangerously_catch_all_errors: bool = Field(
        default=False,
        description="Log and continue on fatal errors instead of stopping",
    )
    metrics: MetricsConfig = Field(
        default_factory=MetricsConfig,
        description="Prometheus metrics configuration",
    )

    @property
    def effective_idle_interval(self) -> int:
        """The idle wait in milliseconds, falling back to the polling interval."""
        return self.polling_interval if self.idle_interval is None else self.idle_interval


ConfigT = TypeVar("ConfigT", bound=BaseServiceConfig)


class BaseService(ABC, Generic[ConfigT]):
    """Abstract base class for all dasync services.

    Subclasses must set ``SERVICE_NAME`` and ``CONFIG_CLASS`` and implement
    [run()][dasync.core.base_service.BaseService.run].

    Attributes:
        SERVICE_NAME: Unique service identifier used in logging and metrics.
        CONFIG_CLASS: Pydantic model class used by the factory methods.
        _store: [Store][dasync.core.store.Store] used for all persistence.
        _config: Typed service configuration (defaults from ``CONFIG_CLASS``).
        _logger: [Logger][dasync.core.logger.Logger] named after the service.
        _shutdown_event: ``asyncio.Event`` controlling the run loop. Clear
            means the service is running; set means shutdown was requested.

    Note:
        The lifecycle pattern is: ``async with store:`` then
        ``async with service:`` then
        [run_forever()][dasync.core.base_service.BaseService.run_forever]
        (or a single [run()][dasync.core.base_service.BaseService.run] call
        with ``--once``).
    """

    SERVICE_NAME: ClassVar[ServiceName]
    CONFIG_CLASS: ClassVar[type[BaseModel]]

    def __init__(self, store: Store, config: ConfigT | None = None) -> None:
        self._store = store
        self._config: ConfigT = (
            config if config is not None else cast("ConfigT", self.CONFIG_CLASS())
        )
        self._logger = Logger(self.SERVICE_NAME)
        self._shutdown_event = asyncio.Event()

    @property
    def config(self) -> ConfigT:
        """The typed service configuration (read-only)."""
        return self._config

    @abstractmethod
    async def run(self) -> bool:
        """Execute one cycle of the service's main logic.

        Returns:
            True if the cycle found work to do, False if it was idle. The
            return value selects the polling or the idle wait.
        """
        ...

    def request_shutdown(self) -> None:
        """Request a graceful shutdown of the service.

        Safe to call from signal handlers. A cycle in progress runs to
        completion; the next wait returns immediately.
        """
        self._shutdown_event.set()

    @property
    def is_running(self) -> bool:
        """Whether the service is still active (shutdown not yet requested)."""
        return not self._shutdown_event.is_set()

    async def wait(self, timeout: float) -> bool:  # noqa: ASYNC109
        """Wait for either a shutdown signal or a timeout (seconds) to elapse.

        Returns ``True`` if shutdown was requested, ``False`` if the timeout
        expired normally. A non-positive timeout does not suspend.
        """
        if timeout <= 0:
            return not self.is_running
        try:
            await asyncio.wait_for(self._shutdown_event.wait(), timeout=timeout)
            return True
        except TimeoutError:
            return False

    async def run_forever(self) -> None:
        """Call [run()][dasync.core.base_service.BaseService.run] until shutdown.

        Metrics tracked automatically: ``cycles_success``,
        ``missing_element_count``, ``unhandled_error_count``,
        ``errors_{ExceptionType}`` (counters),
        ``consecutive_failures``, ``last_cycle_timestamp`` (gauges) and the
        cycle duration histogram.

        ``CancelledError``, ``KeyboardInterrupt`` and ``SystemExit`` always
        propagate immediately.

        Raises:
            Exception: The first fatal error that is not swallowed.
        """
        polling_s = self._config.polling_interval / 1000
        idle_s = self._config.effective_idle_interval / 1000
        max_consecutive_failures = self._config.max_consecutive_failures
        metrics_enabled = self._config.metrics.enabled

        if metrics_enabled:
            SERVICE_INFO.info({"service": self.SERVICE_NAME})

        self._logger.info(
            "run_forever_started",
            polling_interval_ms=self._config.polling_interval,
            idle_interval_ms=self._config.effective_idle_interval,
            max_consecutive_failures=max_consecutive_failures,
        )

        consecutive_failures = 0

        while self.is_running:
            cycle_start = time.monotonic()

            try:
                did_work = await self.run()

                duration = time.monotonic() - cycle_start
                self.inc_counter("cycles_success")
                if metrics_enabled:
                    CYCLE_DURATION_SECONDS.labels(service=self.SERVICE_NAME).observe(duration)
                self.set_gauge("last_cycle_timestamp", time.time())
                self.set_gauge("consecutive_failures", 0)
                consecutive_failures = 0

                delay = polling_s if did_work else idle_s

            except (asyncio.CancelledError, KeyboardInterrupt, SystemExit):
                raise

            except Exception as e:  # Top-level error boundary, dispatched by kind below
                self.inc_counter(f"errors_{type(e).__name__}")
                kind = error_kind(e)

                if kind is ErrorKind.MISSING_ELEMENT:
                    self.inc_counter("missing_element_count")
                    self._logger.warning("missing_element_recovered", error=str(e))
                    delay = idle_s

                elif kind is ErrorKind.TRANSPORT and (
                    max_consecutive_failures == 0
                    or consecutive_failures + 1 < max_consecutive_failures
                ):
                    consecutive_failures += 1
                    self.set_gauge("consecutive_failures", consecutive_failures)
                    self._logger.warning(
                        "transport_error",
                        error=str(e),
                        consecutive_failures=consecutive_failures,
                    )
                    delay = polling_s

                else:
                    if kind is ErrorKind.TRANSPORT:
                        self._logger.critical(
                            "max_consecutive_failures_reached",
                            failures=consecutive_failures + 1,
                            limit=max_consecutive_failures,
                        )
                    if self.is_running and not self._config.dangerously_catch_all_errors:
                        self._logger.critical(
                            "fatal_error", error=str(e), error_type=type(e).__name__
                        )
                        raise
                    self.inc_counter("unhandled_error_count")
                    self._logger.exception(
                        "unhandled_error",
                        error=str(e),
                        error_type=type(e).__name__,
                        code=e.code if isinstance(e, DaSyncError) else None,
                    )
                    delay = polling_s

            if await self.wait(delay):
                break

        self._logger.info("run_forever_stopped")

    # -------------------------------------------------------------------------
    # Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, config_path: str, store: Store, **kwargs: Any) -> Self:
        """Create a service instance from a YAML configuration file."""
        return cls.from_dict(load_yaml(config_path), store=store, **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any], store: Store, **kwargs: Any) -> Self:
        """Create a service instance from a configuration dictionary.

        Args:
            data: Configuration dictionary parsed into ``CONFIG_CLASS``.
            store: [Store][dasync.core.store.Store] used by the service.
            **kwargs: Additional keyword arguments passed to the constructor.
        """
        config = cast("ConfigT", cls.CONFIG_CLASS(**data))
        return cls(store=store, config=config, **kwargs)

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> Self:
        """Mark the service as running on context entry."""
        self._shutdown_event.clear()
        self._logger.info("service_started")
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Signal shutdown on context exit."""
        self._shutdown_event.set()
        self._logger.info("service_stopped")

    # -------------------------------------------------------------------------
    # Custom Metrics
    # -------------------------------------------------------------------------

    def set_gauge(self, name: str, value: float) -> None:
        """Set a named gauge metric for this service. No-op if metrics are disabled."""
        if not self._config.metrics.enabled:
            return
        SERVICE_GAUGE.labels(service=self.SERVICE_NAME, name=name).set(value)

    def inc_counter(self, name: str, value: float = 1) -> None:
        """Increment a named counter metric for this service. No-op if metrics are disabled."""
        if not self._config.metrics.enabled:
            return
        SERVICE_COUNTER.labels(service=self.SERVICE_NAME, name=name).inc(value)
