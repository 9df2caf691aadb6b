"""Core layer providing the foundation for dasync services.

Sits between ``dasync.models`` (below) and ``dasync.services`` (above).

Attributes:
    Pool: Async PostgreSQL connection pool with retry/backoff.
        See [Pool][dasync.core.pool.Pool].
    Store: Persistence contract over a namespaced key-value table.
        Services use [Store][dasync.core.store.Store], never
        [Pool][dasync.core.pool.Pool] directly.
    BaseService: Abstract generic base class with lifecycle management,
        error-kind dispatch and Prometheus metrics integration.
    Logger: Structured logger supporting key=value and JSON output modes.
    MetricsServer: Prometheus ``/metrics`` HTTP endpoint.
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.

Examples:
    ```python
    from dasync.core import Store

    store = Store.from_yaml("config/store.yaml")
    async with store:
        checkpoint = await store.get_last_batch_index()
    ```
"""

from .base_service import (
    BaseService,
    BaseServiceConfig,
    ConfigT,
)
from .exceptions import (
    ConfigurationError,
    ConnectionPoolError,
    DatabaseError,
    DaSyncError,
    ErrorKind,
    MissingElementError,
    PayloadError,
    QueryError,
    TransportError,
    error_kind,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .metrics import (
    CYCLE_DURATION_SECONDS,
    SERVICE_COUNTER,
    SERVICE_GAUGE,
    SERVICE_INFO,
    MetricsConfig,
    MetricsServer,
    start_metrics_server,
)
from .pool import (
    DatabaseConfig,
    Pool,
    PoolConfig,
    PoolLimitsConfig,
    PoolRetryConfig,
    PoolTimeoutsConfig,
    ServerSettingsConfig,
)
from .store import (
    BatchConfig,
    Store,
    StoreConfig,
    StoreTimeoutsConfig,
)
from .yaml import load_yaml


__all__ = [
    "CYCLE_DURATION_SECONDS",
    "SERVICE_COUNTER",
    "SERVICE_GAUGE",
    "SERVICE_INFO",
    "BaseService",
    "BaseServiceConfig",
    "BatchConfig",
    "ConfigT",
    "ConfigurationError",
    "ConnectionPoolError",
    "DaSyncError",
    "DatabaseConfig",
    "DatabaseError",
    "ErrorKind",
    "Logger",
    "MetricsConfig",
    "MetricsServer",
    "MissingElementError",
    "PayloadError",
    "Pool",
    "PoolConfig",
    "PoolLimitsConfig",
    "PoolRetryConfig",
    "PoolTimeoutsConfig",
    "QueryError",
    "ServerSettingsConfig",
    "Store",
    "StoreConfig",
    "StoreTimeoutsConfig",
    "StructuredFormatter",
    "TransportError",
    "error_kind",
    "format_kv_pairs",
    "load_yaml",
    "start_metrics_server",
]
