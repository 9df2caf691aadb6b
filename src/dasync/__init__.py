r"""dasync -- rollup batch synchronization from a data-availability layer.

A single async service polls a remote DA API for published rollup
batches, decodes their transactions and mirrors them, with the related
data store metadata, into PostgreSQL.

Imports flow strictly downward:

```text
          services         Sync orchestration, remote client
          /      \
       core      utils     Pool, store, base service / hex, http
          \      /
           models          Pure frozen dataclasses (zero I/O)
```

Note:
    Top-level imports (``from dasync import DaIngestion``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("dasync")

__all__ = [
    "BaseService",
    "ConfigT",
    "DaIngestion",
    "DaIngestionConfig",
    "Logger",
    "Pool",
    "PoolConfig",
    "Store",
    "StoreConfig",
    "TransactionEntry",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "BaseService": ("dasync.core", "BaseService"),
    "ConfigT": ("dasync.core", "ConfigT"),
    "Logger": ("dasync.core", "Logger"),
    "Pool": ("dasync.core", "Pool"),
    "PoolConfig": ("dasync.core", "PoolConfig"),
    "Store": ("dasync.core", "Store"),
    "StoreConfig": ("dasync.core", "StoreConfig"),
    "TransactionEntry": ("dasync.models", "TransactionEntry"),
    "DaIngestion": ("dasync.services", "DaIngestion"),
    "DaIngestionConfig": ("dasync.services", "DaIngestionConfig"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'dasync' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
