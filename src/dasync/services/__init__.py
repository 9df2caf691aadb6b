"""Service implementations built on [BaseService][dasync.core.base_service.BaseService].

Attributes:
    DaIngestion: Mirrors rollup batches from the data-availability layer
        into the local store.
"""

from .ingestion import DaIngestion, DaIngestionConfig


__all__ = [
    "DaIngestion",
    "DaIngestionConfig",
]
