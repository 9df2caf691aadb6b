"""DA ingestion service package.

Re-exports all public symbols::

    from dasync.services.ingestion import DaIngestion, DaIngestionConfig
"""

from .configs import DaIngestionConfig
from .decoder import decode_signed_fields, decode_transaction
from .planner import plan_range
from .processor import BatchProcessor
from .service import DaIngestion


__all__ = [
    "BatchProcessor",
    "DaIngestion",
    "DaIngestionConfig",
    "decode_signed_fields",
    "decode_transaction",
    "plan_range",
]
