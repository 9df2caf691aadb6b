"""DA ingestion service configuration models.

See Also:
    [DaIngestion][dasync.services.ingestion.DaIngestion]: The service class
        that consumes this configuration.
    [BaseServiceConfig][dasync.core.base_service.BaseServiceConfig]:
        Base class providing the interval, failure and metrics fields.
"""

from __future__ import annotations

from pydantic import Field

from dasync.core.base_service import BaseServiceConfig
from dasync.services.common.configs import RemoteConfig


class DaIngestionConfig(BaseServiceConfig):
    """DA ingestion service configuration.

    Examples:
        ```yaml
        polling_interval: 5000
        sync_step: 10
        init_batch_index: 0
        l2_chain_id: 5000
        remote:
          host: mt-batcher
          port: 8080
        ```
    """

    sync_step: int = Field(default=10, ge=1, description="Maximum batch indices per pass")
    init_batch_index: int = Field(
        default=0, ge=0, description="Checkpoint written on first start"
    )
    l2_chain_id: int = Field(default=5000, ge=0, description="Chain id used to normalize v")
    strict_enqueue: bool = Field(
        default=False,
        description="Treat a missing enqueue entry as a missing element instead of using defaults",
    )
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
