"""CLI entry point for the dasync ingestion service.

Runs the service in one-shot mode (``--once``) or continuously with a
Prometheus metrics server.

Examples:
    ```bash
    python -m dasync
    python -m dasync --once
    python -m dasync --create-schema --log-level DEBUG
    python -m dasync --config config/services/da_ingestion.yaml
    ```
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any

from dasync.core import Store, start_metrics_server
from dasync.core.exceptions import DatabaseError
from dasync.core.logger import Logger, StructuredFormatter
from dasync.core.yaml import load_yaml
from dasync.models.constants import ServiceName
from dasync.services.ingestion import DaIngestion, DaIngestionConfig


CONFIG_BASE = Path("config")
STORE_CONFIG = CONFIG_BASE / "store.yaml"
SERVICE_CONFIG = CONFIG_BASE / "services" / f"{ServiceName.DA_INGESTION}.yaml"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

logger = Logger("cli")


async def run_service(
    store: Store,
    service_dict: dict[str, Any],
    *,
    once: bool,
    create_schema: bool,
) -> int:
    """Run the ingestion service in one-shot or continuous mode.

    Args:
        store: Connected store.
        service_dict: Parsed service configuration (without ``pool`` key).
        once: If True, run a single cycle and exit.
        create_schema: If True, create the storage table before starting.

    Returns:
        Exit code: 0 for success, 1 for failure.
    """
    if create_schema:
        await store.create_schema()

    if service_dict:
        service = DaIngestion.from_dict(service_dict, store=store)
    else:
        service = DaIngestion(store=store)

    name = service.SERVICE_NAME

    # One-shot mode: single cycle, no metrics server
    if once:
        try:
            async with service:
                await service.run()
            logger.info(f"{name}_completed")
            return EXIT_OK
        except Exception as e:  # CLI error boundary for one-shot mode
            logger.error(f"{name}_failed", error=str(e), error_type=type(e).__name__)
            return EXIT_FAILURE

    metrics_config = service.config.metrics
    metrics_server = await start_metrics_server(metrics_config)

    if metrics_config.enabled:
        logger.info(
            "metrics_server_started",
            host=metrics_config.host,
            port=metrics_config.port,
            path=metrics_config.path,
        )

    def handle_signal(sig: signal.Signals) -> None:
        logger.info("shutdown_signal", signal=sig.name)
        service.request_shutdown()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal, sig)

    try:
        async with service:
            await service.run_forever()
        return EXIT_OK
    except Exception as e:  # CLI error boundary for continuous mode
        logger.error(f"{name}_failed", error=str(e), error_type=type(e).__name__)
        return EXIT_FAILURE
    finally:
        await metrics_server.stop()
        if metrics_config.enabled:
            logger.info("metrics_server_stopped")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="dasync",
        description="Rollup batch synchronization from a data-availability layer",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=SERVICE_CONFIG,
        help=f"Service config path (default: {SERVICE_CONFIG})",
    )

    parser.add_argument(
        "--store-config",
        type=Path,
        default=STORE_CONFIG,
        help=f"Store config path (default: {STORE_CONFIG})",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run one sync pass and exit (default: run continuously)",
    )

    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create the storage table if missing before starting",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install a ``StructuredFormatter`` on the root handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def _load_yaml_dict(path: Path) -> dict[str, Any]:
    """Load a YAML file as a dict, returning ``{}`` if the file does not exist."""
    if not path.exists():
        logger.warning("config_not_found", path=str(path))
        return {}
    return load_yaml(str(path))


def _apply_pool_overrides(store_dict: dict[str, Any], pool_overrides: dict[str, Any] | None) -> None:
    """Merge service-level pool overrides into the store configuration.

    ``user`` and ``password_env`` go to ``pool.database``, ``min_size`` and
    ``max_size`` to ``pool.limits``. ``application_name`` defaults to the
    service name.
    """
    pool = store_dict.setdefault("pool", {})

    server_settings = pool.setdefault("server_settings", {})
    if "application_name" not in server_settings:
        server_settings["application_name"] = str(ServiceName.DA_INGESTION)

    if not pool_overrides:
        return

    if "application_name" in pool_overrides:
        server_settings["application_name"] = pool_overrides["application_name"]

    db_overrides = {k: pool_overrides[k] for k in ("user", "password_env") if k in pool_overrides}
    if db_overrides:
        pool.setdefault("database", {}).update(db_overrides)

    limits_overrides = {
        k: pool_overrides[k] for k in ("min_size", "max_size") if k in pool_overrides
    }
    if limits_overrides:
        pool.setdefault("limits", {}).update(limits_overrides)


async def main(argv: list[str] | None = None) -> int:
    """Parse args, build the store and run the service."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        store_dict = _load_yaml_dict(args.store_config)
        service_dict = _load_yaml_dict(args.config)
        _apply_pool_overrides(store_dict, service_dict.pop("pool", None))
        DaIngestionConfig.model_validate(service_dict)
        store = Store.from_dict(store_dict)
    except Exception as e:  # Invalid configuration
        logger.error("config_invalid", error=str(e), error_type=type(e).__name__)
        return EXIT_FAILURE

    try:
        async with store:
            return await run_service(
                store,
                service_dict,
                once=args.once,
                create_schema=args.create_schema,
            )
    except DatabaseError as e:
        logger.error("connection_failed", error=str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("interrupted")
        return EXIT_INTERRUPTED


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
