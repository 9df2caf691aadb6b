"""
Unit tests for the dasync CLI entry point.

Tests:
- Argument parsing defaults and flags
- Service-level pool overrides merged into the store configuration
- run_service() one-shot mode and schema creation
- main() exit codes for invalid store or service configuration and database failures
"""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from dasync.__main__ import (
    EXIT_FAILURE,
    EXIT_OK,
    SERVICE_CONFIG,
    STORE_CONFIG,
    _apply_pool_overrides,
    _load_yaml_dict,
    main,
    parse_args,
    run_service,
)
from dasync.core.exceptions import ConnectionPoolError


class TestParseArgs:
    """Command-line parsing."""

    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.config == SERVICE_CONFIG
        assert args.store_config == STORE_CONFIG
        assert args.log_level == "INFO"
        assert args.once is False
        assert args.create_schema is False

    def test_flags(self) -> None:
        args = parse_args(
            ["--once", "--create-schema", "--log-level", "DEBUG", "--config", "x.yaml"]
        )
        assert args.once is True
        assert args.create_schema is True
        assert args.log_level == "DEBUG"
        assert args.config == Path("x.yaml")

    def test_invalid_log_level(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "TRACE"])


class TestPoolOverrides:
    """_apply_pool_overrides()."""

    def test_application_name_defaults_to_service(self) -> None:
        store_dict: dict[str, Any] = {}
        _apply_pool_overrides(store_dict, None)
        assert store_dict["pool"]["server_settings"]["application_name"] == "da_ingestion"

    def test_existing_application_name_kept(self) -> None:
        store_dict: dict[str, Any] = {"pool": {"server_settings": {"application_name": "mine"}}}
        _apply_pool_overrides(store_dict, {})
        assert store_dict["pool"]["server_settings"]["application_name"] == "mine"

    def test_overrides_routed(self) -> None:
        store_dict: dict[str, Any] = {"pool": {"database": {"host": "pg"}}}
        overrides = {
            "user": "writer",
            "password_env": "WRITER_PASS",
            "max_size": 3,
            "application_name": "x",
        }
        _apply_pool_overrides(store_dict, overrides)
        pool = store_dict["pool"]
        assert pool["database"] == {"host": "pg", "user": "writer", "password_env": "WRITER_PASS"}
        assert pool["limits"] == {"max_size": 3}
        assert pool["server_settings"]["application_name"] == "x"


class TestLoadYamlDict:
    """_load_yaml_dict()."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert _load_yaml_dict(tmp_path / "absent.yaml") == {}

    def test_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "service.yaml"
        path.write_text("sync_step: 3\n")
        assert _load_yaml_dict(path) == {"sync_step": 3}


class TestRunService:
    """run_service() one-shot mode."""

    async def test_once_runs_single_cycle(self, store_double: MagicMock) -> None:
        store_double.create_schema = AsyncMock()
        with patch("dasync.__main__.DaIngestion") as service_cls:
            service = service_cls.from_dict.return_value
            service.SERVICE_NAME = "da_ingestion"
            service.__aenter__ = AsyncMock(return_value=service)
            service.__aexit__ = AsyncMock(return_value=None)
            service.run = AsyncMock(return_value=True)

            code = await run_service(
                store_double, {"sync_step": 3}, once=True, create_schema=True
            )

        assert code == EXIT_OK
        store_double.create_schema.assert_awaited_once()
        service_cls.from_dict.assert_called_once_with({"sync_step": 3}, store=store_double)
        service.run.assert_awaited_once()

    async def test_once_failure_exit_code(self, store_double: MagicMock) -> None:
        with patch("dasync.__main__.DaIngestion") as service_cls:
            service = service_cls.return_value
            service.SERVICE_NAME = "da_ingestion"
            service.__aenter__ = AsyncMock(return_value=service)
            service.__aexit__ = AsyncMock(return_value=None)
            service.run = AsyncMock(side_effect=RuntimeError("boom"))

            code = await run_service(store_double, {}, once=True, create_schema=False)

        assert code == EXIT_FAILURE
        service_cls.assert_called_once_with(store=store_double)


class TestMain:
    """main() exit codes."""

    async def test_missing_password_is_config_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("DB_PASSWORD", raising=False)
        code = await main(
            [
                "--config",
                str(tmp_path / "service.yaml"),
                "--store-config",
                str(tmp_path / "store.yaml"),
            ]
        )
        assert code == EXIT_FAILURE

    async def test_connection_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DB_PASSWORD", "secret")
        with patch(
            "dasync.core.store.Pool.connect",
            new=AsyncMock(side_effect=ConnectionPoolError("refused")),
        ):
            code = await main(
                [
                    "--config",
                    str(tmp_path / "service.yaml"),
                    "--store-config",
                    str(tmp_path / "store.yaml"),
                ]
            )
        assert code == EXIT_FAILURE

    async def test_once_success(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PASSWORD", "secret")
        (tmp_path / "service.yaml").write_text("sync_step: 4\npool:\n  max_size: 2\n")
        with (
            patch("dasync.core.store.Pool.connect", new=AsyncMock()),
            patch("dasync.core.store.Pool.close", new=AsyncMock()),
            patch("dasync.__main__.run_service", new=AsyncMock(return_value=EXIT_OK)) as run,
        ):
            code = await main(
                [
                    "--once",
                    "--config",
                    str(tmp_path / "service.yaml"),
                    "--store-config",
                    str(tmp_path / "store.yaml"),
                ]
            )
        assert code == EXIT_OK
        store, service_dict = run.await_args.args
        assert service_dict == {"sync_step": 4}
        assert store.pool_config.limits.max_size == 2
        assert run.await_args.kwargs == {"once": True, "create_schema": False}

    async def test_invalid_service_config_is_config_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DB_PASSWORD", "secret")
        (tmp_path / "service.yaml").write_text("sync_step: 0\n")
        connect = AsyncMock()
        with (
            patch("dasync.core.store.Pool.connect", new=connect),
            patch("dasync.__main__.run_service", new=AsyncMock()) as run,
        ):
            code = await main(
                [
                    "--config",
                    str(tmp_path / "service.yaml"),
                    "--store-config",
                    str(tmp_path / "store.yaml"),
                ]
            )
        assert code == EXIT_FAILURE
        connect.assert_not_awaited()
        run.assert_not_awaited()
