"""Tests for lazy import system in dasync.__init__."""

from __future__ import annotations

import pytest


class TestLazyImports:
    """Test PEP 562 lazy loading in dasync.__init__."""

    def test_lazy_import_resolves_on_access(self) -> None:
        """Verify that lazy attributes resolve to the defining module's objects."""
        from dasync import DaIngestion, Store
        from dasync.core.store import Store as DirectStore
        from dasync.services.ingestion.service import DaIngestion as DirectDaIngestion

        assert Store is DirectStore
        assert DaIngestion is DirectDaIngestion

    def test_lazy_import_caches_after_first_access(self) -> None:
        """Verify that resolved attributes are cached in globals."""
        import dasync

        _ = dasync.TransactionEntry

        assert "TransactionEntry" in vars(dasync)

    def test_lazy_import_invalid_attribute(self) -> None:
        """Verify that invalid attributes raise AttributeError."""
        import dasync

        with pytest.raises(AttributeError, match="no_such_thing"):
            _ = getattr(dasync, "no_such_thing")  # noqa: B009

    def test_all_exports_are_in_lazy_imports(self) -> None:
        """Verify that __all__ and _LAZY_IMPORTS are in sync."""
        import dasync

        assert set(dasync.__all__) == set(dasync._LAZY_IMPORTS)

    def test_version(self) -> None:
        import dasync

        assert dasync.__version__ == "0.1.0"
