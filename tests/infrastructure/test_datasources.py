"""Tests for SqlDatasource and DatasourceManager."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from frontline.domain.errors import DatasourceNotFoundError
from frontline.infrastructure.datasources import DatasourceManager, SqlDatasource


class TestSqlDatasource:
    def test_lazy_engine(self) -> None:
        source = SqlDatasource("db", url="sqlite:///:memory:")
        assert not source.is_open
        engine = source.get()
        assert source.is_open
        assert source.engine is engine
        with engine.connect() as conn:
            assert conn.execute(text("SELECT 1")).scalar() == 1

    def test_close(self) -> None:
        source = SqlDatasource("db", url="sqlite:///:memory:")
        source.get()
        source.close()
        assert not source.is_open
        source.close()


class _Unclosable:
    is_default = False

    def close(self) -> None:
        raise OSError("stuck")


class TestDatasourceManager:
    def test_named_lookup(self) -> None:
        source = SqlDatasource("db", url="sqlite:///:memory:")
        manager = DatasourceManager({"db": source})
        assert manager.datasource("db") is source
        assert manager.names() == ["db"]

    def test_unknown_name(self) -> None:
        with pytest.raises(DatasourceNotFoundError, match="'nope'"):
            DatasourceManager().datasource("nope")

    def test_no_default(self) -> None:
        with pytest.raises(DatasourceNotFoundError):
            DatasourceManager().datasource()

    def test_default_prefers_flag(self) -> None:
        a = SqlDatasource("a", url="sqlite:///:memory:")
        b = SqlDatasource("b", url="sqlite:///:memory:", default=True)
        assert DatasourceManager({"a": a, "b": b}).datasource() is b
        assert DatasourceManager({"a": a}).datasource() is a

    def test_close_failures_are_warnings(self, caplog: pytest.LogCaptureFixture) -> None:
        good = SqlDatasource("good", url="sqlite:///:memory:")
        good.get()
        manager = DatasourceManager({"bad": _Unclosable(), "good": good})
        with caplog.at_level("WARNING", logger="frontline.infrastructure.datasources"):
            manager.close()
        assert not good.is_open
        assert "Failed to close datasource" in caplog.text
