"""Dialect enum のテスト."""

from __future__ import annotations

import sqlite3

import pytest

from rbacdao import ConfigurationError, Dialect, PlaceholderFormat


class TestDialect:
    """Dialect enum の基本動作."""

    def test_sqlite(self) -> None:
        assert Dialect.SQLITE.placeholder is PlaceholderFormat.QUESTION
        assert Dialect.SQLITE.supports_returning is False

    def test_postgresql(self) -> None:
        assert Dialect.POSTGRESQL.placeholder is PlaceholderFormat.FORMAT
        assert Dialect.POSTGRESQL.supports_returning is True

    def test_mysql(self) -> None:
        assert Dialect.MYSQL.placeholder is PlaceholderFormat.FORMAT
        assert Dialect.MYSQL.supports_returning is False

    def test_postgresql_and_mysql_are_distinct(self) -> None:
        """POSTGRESQL と MYSQL は同じプレースホルダだが別メンバー."""
        assert Dialect.POSTGRESQL.placeholder is Dialect.MYSQL.placeholder
        assert Dialect.POSTGRESQL is not Dialect.MYSQL


class TestDetect:
    """接続オブジェクトからの推定."""

    def test_sqlite_connection(self) -> None:
        conn = sqlite3.connect(":memory:")
        try:
            assert Dialect.detect(conn) is Dialect.SQLITE
        finally:
            conn.close()

    def test_unknown_connection(self) -> None:
        assert Dialect.detect(object()) is None


class TestParse:
    def test_known(self) -> None:
        assert Dialect.parse("PostgreSQL") is Dialect.POSTGRESQL

    def test_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown dialect"):
            Dialect.parse("oracle")
