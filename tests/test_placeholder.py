"""プレースホルダ変換のテスト."""

from __future__ import annotations

import pytest

from rbacdao import ConfigurationError, PlaceholderFormat, dollar, question


class TestQuestion:
    """question はそのまま返す."""

    @pytest.mark.parametrize(
        "sql",
        [
            "",
            "WHERE id = ?",
            "WHERE data ?? 'k' AND id = ?",
            "??",
            "SELECT '100%'",
        ],
    )
    def test_identity(self, sql: str) -> None:
        assert question(sql) == sql
        assert PlaceholderFormat.QUESTION.replace(sql) == sql


class TestDollar:
    """dollar は ? を $1, $2, ... に置換する."""

    def test_no_marker(self) -> None:
        """マーカーがなければそのまま."""
        assert dollar("SELECT * FROM tpt_roles") == "SELECT * FROM tpt_roles"

    def test_sequential(self) -> None:
        """左から順に番号を振る."""
        assert dollar("WHERE a = ? AND b = ? OR c = ?") == "WHERE a = $1 AND b = $2 OR c = $3"

    def test_marker_at_end(self) -> None:
        assert dollar("WHERE id = ?") == "WHERE id = $1"

    def test_marker_at_start(self) -> None:
        assert dollar("?, ?") == "$1, $2"

    def test_escaped_marker(self) -> None:
        """?? は ? リテラルになり番号を消費しない."""
        assert dollar("WHERE data ?? 'k' AND id = ?") == "WHERE data ? 'k' AND id = $1"

    def test_escaped_marker_at_end(self) -> None:
        """末尾の ?? もリテラル."""
        assert dollar("WHERE id = ? AND data ??") == "WHERE id = $1 AND data ?"

    def test_escaped_only(self) -> None:
        assert dollar("??") == "?"

    def test_triple_marker(self) -> None:
        """??? はリテラル ? とプレースホルダ1つ."""
        assert dollar("???") == "?$1"

    def test_many_markers(self) -> None:
        sql = ", ".join("?" for _ in range(12))
        assert dollar(sql) == ", ".join(f"${n}" for n in range(1, 13))

    def test_insert(self) -> None:
        sql = "INSERT INTO tpt_user_roles(user_id, role_id, created_at, updated_at) VALUES (?, ?, ?, ?)"
        assert dollar(sql).endswith("VALUES ($1, $2, $3, $4)")


class TestFormat:
    """FORMAT は ? を %s に置換し、リテラルの % を二重化する."""

    def test_sequential(self) -> None:
        assert PlaceholderFormat.FORMAT.replace("WHERE a = ? AND b = ?") == (
            "WHERE a = %s AND b = %s"
        )

    def test_percent_escaped(self) -> None:
        assert PlaceholderFormat.FORMAT.replace("WHERE name LIKE 'a%' AND id = ?") == (
            "WHERE name LIKE 'a%%' AND id = %s"
        )

    def test_escaped_marker(self) -> None:
        assert PlaceholderFormat.FORMAT.replace("data ?? 'k' AND id = ?") == "data ? 'k' AND id = %s"


class TestColon:
    """COLON は ? を :1, :2, ... に置換する."""

    def test_sequential(self) -> None:
        assert PlaceholderFormat.COLON.replace("WHERE a = ? AND b = ??") == "WHERE a = :1 AND b = ?"


class TestParse:
    """形式名からの解決."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("question", PlaceholderFormat.QUESTION),
            ("DOLLAR", PlaceholderFormat.DOLLAR),
            (" format ", PlaceholderFormat.FORMAT),
            ("colon", PlaceholderFormat.COLON),
        ],
    )
    def test_known(self, name: str, expected: PlaceholderFormat) -> None:
        assert PlaceholderFormat.parse(name) is expected

    def test_member_passthrough(self) -> None:
        assert PlaceholderFormat.parse(PlaceholderFormat.DOLLAR) is PlaceholderFormat.DOLLAR

    def test_unknown(self) -> None:
        with pytest.raises(ConfigurationError, match="unknown placeholder format"):
            PlaceholderFormat.parse("named")
