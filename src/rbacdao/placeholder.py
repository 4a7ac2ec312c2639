"""プレースホルダ変換: ``?`` 形式の SQL を方言ごとの形式に書き換える."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from rbacdao.exceptions import ConfigurationError

MARKER = "?"


def question(sql: str) -> str:
    """プレースホルダを ``?`` のまま返す."""
    return sql


def _rewrite(
    sql: str,
    render: Callable[[int], str],
    *,
    literal: Callable[[str], str] | None = None,
) -> str:
    """``?`` を順に ``render(n)`` へ置換する.

    ``??`` は ``?`` 1文字のリテラルとして出力し、番号を消費しない。

    Args:
        sql: ``?`` 形式の SQL
        render: 連番 (1 始まり) からプレースホルダ文字列を作る関数
        literal: マーカー以外の断片に適用する変換（省略時はそのまま）

    Returns:
        書き換え後の SQL

    """
    quote = literal or (lambda text: text)
    buf: list[str] = []
    n = 0
    rest = sql
    while True:
        p = rest.find(MARKER)
        if p == -1:
            break
        buf.append(quote(rest[:p]))
        if rest[p : p + 2] == MARKER * 2:
            buf.append(MARKER)
            rest = rest[p + 2 :]
        else:
            n += 1
            buf.append(render(n))
            rest = rest[p + 1 :]
    buf.append(quote(rest))
    return "".join(buf)


def dollar(sql: str) -> str:
    """プレースホルダを ``$1``, ``$2``, ... に置換する.

    Examples:
        >>> dollar("WHERE id = ? AND name = ?")
        'WHERE id = $1 AND name = $2'
        >>> dollar("WHERE data ?? 'k' AND id = ?")
        "WHERE data ? 'k' AND id = $1"

    """
    return _rewrite(sql, lambda n: f"${n}")


def colon(sql: str) -> str:
    """プレースホルダを ``:1``, ``:2``, ... に置換する."""
    return _rewrite(sql, lambda n: f":{n}")


def pyformat(sql: str) -> str:
    """プレースホルダを ``%s`` に置換する.

    psycopg / PyMySQL はリテラルの ``%`` を変換指定子とみなすため、
    マーカー以外の ``%`` は ``%%`` に二重化する。
    """
    return _rewrite(sql, lambda n: "%s", literal=lambda text: text.replace("%", "%%"))


class PlaceholderFormat(Enum):
    """プレースホルダ形式.

    QUESTION はそのまま通す。それ以外は ``??`` を ``?`` リテラルとして扱う。
    """

    QUESTION = ("question", question)
    DOLLAR = ("dollar", dollar)
    FORMAT = ("format", pyformat)
    COLON = ("colon", colon)

    def __init__(self, format_id: str, func: Callable[[str], str]) -> None:
        self._format_id = format_id
        self._func = func

    @property
    def format_id(self) -> str:
        """形式名を返す."""
        return self._format_id

    def replace(self, sql: str) -> str:
        """SQL のプレースホルダをこの形式に書き換える."""
        return self._func(sql)

    @classmethod
    def parse(cls, name: str | PlaceholderFormat) -> PlaceholderFormat:
        """形式名から PlaceholderFormat を得る.

        Raises:
            ConfigurationError: 未知の形式名の場合

        """
        if isinstance(name, PlaceholderFormat):
            return name
        key = name.strip().lower()
        for member in cls:
            if member.format_id == key:
                return member
        msg = f"unknown placeholder format: {name!r}"
        raise ConfigurationError(msg)
