"""Nullable Scan Adapter: 位置ベースで1行をフィールド値に変換する."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from rbacdao.exceptions import ScanError


class ColumnKind(Enum):
    """カラムの型分類と、NULL の代わりに入れるゼロ値."""

    INTEGER = ("integer", 0)
    STRING = ("string", "")
    TIMESTAMP = ("timestamp", None)

    def __init__(self, kind_id: str, zero: Any) -> None:
        self._kind_id = kind_id
        self._zero = zero

    @property
    def zero(self) -> Any:
        """ゼロ値を返す."""
        return self._zero

    def decode(self, value: Any) -> Any:
        """NULL でない値を Python の値に変換する.

        SQLite はタイムスタンプを ISO 形式の文字列で返すため datetime に変換する。
        """
        if self is ColumnKind.TIMESTAMP and isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError as exc:
                msg = f"invalid timestamp: {value!r}"
                raise ScanError(msg) from exc
        return value


@dataclass(frozen=True)
class ColumnSpec:
    """SELECT 列リストの1カラム.

    Attributes:
        name: カラム名
        attr: 値を格納するエンティティの属性名
        kind: 型分類
        nullable: NULL を許すか。False のカラムが NULL の場合は ScanError

    """

    name: str
    attr: str
    kind: ColumnKind
    nullable: bool = True


@runtime_checkable
class RowScanner(Protocol):
    """1行ずつ値の並びを返すもの."""

    def scan(self) -> Sequence[Any] | None:
        """次の行を返す。行がなければ None."""
        ...


class SingleRowScanner:
    """実行済みカーソルの先頭1行だけを返す."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._done = False

    def scan(self) -> Sequence[Any] | None:
        if self._done:
            return None
        self._done = True
        return self._cursor.fetchone()


class MultiRowScanner:
    """実行済みカーソルを1行ずつ読み進める."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    def scan(self) -> Sequence[Any] | None:
        return self._cursor.fetchone()

    def __iter__(self) -> Iterator[Sequence[Any]]:
        while (row := self.scan()) is not None:
            yield row


def row_values(row: Any) -> Sequence[Any]:
    """行オブジェクトから値の並びを取り出す.

    dict 系の row factory はカラム順を保持しているため、値の順をそのまま使う。
    """
    if isinstance(row, Mapping):
        return list(row.values())
    return row


def scan_row(columns: Sequence[ColumnSpec], row: Any) -> dict[str, Any]:
    """1行を ``{属性名: 値}`` の辞書に変換する.

    カラム名は見ず、``columns`` と同じ順序で値が並んでいることを前提とする。
    NULL 許容カラムの NULL はゼロ値になる。

    Args:
        columns: エンティティの SELECT 列リスト
        row: DB-API の1行（タプル、sqlite3.Row、dict など）

    Returns:
        属性名から値への辞書

    Raises:
        ScanError: 列数が一致しない、または NULL 不可のカラムが NULL の場合

    """
    values = row_values(row)
    if len(values) != len(columns):
        msg = f"expected {len(columns)} columns, got {len(values)}"
        raise ScanError(msg)

    result: dict[str, Any] = {}
    for column, value in zip(columns, values):
        if value is None:
            if not column.nullable:
                msg = f"column '{column.name}' is NULL"
                raise ScanError(msg)
            result[column.attr] = column.kind.zero
        else:
            result[column.attr] = column.kind.decode(value)
    return result


def select_list(columns: Sequence[ColumnSpec]) -> str:
    """SELECT 句のカラムリストを返す."""
    return ", ".join(column.name for column in columns)
