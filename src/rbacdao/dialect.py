"""Dialect enum: RDBMS ごとの SQL 方言定義."""

from __future__ import annotations

from enum import Enum

from rbacdao.exceptions import ConfigurationError
from rbacdao.placeholder import PlaceholderFormat


class Dialect(Enum):
    """RDBMS ごとの SQL 方言.

    POSTGRESQL と MYSQL は同じプレースホルダ ``%s`` を使用するが、
    INSERT 後の ID 取得方法が異なるため別メンバーとして定義する。
    """

    SQLITE = ("sqlite", PlaceholderFormat.QUESTION)
    POSTGRESQL = ("postgresql", PlaceholderFormat.FORMAT)
    MYSQL = ("mysql", PlaceholderFormat.FORMAT)

    def __init__(self, dialect_id: str, placeholder: PlaceholderFormat) -> None:
        self._dialect_id = dialect_id
        self._placeholder = placeholder

    @property
    def dialect_id(self) -> str:
        """方言名を返す."""
        return self._dialect_id

    @property
    def placeholder(self) -> PlaceholderFormat:
        """プレースホルダ形式を返す."""
        return self._placeholder

    @property
    def supports_returning(self) -> bool:
        """INSERT ... RETURNING で採番 ID を受け取るか.

        SQLite も 3.35 以降は RETURNING を解釈するが、
        ``lastrowid`` で足りるため False とする。
        """
        match self:
            case Dialect.POSTGRESQL:
                return True
            case _:
                return False

    @classmethod
    def detect(cls, connection: object) -> Dialect | None:
        """Connection オブジェクトのモジュール名から Dialect を推定する."""
        module = type(connection).__module__
        if "sqlite3" in module:
            return cls.SQLITE
        if "psycopg" in module:
            return cls.POSTGRESQL
        if "pymysql" in module:
            return cls.MYSQL
        return None

    @classmethod
    def parse(cls, name: str) -> Dialect:
        """方言名から Dialect を得る.

        Raises:
            ConfigurationError: 未知の方言名の場合

        """
        key = name.strip().lower()
        for member in cls:
            if member.dialect_id == key:
                return member
        msg = f"unknown dialect: {name!r}"
        raise ConfigurationError(msg)
