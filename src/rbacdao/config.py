"""StoreConfig: アクセサに束縛する接続ごとの設定."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from rbacdao.dialect import Dialect
from rbacdao.placeholder import PlaceholderFormat

DEFAULT_TABLE_PREFIX = "tpt_"


@dataclass(frozen=True)
class StoreConfig:
    """接続ごとの設定.

    アクセサ生成時に束縛し、以後は変更しない。

    Attributes:
        placeholder: プレースホルダ形式
        returning: True の場合 ``INSERT ... RETURNING "id"`` で採番 ID を受け取る。
            False の場合は ``cursor.lastrowid`` を使う。
        table_prefix: テーブル名の接頭辞
        clock: created_at / updated_at に書き込む現在時刻の取得関数

    """

    placeholder: PlaceholderFormat = PlaceholderFormat.QUESTION
    returning: bool = False
    table_prefix: str = DEFAULT_TABLE_PREFIX
    clock: Callable[[], datetime] = field(default=datetime.now, compare=False)

    @classmethod
    def for_dialect(cls, dialect: Dialect, **overrides: object) -> StoreConfig:
        """方言の既定値で StoreConfig を作る."""
        values: dict[str, object] = {
            "placeholder": dialect.placeholder,
            "returning": dialect.supports_returning,
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    def table(self, name: str) -> str:
        """接頭辞付きのテーブル名を返す."""
        return f"{self.table_prefix}{name}"

    def format(self, sql: str) -> str:
        """SQL のプレースホルダを書き換える."""
        return self.placeholder.replace(sql)
