"""行マッパー: スキャン済みの ``{属性名: 値}`` 辞書からエンティティを作る."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import fields, is_dataclass
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable

from rbacdao.exceptions import ScanError

T = TypeVar("T")


@runtime_checkable
class RowMapper(Protocol[T]):
    """マッパーのインターフェース."""

    def map_row(self, row: dict[str, Any]) -> T:
        """1行をエンティティに変換."""
        ...

    def map_rows(self, rows: list[dict[str, Any]]) -> list[T]:
        """複数行をエンティティのリストに変換."""
        ...


class _BaseMapper:
    def map_row(self, row: dict[str, Any]) -> Any:
        raise NotImplementedError

    def map_rows(self, rows: list[dict[str, Any]]) -> list[Any]:
        return [self.map_row(row) for row in rows]


class ManualMapper(_BaseMapper):
    """ユーザー提供の関数をラップするマッパー."""

    def __init__(self, func: Callable[[dict[str, Any]], Any]) -> None:
        self._func = func

    def map_row(self, row: dict[str, Any]) -> Any:
        return self._func(row)


class DataclassMapper(_BaseMapper):
    """Dataclass 用のマッパー.

    属性名はカラム定義側で決まっているため、名前の変換はしない。
    init=False のフィールドは生成後に設定する。
    """

    _fields_cache: ClassVar[dict[type, tuple[frozenset[str], frozenset[str]]]] = {}

    def __init__(self, entity_cls: type) -> None:
        if not is_dataclass(entity_cls):
            msg = f"{entity_cls} is not a dataclass"
            raise TypeError(msg)
        self.entity_cls = entity_cls
        self._init_fields, self._late_fields = self._get_fields(entity_cls)

    @classmethod
    def _get_fields(cls, entity_cls: type) -> tuple[frozenset[str], frozenset[str]]:
        """(init 引数のフィールド, それ以外のフィールド) を返す（キャッシュ付き）."""
        if entity_cls not in cls._fields_cache:
            all_fields = fields(entity_cls)
            cls._fields_cache[entity_cls] = (
                frozenset(f.name for f in all_fields if f.init),
                frozenset(f.name for f in all_fields if not f.init),
            )
        return cls._fields_cache[entity_cls]

    def map_row(self, row: dict[str, Any]) -> Any:
        unknown = row.keys() - self._init_fields - self._late_fields
        if unknown:
            msg = f"{self.entity_cls.__name__} has no field(s): {', '.join(sorted(unknown))}"
            raise ScanError(msg)
        value = self.entity_cls(**{k: v for k, v in row.items() if k in self._init_fields})
        for name in self._late_fields & row.keys():
            setattr(value, name, row[name])
        return value


class PydanticMapper(_BaseMapper):
    """Pydantic BaseModel 用のマッパー.

    バリデーションエラーは pydantic の ValidationError のまま伝わる。
    """

    def __init__(self, entity_cls: type) -> None:
        if not hasattr(entity_cls, "model_validate"):
            msg = f"{entity_cls} is not a Pydantic BaseModel"
            raise TypeError(msg)
        self.entity_cls = entity_cls

    def map_row(self, row: dict[str, Any]) -> Any:
        return self.entity_cls.model_validate(row)


def create_mapper(entity_cls: type, *, mapper: Any = None) -> Any:
    """マッパーを生成する.

    Args:
        entity_cls: エンティティクラス
        mapper: RowMapper インスタンス、Callable、または None（自動判定）

    Returns:
        RowMapper プロトコルを満たすマッパー

    Raises:
        TypeError: マッパーを自動判定できない場合

    """
    if mapper is not None:
        if isinstance(mapper, RowMapper):
            return mapper
        if callable(mapper):
            return ManualMapper(mapper)

    if is_dataclass(entity_cls):
        return DataclassMapper(entity_cls)
    if hasattr(entity_cls, "model_validate"):
        return PydanticMapper(entity_cls)

    msg = f"Cannot create mapper for {entity_cls}. Use dataclass, Pydantic, or provide a mapper."
    raise TypeError(msg)
