"""テーブルアクセサ: Role / User / UserProfile の CRUD とユーザー・ロールの関連付け."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, ClassVar, Generic, TypeVar

from rbacdao.config import StoreConfig
from rbacdao.exceptions import (
    ConfigurationError,
    NotDeletedError,
    NotFoundError,
    NotUpdatedError,
    PrimaryKeyInvalidError,
)
from rbacdao.mapper import RowMapper, create_mapper
from rbacdao.models import Role, User, UserProfile
from rbacdao.scan import (
    ColumnKind,
    ColumnSpec,
    MultiRowScanner,
    SingleRowScanner,
    row_values,
    scan_row,
    select_list,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ID = ColumnSpec("id", "id", ColumnKind.INTEGER, nullable=False)
CREATED_AT = ColumnSpec("created_at", "created_at", ColumnKind.TIMESTAMP)
UPDATED_AT = ColumnSpec("updated_at", "updated_at", ColumnKind.TIMESTAMP)


class TableAccessor(Generic[T]):
    """1テーブル分の CRUD.

    サブクラスはテーブル名、SELECT 列リスト、既定のエンティティクラスを宣言する。
    列リストは ``id`` で始まり ``created_at``, ``updated_at`` で終わる。
    その間のカラムが INSERT / UPDATE の対象になる。

    接続と設定は生成時に束縛し、以後は変更しない。
    """

    table_name: ClassVar[str]
    columns: ClassVar[tuple[ColumnSpec, ...]]
    default_entity: ClassVar[type]

    def __init__(
        self,
        connection: Any,
        config: StoreConfig | None = None,
        *,
        entity: type[T] | None = None,
        mapper: RowMapper[T] | Callable[..., T] | None = None,
        auto_commit: bool = False,
    ) -> None:
        """初期化.

        Args:
            connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
            config: 接続ごとの設定（省略時は既定値）
            entity: 行を変換するエンティティクラス（省略時は default_entity）
            mapper: カスタムマッパー（省略時は自動生成）
            auto_commit: True の場合、書き込みのたびに commit する

        """
        self._connection = connection
        self._config = config if config is not None else StoreConfig()
        self._entity = entity if entity is not None else self.default_entity
        self._mapper = create_mapper(self._entity, mapper=mapper)
        self._auto_commit = auto_commit
        self.table = self._config.table(self.table_name)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def mutable_columns(self) -> tuple[ColumnSpec, ...]:
        """INSERT / UPDATE で書き込むカラム."""
        return self.columns[1:-2]

    # --- 実行 ---

    @contextmanager
    def _cursor(self, sql: str, args: Sequence[Any]) -> Iterator[Any]:
        """SQL を実行したカーソルを貸し出し、抜けるときに必ず閉じる."""
        sql = self._config.format(sql)
        logger.debug("execute on %s: %s", self.table, sql)
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, list(args))
            yield cursor
        finally:
            cursor.close()

    def _execute(self, sql: str, args: Sequence[Any]) -> int:
        """書き込み系 SQL を実行し、影響行数を返す."""
        with self._cursor(sql, args) as cursor:
            rowcount = cursor.rowcount
        self._after_write()
        return rowcount

    def _after_write(self) -> None:
        if self._auto_commit:
            self._connection.commit()

    def _scan(self, row: Any) -> T:
        return self._mapper.map_row(scan_row(self.columns, row))

    def _select(self, where: str) -> str:
        return f"SELECT {select_list(self.columns)} FROM {self.table} {where}"

    # --- 検索 ---

    def query_row_with(self, where: str, *args: Any) -> T | None:
        """条件に合う最初の1行を返す.

        Args:
            where: ``WHERE`` 以降の SQL 断片（``?`` プレースホルダ）
            *args: バインドパラメータ

        Returns:
            エンティティ、または該当行がない場合は None

        """
        with self._cursor(self._select(where), args) as cursor:
            row = SingleRowScanner(cursor).scan()
            if row is None:
                return None
            return self._scan(row)

    def query_with(self, where: str, *args: Any) -> list[T]:
        """条件に合う全行を返す。該当行がなければ空リスト."""
        with self._cursor(self._select(where), args) as cursor:
            return [self._scan(row) for row in MultiRowScanner(cursor)]

    def find_by_id(self, key: int) -> T | None:
        return self.query_row_with("WHERE id = ?", key)

    def get_by_id(self, key: int) -> T:
        """主キーで1件取得する.

        Raises:
            NotFoundError: 該当行がない場合

        """
        value = self.find_by_id(key)
        if value is None:
            raise NotFoundError(self.table, key)
        return value

    # --- 書き込み ---

    def create_it(self, value: T) -> int:
        """エンティティを INSERT し、採番された ID を返す.

        created_at と updated_at には同じ現在時刻を書き込む。
        採番 ID と時刻はエンティティにも設定する。

        Raises:
            ConfigurationError: RETURNING を使わない設定で、
                ドライバが lastrowid を返さない場合

        """
        mutable = self.mutable_columns
        names = [c.name for c in mutable] + [CREATED_AT.name, UPDATED_AT.name]
        marks = ", ".join("?" for _ in names)
        sql = f"INSERT INTO {self.table}({', '.join(names)}) VALUES ({marks})"

        now = self._config.clock()
        args = [getattr(value, c.attr) for c in mutable] + [now, now]

        if self._config.returning:
            with self._cursor(sql + ' RETURNING "id"', args) as cursor:
                new_id = row_values(cursor.fetchone())[0]
        else:
            with self._cursor(sql, args) as cursor:
                new_id = cursor.lastrowid
            if new_id is None:
                msg = f"driver returned no last insert id for '{self.table}'; use returning mode"
                raise ConfigurationError(msg)
        self._after_write()

        value.id = new_id  # type: ignore[attr-defined]
        value.created_at = now  # type: ignore[attr-defined]
        value.updated_at = now  # type: ignore[attr-defined]
        return new_id

    def update_it(self, value: T) -> None:
        """エンティティの全カラムと updated_at を UPDATE する.

        Raises:
            PrimaryKeyInvalidError: id が 0 の場合（SQL は発行しない）
            NotUpdatedError: 1行も更新されなかった場合

        """
        key = value.id  # type: ignore[attr-defined]
        if not key:
            raise PrimaryKeyInvalidError(self.table)

        mutable = self.mutable_columns
        assignments = ", ".join(f"{c.name}=?" for c in mutable)
        sql = f"UPDATE {self.table} SET {assignments}, {UPDATED_AT.name}=? WHERE id = ?"

        now = self._config.clock()
        args = [getattr(value, c.attr) for c in mutable] + [now, key]
        if self._execute(sql, args) == 0:
            logger.debug("no row of %s updated for id=%s", self.table, key)
            raise NotUpdatedError
        value.updated_at = now  # type: ignore[attr-defined]

    def delete_it(self, value: T) -> None:
        self.delete_by_id(value.id)  # type: ignore[attr-defined]

    def delete_by_id(self, key: int) -> None:
        """主キーで DELETE する.

        Raises:
            PrimaryKeyInvalidError: key が 0 の場合（SQL は発行しない）
            NotDeletedError: 1行も削除されなかった場合

        """
        if not key:
            raise PrimaryKeyInvalidError(self.table)
        if self._execute(f"DELETE FROM {self.table} WHERE id = ?", [key]) == 0:
            logger.debug("no row of %s deleted for id=%s", self.table, key)
            raise NotDeletedError


class RoleAccessor(TableAccessor[Role]):
    """roles テーブル."""

    table_name = "roles"
    columns = (
        ID,
        ColumnSpec("name", "name", ColumnKind.STRING, nullable=False),
        ColumnSpec("description", "description", ColumnKind.STRING),
        ColumnSpec("permission_keys", "permission_keys", ColumnKind.STRING),
        CREATED_AT,
        UPDATED_AT,
    )
    default_entity = Role

    def find_by_name(self, name: str) -> Role | None:
        return self.query_row_with("WHERE name = ?", name)

    def find_by_user_id(self, user_id: int) -> list[Role]:
        """ユーザーに関連付けられたロールを返す."""
        user_roles = self._config.table("user_roles")
        return self.query_with(
            f"WHERE EXISTS (SELECT * FROM {user_roles}"
            f" WHERE user_id = ? AND {self.table}.id = {user_roles}.role_id)",
            user_id,
        )

    def find_by_user_name(self, username: str) -> list[Role]:
        """ユーザー名からロールを返す。ユーザーを先に引く必要はない."""
        user_roles = self._config.table("user_roles")
        users = self._config.table("users")
        return self.query_with(
            f"WHERE EXISTS (SELECT * FROM {user_roles}"
            f" WHERE {self.table}.id = {user_roles}.role_id"
            f" AND EXISTS (SELECT * FROM {users}"
            f" WHERE name = ? AND {user_roles}.user_id = {users}.id))",
            username,
        )


class UserAccessor(TableAccessor[User]):
    """users テーブルと user_roles 関連."""

    table_name = "users"
    columns = (
        ID,
        ColumnSpec("name", "name", ColumnKind.STRING, nullable=False),
        ColumnSpec("description", "description", ColumnKind.STRING),
        ColumnSpec("password", "password", ColumnKind.STRING),
        ColumnSpec("phone", "phone", ColumnKind.STRING),
        ColumnSpec("email", "email", ColumnKind.STRING),
        ColumnSpec("state", "state", ColumnKind.INTEGER),
        CREATED_AT,
        UPDATED_AT,
    )
    default_entity = User

    def __init__(
        self,
        connection: Any,
        config: StoreConfig | None = None,
        *,
        roles: RoleAccessor | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(connection, config, **kwargs)
        self._roles = roles if roles is not None else RoleAccessor(connection, self._config)
        self._user_roles = self._config.table("user_roles")

    def find_by_name(self, name: str) -> User | None:
        return self.query_row_with("WHERE name = ?", name)

    def add_role(self, user_id: int, role_id: int) -> None:
        """ユーザーにロールを関連付ける.

        重複チェックはしない。同じ組を2回追加すると2行になる。
        """
        now = self._config.clock()
        self._execute(
            f"INSERT INTO {self._user_roles}(user_id, role_id, created_at, updated_at)"
            " VALUES (?, ?, ?, ?)",
            [user_id, role_id, now, now],
        )

    def remove_role(self, user_id: int, role_id: int) -> None:
        """ユーザーからロールの関連付けを外す.

        該当行がなくてもエラーにしない。
        """
        self._execute(
            f"DELETE FROM {self._user_roles} WHERE user_id = ? AND role_id = ?",
            [user_id, role_id],
        )

    def list_roles(self, user_id: int) -> list[Role]:
        return self._roles.find_by_user_id(user_id)


class UserProfileAccessor(TableAccessor[UserProfile]):
    """user_profiles テーブル."""

    table_name = "user_profiles"
    columns = (
        ID,
        ColumnSpec("usr", "user", ColumnKind.STRING),
        ColumnSpec("name", "name", ColumnKind.STRING),
        ColumnSpec("value", "value", ColumnKind.STRING),
        CREATED_AT,
        UPDATED_AT,
    )
    default_entity = UserProfile

    def find_by_user(self, user: str) -> list[UserProfile]:
        """ユーザー名に紐づく属性を返す."""
        return self.query_with("WHERE usr = ? ORDER BY id", user)
