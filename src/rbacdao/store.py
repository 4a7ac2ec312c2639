"""Store: 接続1本分のアクセサをまとめる高レベル API."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from rbacdao.config import StoreConfig
from rbacdao.dao import RoleAccessor, UserAccessor, UserProfileAccessor
from rbacdao.dialect import Dialect

logger = logging.getLogger(__name__)


class Store:
    """Role / User / UserProfile のアクセサを束ねる.

    Examples:
        >>> store = Store(connection)
        >>> role_id = store.roles.create_it(Role(name="admin"))
        >>> store.users.add_role(user_id, role_id)
        >>> store.commit()

        コンテキストマネージャとして使用:

        >>> with Store(connection) as store:
        ...     store.users.update_it(user)
        # 正常終了 → connection の __exit__ により commit
        # 例外発生 → connection の __exit__ により rollback

    """

    def __init__(
        self,
        connection: Any,
        *,
        config: StoreConfig | None = None,
        dialect: Dialect | None = None,
        auto_commit: bool = False,
    ) -> None:
        """初期化.

        Args:
            connection: DB 接続オブジェクト（PEP 249 DB-API 2.0 準拠）
            config: 設定。省略時は dialect（未指定なら接続から自動検出）の既定値
            dialect: RDBMS 方言。config と同時には指定できない
            auto_commit: True の場合、書き込みのたびに commit する

        Raises:
            ValueError: config と dialect を同時に指定した場合

        """
        if config is not None and dialect is not None:
            msg = "config and dialect are mutually exclusive"
            raise ValueError(msg)
        if config is None:
            detected = dialect if dialect is not None else Dialect.detect(connection)
            if detected is None:
                logger.debug("dialect of %s is unknown, using defaults", type(connection))
                config = StoreConfig()
            else:
                config = StoreConfig.for_dialect(detected)
        self._connection = connection
        self.config = config
        self.roles = RoleAccessor(connection, config, auto_commit=auto_commit)
        self.users = UserAccessor(connection, config, roles=self.roles, auto_commit=auto_commit)
        self.user_profiles = UserProfileAccessor(connection, config, auto_commit=auto_commit)

    def __enter__(self) -> Store:
        """コンテキストマネージャ: connection に委譲."""
        self._connection.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        """コンテキストマネージャ: connection に委譲."""
        return self._connection.__exit__(exc_type, exc_val, exc_tb)

    def commit(self) -> None:
        """トランザクションをコミットする（connection.commit() のラッパー）."""
        self._connection.commit()

    def rollback(self) -> None:
        """トランザクションをロールバックする（connection.rollback() のラッパー）."""
        self._connection.rollback()
