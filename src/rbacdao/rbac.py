"""UserRBAC: ユーザーとそのロールをまとめた読み取り専用ビュー."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rbacdao.exceptions import NotFoundError

if TYPE_CHECKING:
    from rbacdao.models import Role, User
    from rbacdao.store import Store

logger = logging.getLogger(__name__)

ADMIN_NAMES = frozenset({"admin", "administrator"})


@dataclass
class UserRBAC:
    """ユーザーとロール一覧.

    権限の可否判定はここでは行わない。判定側は permission_keys を参照する。
    """

    user: User
    roles: list[Role] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.user.name

    def is_admin(self) -> bool:
        return self.user.name in ADMIN_NAMES

    @property
    def permission_keys(self) -> frozenset[str]:
        """全ロールの権限キーの和集合."""
        keys: set[str] = set()
        for role in self.roles:
            keys.update(role.keys())
        return frozenset(keys)


def query_user_rbac(store: Store, username: str) -> UserRBAC:
    """ユーザー名からユーザーとロールを読み込む.

    Raises:
        NotFoundError: ユーザーが存在しない場合

    """
    user = store.users.find_by_name(username)
    if user is None:
        raise NotFoundError(store.users.table, username)
    roles = store.users.list_roles(user.id)
    logger.debug("loaded %d role(s) for user %s", len(roles), username)
    return UserRBAC(user=user, roles=roles)
