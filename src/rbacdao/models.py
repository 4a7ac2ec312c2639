"""エンティティ定義: Role, User, UserProfile."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

from rbacdao.exceptions import PermissionKeysError

KEY_SEPARATOR = ","


def decode_keys(encoded: str) -> list[str]:
    """permission_keys 文字列を権限キーのリストに変換する.

    ``[`` で始まる場合は JSON 配列、それ以外はカンマ区切りとして扱う。

    Examples:
        >>> decode_keys("k1, k2,,k3")
        ['k1', 'k2', 'k3']
        >>> decode_keys('["k1", "k2"]')
        ['k1', 'k2']

    Raises:
        PermissionKeysError: JSON として不正、または文字列の配列でない場合

    """
    text = encoded.strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            keys = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"invalid permission keys: {encoded!r}"
            raise PermissionKeysError(msg) from exc
        if not all(isinstance(key, str) for key in keys):
            msg = f"permission keys must be strings: {encoded!r}"
            raise PermissionKeysError(msg)
        return keys
    return [key.strip() for key in text.split(KEY_SEPARATOR) if key.strip()]


def encode_keys(keys: list[str]) -> str:
    """権限キーのリストをカンマ区切りの文字列にする."""
    return KEY_SEPARATOR.join(keys)


@dataclass
class Role:
    """ユーザーロール."""

    id: int = 0
    name: str = ""
    description: str = ""
    permission_keys: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def keys(self) -> list[str]:
        """permission_keys をデコードして返す."""
        return decode_keys(self.permission_keys)

    def set_keys(self, keys: list[str]) -> None:
        """permission_keys を権限キーのリストから設定する."""
        self.permission_keys = encode_keys(keys)


@dataclass
class User:
    """ユーザー.

    password はこの層ではハッシュ化しない。
    """

    id: int = 0
    name: str = ""
    description: str = ""
    password: str = ""
    phone: str = ""
    email: str = ""
    state: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class UserProfile:
    """ユーザーの属性.

    user はユーザー ID ではなくユーザー名で持つ（``usr`` カラム）。
    """

    id: int = 0
    user: str = ""
    name: str = ""
    value: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
