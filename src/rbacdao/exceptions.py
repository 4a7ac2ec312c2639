"""rbacdao 例外クラス."""

from __future__ import annotations

from typing import Any


class RbacDaoError(Exception):
    """rbacdao の基底例外."""


class PrimaryKeyInvalidError(RbacDaoError):
    """主キーが未設定 (0) のまま更新・削除しようとした."""

    def __init__(self, table: str) -> None:
        super().__init__(f"primary key of '{table}' is invalid")
        self.table = table


class NotUpdatedError(RbacDaoError):
    """UPDATE で1行も更新されなかった."""

    def __init__(self, message: str = "no record is updated") -> None:
        super().__init__(message)


class NotDeletedError(RbacDaoError):
    """DELETE で1行も削除されなかった."""

    def __init__(self, message: str = "no record is deleted") -> None:
        super().__init__(message)


class NotFoundError(RbacDaoError):
    """レコードが見つからない."""

    def __init__(self, table: str, key: Any) -> None:
        super().__init__(f"record {key!r} is not found in '{table}'")
        self.table = table
        self.key = key


class ScanError(RbacDaoError):
    """行の読み取りエラー."""


class ConfigurationError(RbacDaoError):
    """設定値エラー."""


class PermissionKeysError(RbacDaoError):
    """permission_keys のデコードエラー."""
