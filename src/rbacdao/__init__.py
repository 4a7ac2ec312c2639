"""rbacdao: RBAC のユーザー・ロール・ユーザー属性を扱うデータアクセス層."""

from rbacdao.config import StoreConfig
from rbacdao.dao import RoleAccessor, TableAccessor, UserAccessor, UserProfileAccessor
from rbacdao.dialect import Dialect
from rbacdao.exceptions import (
    ConfigurationError,
    NotDeletedError,
    NotFoundError,
    NotUpdatedError,
    PermissionKeysError,
    PrimaryKeyInvalidError,
    RbacDaoError,
    ScanError,
)
from rbacdao.mapper import ManualMapper, RowMapper, create_mapper
from rbacdao.models import Role, User, UserProfile
from rbacdao.placeholder import PlaceholderFormat, dollar, question
from rbacdao.rbac import UserRBAC, query_user_rbac
from rbacdao.scan import ColumnKind, ColumnSpec, RowScanner, scan_row
from rbacdao.store import Store

__all__ = [
    "ColumnKind",
    "ColumnSpec",
    "ConfigurationError",
    "Dialect",
    "ManualMapper",
    "NotDeletedError",
    "NotFoundError",
    "NotUpdatedError",
    "PermissionKeysError",
    "PlaceholderFormat",
    "PrimaryKeyInvalidError",
    "RbacDaoError",
    "Role",
    "RoleAccessor",
    "RowMapper",
    "RowScanner",
    "ScanError",
    "Store",
    "StoreConfig",
    "TableAccessor",
    "User",
    "UserAccessor",
    "UserProfile",
    "UserProfileAccessor",
    "UserRBAC",
    "create_mapper",
    "dollar",
    "query_user_rbac",
    "question",
]
