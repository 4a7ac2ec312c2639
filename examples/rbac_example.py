#!/usr/bin/env python3
"""rbacdao Example.

This example demonstrates the basic usage of rbacdao:
- Store setup on a DB-API connection (dialect auto-detection)
- Role / User / UserProfile CRUD
- User-role association
- Placeholder rewriting for other dialects
- Loading a user's roles and permission keys

Usage:
    uv run python examples/rbac_example.py
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime

from rbacdao import (
    NotDeletedError,
    PlaceholderFormat,
    PrimaryKeyInvalidError,
    Role,
    Store,
    User,
    UserProfile,
    query_user_rbac,
)

# =============================================================================
# Database Setup
# =============================================================================

SCHEMA = """
CREATE TABLE tpt_roles (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name VARCHAR(50) UNIQUE,
  permission_keys VARCHAR(40000),
  description VARCHAR(200),
  created_at TIMESTAMP,
  updated_at TIMESTAMP
);
CREATE TABLE tpt_users (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name VARCHAR(50) UNIQUE,
  password VARCHAR(200),
  phone VARCHAR(50),
  email VARCHAR(100),
  description VARCHAR(200),
  created_at TIMESTAMP,
  updated_at TIMESTAMP,
  state INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE tpt_user_profiles (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  usr VARCHAR(50),
  name VARCHAR(50),
  value VARCHAR(10000) NOT NULL,
  created_at TIMESTAMP,
  updated_at TIMESTAMP
);
CREATE TABLE tpt_user_roles (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  user_id BIGINT NOT NULL REFERENCES tpt_users (id) ON DELETE CASCADE,
  role_id BIGINT NOT NULL REFERENCES tpt_roles (id) ON DELETE CASCADE,
  created_at TIMESTAMP,
  updated_at TIMESTAMP
);
"""


def setup_database() -> sqlite3.Connection:
    """Set up SQLite database for the demo."""
    sqlite3.register_adapter(datetime, lambda value: value.isoformat(" "))
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(SCHEMA)
    return conn


# =============================================================================
# Demos
# =============================================================================


def demo_placeholders() -> None:
    """Demo: the same query text for every dialect."""
    print("=" * 60)
    print("[PLACEHOLDERS]")
    print("=" * 60)

    sql = "WHERE data ?? 'key' AND name = ? AND state = ?"
    for fmt in PlaceholderFormat:
        print(f"  {fmt.format_id:>8}: {fmt.replace(sql)}")
    print()


def demo_crud(store: Store) -> tuple[int, list[int]]:
    """Demo: create, read, update."""
    print("=" * 60)
    print("[CRUD]")
    print("=" * 60)

    role_ids = [
        store.roles.create_it(Role(name="editor", permission_keys="post.read,post.edit")),
        store.roles.create_it(Role(name="viewer", permission_keys="post.read")),
    ]
    user = User(name="alice", email="alice@example.com")
    user_id = store.users.create_it(user)
    store.user_profiles.create_it(UserProfile(user="alice", name="theme", value="dark"))

    user.phone = "555-0100"
    store.users.update_it(user)

    print(f"  {store.users.get_by_id(user_id)}")
    for profile in store.user_profiles.find_by_user("alice"):
        print(f"  {profile}")
    print(f"  missing role: {store.roles.find_by_name('owner')}")
    print()
    return user_id, role_ids


def demo_roles(store: Store, user_id: int, role_ids: list[int]) -> None:
    """Demo: user-role association."""
    print("=" * 60)
    print("[USER ROLES]")
    print("=" * 60)

    for role_id in role_ids:
        store.users.add_role(user_id, role_id)
    print(f"  roles: {[r.name for r in store.users.list_roles(user_id)]}")

    rbac = query_user_rbac(store, "alice")
    print(f"  permission keys: {sorted(rbac.permission_keys)}")

    store.users.remove_role(user_id, role_ids[0])
    store.users.remove_role(user_id, role_ids[0])  # no error on a missing pair
    print(f"  after remove: {[r.name for r in store.roles.find_by_user_name('alice')]}")
    print()


def demo_errors(store: Store) -> None:
    """Demo: error taxonomy."""
    print("=" * 60)
    print("[ERRORS]")
    print("=" * 60)

    try:
        store.users.update_it(User(name="transient"))
    except PrimaryKeyInvalidError as e:
        print(f"  {type(e).__name__}: {e}")
    try:
        store.roles.delete_by_id(999)
    except NotDeletedError as e:
        print(f"  {type(e).__name__}: {e}")
    print()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    conn = setup_database()
    try:
        store = Store(conn)
        demo_placeholders()
        user_id, role_ids = demo_crud(store)
        demo_roles(store, user_id, role_ids)
        demo_errors(store)
        store.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    main()
