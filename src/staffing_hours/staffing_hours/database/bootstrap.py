from __future__ import annotations

import re
from typing import Iterable

import mysql.connector

from .connection import DBConfig

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")

DEFAULT_TABLES = ("attendance", "employees", "work_history", "recruitment", "hours_summary")


def physical_table_name(table: str, prefix: str = "store_") -> str:
    name = f"{prefix}{table}"
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid table name: {table!r}")
    return name


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def ensure_record_tables(db_config: dict, tables: Iterable[str] = DEFAULT_TABLES, *, prefix: str = "store_") -> list[str]:
    """Create one ``record_id`` + JSON ``fields`` table per logical table (idempotent)."""
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    created: list[str] = []
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        database=target.database,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        for table in tables:
            name = physical_table_name(table, prefix)
            cur.execute(
                f"""
                CREATE TABLE IF NOT EXISTS `{name}` (
                    record_id VARCHAR(32) NOT NULL PRIMARY KEY,
                    fields JSON NOT NULL,
                    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
                ) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
                """
            )
            created.append(name)
        conn.commit()
    finally:
        conn.close()
    return created


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        database=target.database,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [str(row[0]) for row in cur.fetchall()]
    finally:
        conn.close()
