"""Self-hosted ``RecordStoreGateway`` on MySQL.

Each logical table is one ``store_<table>`` table holding ``record_id`` and a
JSON ``fields`` document, so records keep the same shape as in Lark.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional
from uuid import uuid4

from ..common.logger import get_logger
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.exceptions import StoreError
from ..database.bootstrap import physical_table_name
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .gateway import RecordStoreGateway, StoreRecord

logger = get_logger("store.mysql")


def _json_path(field_name: str) -> str:
    return '$."' + field_name.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _load_fields(raw: Any) -> dict:
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    return dict(json.loads(raw))


class MySQLRecordStore(RecordStoreGateway):
    def __init__(self, conn_factory: DatabaseConnection, *, table_prefix: str = "store_", page_size: int = DEFAULT_PAGE_SIZE):
        self._conn_factory = conn_factory
        self._prefix = table_prefix
        self._page_size = int(page_size)

    def _table(self, table: str) -> str:
        try:
            return physical_table_name(table, self._prefix)
        except ValueError as exc:
            raise StoreError(str(exc), "DATABASE_ERROR", operation=table) from exc

    def list_all(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> list[StoreRecord]:
        name = self._table(table)
        clauses = ["1=1"]
        params: list[object] = []
        for field_name, value in (filters or {}).items():
            if value is None or value == "":
                continue
            clauses.append("JSON_UNQUOTE(JSON_EXTRACT(fields, %s))=%s")
            params.extend([_json_path(field_name), str(value)])
        where = " AND ".join(clauses)

        records: list[StoreRecord] = []
        offset = 0
        with db_cursor(self._conn_factory, operation=f"list_all:{table}") as (_, cur):
            while True:
                cur.execute(
                    f"""
                    SELECT record_id, fields
                    FROM `{name}`
                    WHERE {where}
                    ORDER BY created_at ASC, record_id ASC
                    LIMIT %s OFFSET %s
                    """,
                    tuple(params + [self._page_size, offset]),
                )
                rows = fetchall(cur)
                records.extend(StoreRecord(record_id=str(r["record_id"]), fields=_load_fields(r["fields"])) for r in rows)
                if len(rows) < self._page_size:
                    break
                offset += self._page_size
        return records

    def get_by_id(self, table: str, record_id: str) -> Optional[StoreRecord]:
        name = self._table(table)
        with db_cursor(self._conn_factory, operation=f"get_by_id:{table}") as (_, cur):
            cur.execute(f"SELECT record_id, fields FROM `{name}` WHERE record_id=%s", (str(record_id),))
            r = fetchone(cur)
            if not r:
                return None
            return StoreRecord(record_id=str(r["record_id"]), fields=_load_fields(r["fields"]))

    def insert(self, table: str, fields: Mapping[str, Any]) -> StoreRecord:
        name = self._table(table)
        record_id = f"rec{uuid4().hex[:16]}"
        with db_cursor(self._conn_factory, operation=f"insert:{table}") as (_, cur):
            cur.execute(
                f"INSERT INTO `{name}`(record_id, fields) VALUES(%s,%s)",
                (record_id, json.dumps(dict(fields), ensure_ascii=False, default=str)),
            )
        logger.info("Inserted record %s into %s", record_id, name)
        return StoreRecord(record_id=record_id, fields=dict(fields))

    def update_by_id(self, table: str, record_id: str, fields: Mapping[str, Any]) -> StoreRecord:
        current = self.get_by_id(table, record_id)
        if current is None:
            raise StoreError(f"Record not found: {record_id}", "RECORD_NOT_FOUND", operation=f"update_by_id:{table}")

        # Partial update: untouched fields keep their value, as in Lark.
        merged = {**dict(current.fields), **dict(fields)}
        name = self._table(table)
        with db_cursor(self._conn_factory, operation=f"update_by_id:{table}") as (_, cur):
            cur.execute(
                f"UPDATE `{name}` SET fields=%s WHERE record_id=%s",
                (json.dumps(merged, ensure_ascii=False, default=str), str(record_id)),
            )
        logger.info("Updated record %s in %s", record_id, name)
        return StoreRecord(record_id=str(record_id), fields=merged)

    def delete_by_id(self, table: str, record_id: str) -> None:
        name = self._table(table)
        with db_cursor(self._conn_factory, operation=f"delete_by_id:{table}") as (_, cur):
            cur.execute(f"DELETE FROM `{name}` WHERE record_id=%s", (str(record_id),))
            if cur.rowcount == 0:
                raise StoreError(f"Record not found: {record_id}", "RECORD_NOT_FOUND", operation=f"delete_by_id:{table}")
        logger.info("Deleted record %s from %s", record_id, name)
