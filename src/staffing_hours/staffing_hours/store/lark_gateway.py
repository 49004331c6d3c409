"""Lark Bitable implementation of ``RecordStoreGateway`` (HTTP via requests)."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

import requests

from ..common.logger import get_logger
from ..core.constants import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE, DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import StoreError
from .gateway import RecordStoreGateway, StoreRecord

logger = get_logger("store.lark")

_AUTH_ERROR_CODES = {99991663, 99991664, 99991665}
_TOKEN_SAFETY_SECONDS = 300


@dataclass
class LarkConfig:
    app_id: str
    app_secret: str
    base_id: str
    tables: dict[str, str] = field(default_factory=dict)
    base_url: str = "https://open.larksuite.com/open-apis"
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_settings(cls, lark_config: Mapping[str, Any], tables: Mapping[str, str]) -> "LarkConfig":
        return cls(
            app_id=str(lark_config.get("app_id") or ""),
            app_secret=str(lark_config.get("app_secret") or ""),
            base_id=str(lark_config.get("base_id") or ""),
            tables={k: str(v) for k, v in tables.items() if v},
            base_url=str(lark_config.get("base_url") or cls.base_url).rstrip("/"),
            page_size=int(lark_config.get("page_size", DEFAULT_PAGE_SIZE)),
            max_pages=int(lark_config.get("max_pages", DEFAULT_MAX_PAGES)),
            timeout=float(lark_config.get("timeout", DEFAULT_REQUEST_TIMEOUT)),
        )


def build_filter_formula(filters: Optional[Mapping[str, Any]]) -> str:
    """``{"Mã nhân viên": "NV01"}`` -> ``AND(CurrentValue.[Mã nhân viên]="NV01")``."""
    conditions = []
    for name, value in (filters or {}).items():
        if value is None or value == "":
            continue
        escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
        conditions.append(f'CurrentValue.[{name}]="{escaped}"')
    if not conditions:
        return ""
    return f"AND({', '.join(conditions)})"


def _http_error_code(status: int) -> str:
    if status in (401, 403):
        return "LARK_AUTH_ERROR"
    if status == 404:
        return "LARK_RECORD_NOT_FOUND"
    if status == 429:
        return "LARK_RATE_LIMIT"
    return "LARK_API_ERROR"


class LarkRecordStore(RecordStoreGateway):
    def __init__(
        self,
        config: LarkConfig,
        *,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._config = config
        self._session = session or requests.Session()
        self._clock = clock
        self._token: Optional[str] = None
        self._token_expiry = 0.0

    # -------- Transport --------
    def _tenant_access_token(self) -> str:
        if not self._config.app_id or not self._config.app_secret:
            raise StoreError("Lark credentials not configured properly", "LARK_AUTH_ERROR", operation="auth")

        if self._token and self._token_expiry > self._clock():
            return self._token

        payload = self._send(
            "POST",
            "/auth/v3/tenant_access_token/internal",
            operation="auth",
            json={"app_id": self._config.app_id, "app_secret": self._config.app_secret},
            auth=False,
        )
        self._token = str(payload.get("tenant_access_token") or "")
        if not self._token:
            raise StoreError("Lark auth response has no tenant_access_token", "LARK_AUTH_ERROR", operation="auth")
        self._token_expiry = self._clock() + int(payload.get("expire", 7200)) - _TOKEN_SAFETY_SECONDS
        return self._token

    def _send(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        auth: bool = True,
    ) -> dict:
        headers = {"Content-Type": "application/json; charset=utf-8"}
        if auth:
            headers["Authorization"] = f"Bearer {self._tenant_access_token()}"

        try:
            resp = self._session.request(
                method,
                f"{self._config.base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self._config.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Lark request failed: %s %s (%s): %s", method, path, operation, exc)
            raise StoreError(f"Network error: {exc}", "NETWORK_ERROR", operation=operation) from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        code = payload.get("code") if isinstance(payload, dict) else None
        if code not in (None, 0):
            if code in _AUTH_ERROR_CODES:
                self._token = None
            logger.error("Lark API error %s on %s %s (%s): %s", code, method, path, operation, payload.get("msg"))
            raise StoreError.from_lark_code(code, str(payload.get("msg") or ""), operation=operation)

        if resp.status_code >= 400:
            logger.error("Lark HTTP %s on %s %s (%s)", resp.status_code, method, path, operation)
            raise StoreError(f"HTTP {resp.status_code}", _http_error_code(resp.status_code), operation=operation)

        return payload if isinstance(payload, dict) else {}

    def _records_path(self, table: str) -> str:
        table_id = self._config.tables.get(table)
        if not table_id:
            raise StoreError(f"Chưa cấu hình bảng Lark cho '{table}'", "LARK_TABLE_NOT_FOUND", operation=table)
        return f"/bitable/v1/apps/{self._config.base_id}/tables/{table_id}/records"

    @staticmethod
    def _to_record(item: Mapping[str, Any]) -> StoreRecord:
        return StoreRecord(
            record_id=str(item.get("record_id") or item.get("id") or ""),
            fields=dict(item.get("fields") or {}),
        )

    # -------- Gateway --------
    def list_all(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> list[StoreRecord]:
        path = self._records_path(table)
        params: dict[str, Any] = {"page_size": self._config.page_size}
        formula = build_filter_formula(filters)
        if formula:
            params["filter"] = formula

        records: list[StoreRecord] = []
        page_token: Optional[str] = None
        for _ in range(self._config.max_pages):
            if page_token:
                params["page_token"] = page_token
            payload = self._send("GET", path, operation=f"list_all:{table}", params=dict(params))
            data = payload.get("data") or {}
            records.extend(self._to_record(item) for item in data.get("items") or [])

            page_token = data.get("page_token")
            if not data.get("has_more") or not page_token:
                break
        else:
            logger.warning("Reached maximum page limit (%d pages) for table %s", self._config.max_pages, table)

        return records

    def get_by_id(self, table: str, record_id: str) -> Optional[StoreRecord]:
        try:
            payload = self._send("GET", f"{self._records_path(table)}/{record_id}", operation=f"get_by_id:{table}")
        except StoreError as exc:
            if exc.is_not_found:
                return None
            raise
        record = (payload.get("data") or {}).get("record")
        return self._to_record(record) if record else None

    def insert(self, table: str, fields: Mapping[str, Any]) -> StoreRecord:
        payload = self._send("POST", self._records_path(table), operation=f"insert:{table}", json={"fields": dict(fields)})
        record = (payload.get("data") or {}).get("record") or {}
        logger.info("Inserted record %s into %s", record.get("record_id"), table)
        return self._to_record(record)

    def update_by_id(self, table: str, record_id: str, fields: Mapping[str, Any]) -> StoreRecord:
        payload = self._send(
            "PUT",
            f"{self._records_path(table)}/{record_id}",
            operation=f"update_by_id:{table}",
            json={"fields": dict(fields)},
        )
        record = (payload.get("data") or {}).get("record") or {"record_id": record_id, "fields": dict(fields)}
        logger.info("Updated record %s in %s", record_id, table)
        return self._to_record(record)

    def delete_by_id(self, table: str, record_id: str) -> None:
        self._send("DELETE", f"{self._records_path(table)}/{record_id}", operation=f"delete_by_id:{table}")
        logger.info("Deleted record %s from %s", record_id, table)
