from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol


@dataclass(frozen=True)
class StoreRecord:
    """Một bản ghi thô của kho dữ liệu: id + map các trường (chưa giải mã)."""

    record_id: str
    fields: Mapping[str, Any] = field(default_factory=dict)


class RecordStoreGateway(Protocol):
    """The only seam that talks to the remote tabular datastore.

    ``table`` is a logical table name (``attendance``, ``employees``,
    ``work_history``, ``recruitment``, ``hours_summary``); each backend maps it to
    its own physical table. Every method raises ``StoreError`` on failure.
    """

    def list_all(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> list[StoreRecord]:
        """Return every record, following pagination until exhausted.

        ``filters`` is a best-effort equality predicate; callers re-filter
        client-side when they depend on it.
        """
        raise NotImplementedError

    def get_by_id(self, table: str, record_id: str) -> Optional[StoreRecord]:
        raise NotImplementedError

    def insert(self, table: str, fields: Mapping[str, Any]) -> StoreRecord:
        raise NotImplementedError

    def update_by_id(self, table: str, record_id: str, fields: Mapping[str, Any]) -> StoreRecord:
        raise NotImplementedError

    def delete_by_id(self, table: str, record_id: str) -> None:
        raise NotImplementedError
