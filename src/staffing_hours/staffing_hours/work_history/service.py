from __future__ import annotations

import threading
from datetime import date
from typing import Optional

from ..common.cache import CacheKeys, ExpiringCache, invalidate_hours_related_caches
from ..common.logger import get_logger
from ..common.timezone import TimeNormalizer
from ..common.validators import optional_non_negative_number
from ..core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError
from ..recruitment.repository import RecruitmentRepository
from .model import NewWorkHistory, WorkHistoryEntry
from .repository import WorkHistoryRepository

logger = get_logger("work_history.service")

Window = tuple[Optional[date], Optional[date]]


class WorkHistoryLedger:
    """Employee <-> staffing request assignments.

    Validation on add/update, in order:
      1) the referenced request exists (NotFoundError)
      2) both dates present and ``to_date >= from_date``
      3) hourly rate, when given, is a non-negative number
      4) the range lies inside the request's own window
      5) no overlap with the employee's other assignments (ConflictError)

    Writes for one employee are serialized by an in-process lock so the overlap
    check and the insert cannot interleave with another write for that employee.
    Other processes writing to the same store are not covered.
    """

    def __init__(
        self,
        entries: WorkHistoryRepository,
        requests: RecruitmentRepository,
        cache: ExpiringCache,
        normalizer: TimeNormalizer,
        *,
        cache_ttl: Optional[float] = None,
    ):
        self._entries = entries
        self._requests = requests
        self._cache = cache
        self._normalizer = normalizer
        self._cache_ttl = cache_ttl
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, employee_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(employee_id, threading.Lock())

    # -------- Reads --------
    def load_all(self) -> list[WorkHistoryEntry]:
        cached = self._cache.get(CacheKeys.WORK_HISTORY_ALL)
        if cached is not None:
            return list(cached)

        entries = self._entries.list_all()
        kept = []
        for entry in entries:
            if not entry.employee_id or not entry.request_no:
                logger.warning("Skipping work history record %s without employee id or request no", entry.record_id)
                continue
            kept.append(entry)
        self._cache.set(CacheKeys.WORK_HISTORY_ALL, kept, self._cache_ttl)
        return list(kept)

    def get_all(self) -> list[WorkHistoryEntry]:
        try:
            return self.load_all()
        except StoreError as exc:
            logger.error("Failed to load work history (%s): %s", exc.code, exc.message)
            return []

    def get_by_employee(self, employee_id: str) -> list[WorkHistoryEntry]:
        try:
            return list(self._entries.list_by_employee((employee_id or "").strip()))
        except StoreError as exc:
            logger.error("Failed to load work history of %s (%s): %s", employee_id, exc.code, exc.message)
            return []

    def get_by_id(self, record_id: str) -> WorkHistoryEntry:
        entry = self._entries.get_by_id(record_id)
        if entry is None:
            raise NotFoundError(f"Không tìm thấy lịch sử công việc với ID: {record_id}")
        return entry

    def check_exists(self, employee_id: str, request_no: str) -> bool:
        """Duplicate guard; store failures propagate so a guard never silently passes."""
        return any(e.request_no == request_no for e in self._entries.list_by_employee(employee_id))

    # -------- Validation --------
    def _request_window(self, request_no: str) -> Window:
        rows = self._requests.list_by_no(request_no)
        if not rows:
            raise NotFoundError(f"Không tìm thấy đề xuất tuyển dụng với mã: {request_no}")
        starts = [r.from_date for r in rows if r.from_date]
        ends = [r.to_date for r in rows if r.to_date]
        return (min(starts) if starts else None, max(ends) if ends else None)

    def _validate_fields(self, data: NewWorkHistory, window: Window) -> tuple[date, date, Optional[float]]:
        if not data.from_date or not data.to_date:
            raise ValidationError("Từ ngày và Đến ngày là bắt buộc.")
        if not self._normalizer.is_valid_date(data.from_date) or not self._normalizer.is_valid_date(data.to_date):
            raise ValidationError("Định dạng ngày không hợp lệ.")

        from_date = self._normalizer.to_date(data.from_date)
        to_date = self._normalizer.to_date(data.to_date)
        if self._normalizer.is_after(from_date, to_date):
            raise ValidationError("Đến ngày phải lớn hơn hoặc bằng Từ ngày.", "INVALID_DATE_RANGE")

        hourly_rate = optional_non_negative_number(data.hourly_rate, "Mức lương/giờ")

        request_start, request_end = window
        # Either bound of the request window may be missing; check the ones present.
        starts_early = request_start is not None and self._normalizer.is_before(from_date, request_start)
        ends_late = request_end is not None and self._normalizer.is_after(to_date, request_end)
        if starts_early or ends_late:
            raise ValidationError(
                f"Khoảng ngày làm việc ({self._normalizer.format_date(from_date)} - {self._normalizer.format_date(to_date)}) "
                f"phải nằm trong khoảng ngày của đề xuất tuyển dụng "
                f"({self._normalizer.format_date(request_start)} - {self._normalizer.format_date(request_end)}).",
                "INVALID_DATE_RANGE",
            )
        return from_date, to_date, hourly_rate

    def _check_overlap(self, employee_id: str, from_date: date, to_date: date, *, exclude_id: Optional[str] = None) -> None:
        # Read the store directly: a stale cache or a degraded read must not let an overlap through.
        windows: dict[str, Window] = {}
        for old in self._entries.list_by_employee(employee_id):
            if old.record_id == exclude_id:
                continue

            start, end = old.from_date, old.to_date
            if start is None or end is None:
                if old.request_no not in windows:
                    try:
                        windows[old.request_no] = self._request_window(old.request_no)
                    except NotFoundError:
                        logger.warning("Work history %s references unknown request %s", old.record_id, old.request_no)
                        windows[old.request_no] = (None, None)
                start = start or windows[old.request_no][0]
                end = end or windows[old.request_no][1]
            if start is None or end is None:
                continue

            if self._normalizer.date_ranges_overlap(from_date, to_date, start, end):
                fmt = self._normalizer.format_date
                raise ConflictError(
                    f"Khoảng thời gian làm việc từ {fmt(from_date)} đến {fmt(to_date)} bị trùng với lịch sử làm việc cũ "
                    f"(từ {fmt(start)} đến {fmt(end)}, mã đề xuất {old.request_no}).",
                    "DATE_OVERLAP_CONFLICT",
                )

    @staticmethod
    def _require_keys(data: NewWorkHistory) -> tuple[str, str]:
        employee_id = (data.employee_id or "").strip()
        request_no = (data.request_no or "").strip()
        if not employee_id or not request_no:
            raise ValidationError("Mã nhân viên và Request No. là bắt buộc")
        return employee_id, request_no

    # -------- Writes --------
    def add(self, data: NewWorkHistory) -> WorkHistoryEntry:
        employee_id, request_no = self._require_keys(data)

        with self._lock_for(employee_id):
            window = self._request_window(request_no)
            from_date, to_date, hourly_rate = self._validate_fields(data, window)
            self._check_overlap(employee_id, from_date, to_date)
            entry = self._entries.create(
                employee_id=employee_id,
                request_no=request_no,
                from_date=from_date,
                to_date=to_date,
                hourly_rate=hourly_rate,
            )

        invalidate_hours_related_caches(self._cache)
        logger.info("Work history %s added: %s -> %s (%s - %s)", entry.record_id, employee_id, request_no, from_date, to_date)
        return entry

    def add_batch(self, items: list[NewWorkHistory]) -> list[WorkHistoryEntry]:
        """Add several assignments in order; stops at the first failure.

        Entries added before the failure stay in the store.
        """
        added = []
        for data in items:
            employee_id, request_no = self._require_keys(data)
            if self.check_exists(employee_id, request_no):
                raise ConflictError(f"Work History đã tồn tại: {employee_id} - {request_no}", "DUPLICATE_WORK_HISTORY")
            added.append(self.add(data))
        return added

    def update(self, record_id: str, data: NewWorkHistory) -> WorkHistoryEntry:
        employee_id, request_no = self._require_keys(data)

        with self._lock_for(employee_id):
            self.get_by_id(record_id)
            window = self._request_window(request_no)
            from_date, to_date, hourly_rate = self._validate_fields(data, window)
            self._check_overlap(employee_id, from_date, to_date, exclude_id=record_id)
            entry = self._entries.update(
                record_id,
                employee_id=employee_id,
                request_no=request_no,
                from_date=from_date,
                to_date=to_date,
                hourly_rate=hourly_rate,
            )

        invalidate_hours_related_caches(self._cache)
        logger.info("Work history %s updated", record_id)
        return entry

    def delete(self, record_id: str) -> None:
        current = self.get_by_id(record_id)
        with self._lock_for(current.employee_id):
            try:
                self._entries.delete(record_id)
            except StoreError as exc:
                if exc.is_not_found:
                    raise NotFoundError(f"Không tìm thấy lịch sử công việc với ID: {record_id}")
                raise

        invalidate_hours_related_caches(self._cache)
        logger.info("Work history %s deleted", record_id)

    def delete_all_by_employee(self, employee_id: str) -> int:
        """Best-effort: every delete is attempted; any failure is reported afterwards."""
        employee_id = (employee_id or "").strip()
        with self._lock_for(employee_id):
            entries = list(self._entries.list_by_employee(employee_id))
            deleted = 0
            failed = 0
            for entry in entries:
                try:
                    self._entries.delete(entry.record_id)
                    deleted += 1
                except StoreError as exc:
                    failed += 1
                    logger.error("Failed to delete work history %s (%s): %s", entry.record_id, exc.code, exc.message)

        if deleted:
            invalidate_hours_related_caches(self._cache)
        if failed:
            raise StoreError(
                f"Failed to delete {failed} out of {len(entries)} work history records",
                "PARTIAL_DELETE",
                operation="delete_all_work_history",
            )
        logger.info("Deleted %d work history records of %s", deleted, employee_id)
        return deleted
