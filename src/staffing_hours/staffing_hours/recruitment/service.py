from __future__ import annotations

from typing import Iterable, Optional

from ..common.cache import CacheKeys, ExpiringCache, cache_key
from ..common.logger import get_logger
from ..core.exceptions import StoreError
from .model import HoursSummaryRow, RequestFilters, StaffingRequest
from .repository import HoursSummaryRepository, RecruitmentRepository

logger = get_logger("recruitment.service")


def hours_by_employee(rows: Iterable[HoursSummaryRow]) -> dict[str, float]:
    """Total hours per employee, accumulated over every summary row of that employee."""
    totals: dict[str, float] = {}
    for row in rows:
        totals[row.employee_id] = totals.get(row.employee_id, 0.0) + row.hours
    return totals


class RecruitmentService:
    """Read side of staffing requests and of the precomputed hours summary table."""

    def __init__(
        self,
        requests: RecruitmentRepository,
        hours_summary: HoursSummaryRepository,
        cache: ExpiringCache,
        *,
        cache_ttl: Optional[float] = None,
    ):
        self._requests = requests
        self._hours_summary = hours_summary
        self._cache = cache
        self._cache_ttl = cache_ttl

    def load_requests(self, filters: Optional[RequestFilters] = None) -> list[StaffingRequest]:
        filters = filters or RequestFilters()
        key = cache_key(CacheKeys.RECRUITMENT_REQUESTS_PREFIX, filters.as_dict())
        cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        requests = self._requests.list_requests(status=filters.status)
        requests = [
            r
            for r in requests
            if r.request_no
            and (not filters.status or r.status == filters.status)
            and (not filters.department or r.department == filters.department)
        ]
        self._cache.set(key, requests, self._cache_ttl)
        return list(requests)

    def get_requests(self, filters: Optional[RequestFilters] = None) -> list[StaffingRequest]:
        try:
            return self.load_requests(filters)
        except StoreError as exc:
            logger.error("Failed to load recruitment requests (%s): %s", exc.code, exc.message)
            return []

    def get_requests_by_no(self, request_no: str) -> list[StaffingRequest]:
        wanted = (request_no or "").strip()
        return [r for r in self.get_requests() if r.request_no == wanted]

    def get_request_by_no(self, request_no: str) -> Optional[StaffingRequest]:
        rows = self.get_requests_by_no(request_no)
        return rows[0] if rows else None

    # -------- "Tổng hợp giờ công" --------
    def load_hours_summary_rows(self) -> list[HoursSummaryRow]:
        cached = self._cache.get(CacheKeys.HOURS_SUMMARY_TABLE)
        if cached is not None:
            return list(cached)

        rows = self._hours_summary.list_rows()
        kept = []
        for row in rows:
            if not row.employee_id:
                logger.warning("Skipping hours summary record %s without employee id", row.record_id)
                continue
            kept.append(row)
        self._cache.set(CacheKeys.HOURS_SUMMARY_TABLE, kept, self._cache_ttl)
        return list(kept)

    def get_hours_summary_rows(self) -> list[HoursSummaryRow]:
        try:
            return self.load_hours_summary_rows()
        except StoreError as exc:
            logger.error("Failed to load hours summary table (%s): %s", exc.code, exc.message)
            return []

    def employee_hours_totals(self) -> dict[str, float]:
        return hours_by_employee(self.get_hours_summary_rows())

    def hourly_rate_map(self) -> dict[str, float]:
        rates: dict[str, float] = {}
        for row in self.get_hours_summary_rows():
            if row.hourly_rate is not None:
                rates[row.employee_id] = row.hourly_rate
        return rates
