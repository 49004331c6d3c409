from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Mapping, Optional

from .attendance.aggregator import DailyHoursAggregator
from .attendance.calculator import HoursCalculator
from .attendance.factory import DEFAULT_POSITION_POLICIES, HoursStrategyFactory, parse_position_policies
from .attendance.service import AttendanceService
from .attendance.store_attendance_repository import StoreAttendanceRepository
from .common.cache import ExpiringCache
from .common.timezone import TimeNormalizer
from .core.constants import DEFAULT_CACHE_TTL_SECONDS, DEFAULT_TIMEZONE_OFFSET_HOURS, FIXED_SHIFT_CUTOFF
from .core.enums import HoursAttribution
from .database.connection import DBConfig, DatabaseConnection
from .employees.service import EmployeeService
from .employees.store_employee_repository import StoreEmployeeRepository
from .recruitment.aggregator import RecruitmentHoursAggregator
from .recruitment.hours_source import HoursSource, build_hours_source
from .recruitment.service import RecruitmentService
from .recruitment.store_hours_summary_repository import StoreHoursSummaryRepository
from .recruitment.store_recruitment_repository import StoreRecruitmentRepository
from .reports.service import ReportService
from .store.gateway import RecordStoreGateway
from .store.lark_gateway import LarkConfig, LarkRecordStore
from .store.mysql_gateway import MySQLRecordStore
from .work_history.service import WorkHistoryLedger
from .work_history.store_work_history_repository import StoreWorkHistoryRepository


@dataclass(frozen=True)
class Container:
    gateway: RecordStoreGateway
    cache: ExpiringCache
    normalizer: TimeNormalizer

    attendance_service: AttendanceService
    employee_service: EmployeeService
    work_history_ledger: WorkHistoryLedger
    recruitment_service: RecruitmentService
    hours_source: HoursSource
    recruitment_hours: RecruitmentHoursAggregator
    report_service: ReportService


def parse_cutoff(value: Any) -> time:
    if isinstance(value, time):
        return value
    if not value:
        return FIXED_SHIFT_CUTOFF
    return datetime.strptime(str(value).strip(), "%H:%M").time()


def build_gateway(
    *,
    store_backend: str,
    lark_config: Optional[Mapping[str, Any]] = None,
    lark_tables: Optional[Mapping[str, str]] = None,
    db_config: Optional[Mapping[str, Any]] = None,
) -> RecordStoreGateway:
    backend = (store_backend or "lark").lower()
    if backend == "mysql":
        return MySQLRecordStore(DatabaseConnection(DBConfig.from_dict(db_config or {})))
    if backend == "lark":
        return LarkRecordStore(LarkConfig.from_settings(lark_config or {}, lark_tables or {}))
    raise ValueError(f"Unknown STORE_BACKEND: {store_backend}")


def build_container(
    *,
    store_backend: str = "lark",
    lark_config: Optional[Mapping[str, Any]] = None,
    lark_tables: Optional[Mapping[str, str]] = None,
    db_config: Optional[Mapping[str, Any]] = None,
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
    timezone_offset_hours: int = DEFAULT_TIMEZONE_OFFSET_HOURS,
    fixed_shift_cutoff: Any = FIXED_SHIFT_CUTOFF,
    hours_attribution: str = HoursAttribution.SUMMARY_TABLE.value,
    position_policies: Optional[Mapping[str, str]] = None,
    gateway: Optional[RecordStoreGateway] = None,
) -> Container:
    gateway = gateway or build_gateway(
        store_backend=store_backend,
        lark_config=lark_config,
        lark_tables=lark_tables,
        db_config=db_config,
    )
    cache = ExpiringCache(default_ttl=cache_ttl_seconds)
    normalizer = TimeNormalizer(timezone_offset_hours)

    factory = HoursStrategyFactory(
        position_policies=parse_position_policies(position_policies) if position_policies else dict(DEFAULT_POSITION_POLICIES),
        cutoff=parse_cutoff(fixed_shift_cutoff),
    )
    aggregator = DailyHoursAggregator(HoursCalculator(normalizer, factory=factory), normalizer)

    attendance_service = AttendanceService(
        StoreAttendanceRepository(gateway, normalizer),
        cache,
        normalizer,
        aggregator=aggregator,
    )
    employee_service = EmployeeService(StoreEmployeeRepository(gateway), cache)
    recruitment_repo = StoreRecruitmentRepository(gateway, normalizer)
    recruitment_service = RecruitmentService(
        recruitment_repo,
        StoreHoursSummaryRepository(gateway, normalizer),
        cache,
    )
    work_history_ledger = WorkHistoryLedger(
        StoreWorkHistoryRepository(gateway, normalizer),
        recruitment_repo,
        cache,
        normalizer,
    )
    hours_source = build_hours_source(
        HoursAttribution(hours_attribution),
        recruitment=recruitment_service,
        attendance=attendance_service,
        normalizer=normalizer,
    )
    recruitment_hours = RecruitmentHoursAggregator(
        recruitment_service,
        work_history_ledger,
        employee_service,
        hours_source,
        cache,
        normalizer,
    )
    report_service = ReportService(recruitment_hours, attendance_service, employee_service, normalizer)

    return Container(
        gateway=gateway,
        cache=cache,
        normalizer=normalizer,
        attendance_service=attendance_service,
        employee_service=employee_service,
        work_history_ledger=work_history_ledger,
        recruitment_service=recruitment_service,
        hours_source=hours_source,
        recruitment_hours=recruitment_hours,
        report_service=report_service,
    )
