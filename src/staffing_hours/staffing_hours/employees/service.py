from __future__ import annotations

from typing import Optional

from ..common.cache import CacheKeys, ExpiringCache
from ..common.logger import get_logger
from ..core.exceptions import StoreError
from .model import Employee
from .repository import EmployeeRepository

logger = get_logger("employees.service")


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, cache: ExpiringCache, *, cache_ttl: Optional[float] = None):
        self._employees = employees
        self._cache = cache
        self._cache_ttl = cache_ttl

    def load_all_employees(self) -> list[Employee]:
        cached = self._cache.get(CacheKeys.EMPLOYEES_ALL)
        if cached is not None:
            return list(cached)

        employees = [e for e in self._employees.list_all() if e.employee_id]
        self._cache.set(CacheKeys.EMPLOYEES_ALL, employees, self._cache_ttl)
        return list(employees)

    def get_all_employees(self) -> list[Employee]:
        try:
            return self.load_all_employees()
        except StoreError as exc:
            logger.error("Failed to load employees (%s): %s", exc.code, exc.message)
            return []

    def load_employee_map(self) -> dict[str, Employee]:
        return {e.employee_id: e for e in self.load_all_employees()}

    def get_employee_map(self) -> dict[str, Employee]:
        return {e.employee_id: e for e in self.get_all_employees()}

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        return self.get_employee_map().get((employee_id or "").strip())
