from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    default_code = "VALIDATION_ERROR"


class ConflictError(DomainError):
    """Raised when a write collides with existing data (overlap, duplicate)."""

    default_code = "CONFLICT"


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    default_code = "NOT_FOUND"


# Lark error codes we know how to name; anything else is LARK_API_ERROR.
_LARK_CODES = {
    99991663: ("LARK_AUTH_ERROR", "App access token invalid"),
    99991664: ("LARK_AUTH_ERROR", "Tenant access token invalid"),
    99991665: ("LARK_AUTH_ERROR", "User access token invalid"),
    230002: ("LARK_BASE_NOT_FOUND", "Base not found"),
    230003: ("LARK_TABLE_NOT_FOUND", "Table not found"),
    230004: ("LARK_RECORD_NOT_FOUND", "Record not found"),
    1254006: ("LARK_RATE_LIMIT", "Rate limit exceeded"),
}


class StoreError(DomainError):
    """Raised when the backing record store fails (network, auth, rate limit...)."""

    default_code = "STORE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, *, operation: str = ""):
        super().__init__(message, code)
        self.operation = operation

    @classmethod
    def from_lark_code(cls, lark_code: int, msg: str = "", *, operation: str = "") -> "StoreError":
        code, text = _LARK_CODES.get(int(lark_code), ("LARK_API_ERROR", f"Lark API Error: {msg or 'unknown'}"))
        return cls(f"{text} (code: {lark_code})", code, operation=operation)

    @property
    def is_not_found(self) -> bool:
        return self.code in ("LARK_RECORD_NOT_FOUND", "RECORD_NOT_FOUND")
