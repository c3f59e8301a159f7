"""Shared error codes and exceptions for the catalogue backend."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    STATE_ERROR = "STATE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    NAME_CONFLICT = "NAME_CONFLICT"
    SLUG_CONFLICT = "SLUG_CONFLICT"


class BackendError(RuntimeError):
    """Exception carrying a structured error code for CLI callers."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:  # pragma: no cover - formatting sugar
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value
