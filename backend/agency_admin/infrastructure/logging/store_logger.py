"""Colored store logger — ANSI-colored console logging for entity store operations.

Provides a StoreLogger with color-coded output per operation, making it
easy to follow loads, mutations and bulk actions in the terminal.

Color scheme:
    🔵 Blue    — Load
    🟢 Green   — Create
    🟡 Yellow  — Update
    🟣 Magenta — Delete
    🟠 Cyan    — Bulk actions
    🔴 Red     — Errors
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


# ── Operation Definitions ────────────────────────────────────────────

class StoreOperation:
    """Predefined store operations with colors and icons."""

    LOAD = ("LOAD", _Colors.BLUE, "📥")
    CREATE = ("CREATE", _Colors.GREEN, "➕")
    UPDATE = ("UPDATE", _Colors.YELLOW, "✏️")
    DELETE = ("DELETE", _Colors.MAGENTA, "🗑️")
    BULK = ("BULK", _Colors.CYAN, "📦")
    ERROR = ("ERROR", _Colors.RED, "❌")


# ── StoreLogger ──────────────────────────────────────────────────────

class StoreLogger:
    """Color-coded logger for one entity store.

    Usage:
        log = StoreLogger("users")
        with log.timed_step(StoreOperation.LOAD, "Loading profiles"):
            rows = await gateway.select("profiles")
        log.detail("Loaded rows", count=len(rows))
    """

    def __init__(self, store_name: str):
        self._logger = logging.getLogger(f"agency_admin.stores.{store_name}")

    def step_start(self, op: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = op
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.debug(formatted + self._details(kwargs))

    def step_complete(self, op: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = op
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._details(kwargs))

    def step_error(self, op: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        label, _, icon = op
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.warning(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.debug(formatted + self._details(kwargs))

    @staticmethod
    def _details(kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return ""
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f" {_Colors.GRAY}({details}){_Colors.RESET}"

    @contextmanager
    def timed_step(self, op: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Exceptions are logged and re-raised unchanged.
        """
        self.step_start(op, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(op, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(op, f"{message} — {elapsed:.2f}s", **kwargs)
