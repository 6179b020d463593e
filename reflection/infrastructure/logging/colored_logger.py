"""Colored stage logger: ANSI-colored console tracing for the data core.

Color scheme:
    Green   LOAD (reading collections)
    Blue    FLUSH (write-through saves)
    Yellow  REPAIR (current-plan recovery)
    Magenta SESSION (focus session lifecycle)
    Red     ERROR
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


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
    GRAY = "\033[90m"


class StoreStage:
    """Predefined stages as (label, color) pairs."""

    LOAD = ("LOAD", _Colors.GREEN)
    FLUSH = ("FLUSH", _Colors.BLUE)
    REPAIR = ("REPAIR", _Colors.YELLOW)
    SESSION = ("SESSION", _Colors.MAGENTA)
    ERROR = ("ERROR", _Colors.RED)


def _details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    joined = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({joined}){_Colors.RESET}"


class StoreLogger:
    """Stage-colored wrapper around a standard logger.

    Usage:
        slog = StoreLogger("EntityStore")
        slog.step(StoreStage.REPAIR, "Selected latest plan", plan_id=plan.id)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def step(self, stage: tuple[str, str], message: str, **kwargs: Any) -> None:
        label, color = stage
        self._logger.info(
            f"{color}{_Colors.BOLD}[{label}]{_Colors.RESET} {color}{message}{_Colors.RESET}"
            + _details(kwargs)
        )

    def debug(self, stage: tuple[str, str], message: str, **kwargs: Any) -> None:
        label, color = stage
        self._logger.debug(f"{color}[{label}]{_Colors.RESET} {message}" + _details(kwargs))

    def warning(self, stage: tuple[str, str], message: str, **kwargs: Any) -> None:
        label, _ = stage
        self._logger.warning(
            f"{_Colors.YELLOW}[{label}] {message}{_Colors.RESET}" + _details(kwargs)
        )

    def error(self, stage: tuple[str, str], message: str, error: Exception | None = None) -> None:
        label, _ = stage
        formatted = f"{_Colors.RED}{_Colors.BOLD}[{label}]{_Colors.RESET} {_Colors.RED}{message}{_Colors.RESET}"
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    @contextmanager
    def timed_step(self, stage: tuple[str, str], message: str, **kwargs: Any):
        """Log start/end of a step with elapsed time; failures are logged and re-raised."""
        self.debug(stage, f"{message}...", **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.error(stage, f"{message} failed after {elapsed:.3f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step(stage, f"{message} ({elapsed:.3f}s)", **kwargs)
