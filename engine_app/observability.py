"""Timing and outcome events for public engine operations."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from engine_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def instrument_operation(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Run the wrapped call inside ``operation_context`` and log how it ended.

    Failures are logged with their traceback and re-raised unchanged.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with operation_context(operation):
                started = time.perf_counter()
                log_event(LOGGER, logging.DEBUG, "operation_started")
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    log_event(
                        LOGGER, logging.ERROR, "operation_failed", duration_ms=_elapsed_ms(started), exc_info=True
                    )
                    raise
                log_event(
                    LOGGER,
                    logging.INFO,
                    "operation_completed",
                    duration_ms=_elapsed_ms(started),
                    result_count=len(result) if isinstance(result, (list, tuple)) else None,
                )
                return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
