"""
Timing helpers for parse and analysis work.
"""

import functools
import logging
import time
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PerformanceTimer:
    """
    Context manager that logs how long a block took.

    The record carries `operation` and `duration_ms` as extra fields. Nothing
    is logged when the block finishes faster than `threshold_ms`.

    Usage:
        with PerformanceTimer("kml_parse", log_level=logging.DEBUG) as timer:
            document = parser.parse(content)
        timer.duration_ms
    """

    def __init__(
        self,
        operation_name: str,
        log_level: int = logging.INFO,
        threshold_ms: Optional[float] = None,
    ):
        self.operation_name = operation_name
        self.log_level = log_level
        self.threshold_ms = threshold_ms
        self.start_time: Optional[float] = None
        self.duration_ms: Optional[float] = None

    def __enter__(self) -> "PerformanceTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return

        self.duration_ms = (time.perf_counter() - self.start_time) * 1000
        if self.threshold_ms is not None and self.duration_ms < self.threshold_ms:
            return

        outcome = "failed" if exc_type is not None else "completed"
        logger.log(
            self.log_level,
            f"{self.operation_name} {outcome} in {self.duration_ms:.2f}ms",
            extra={"operation": self.operation_name, "duration_ms": self.duration_ms},
        )


def log_performance(
    log_level: int = logging.INFO,
    threshold_ms: Optional[float] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that times every call of a function with PerformanceTimer.

    Args:
        log_level: Logging level to use
        threshold_ms: Only log calls slower than this many milliseconds

    Example:
        @log_performance(log_level=logging.DEBUG)
        def analyze(document):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        operation_name = f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with PerformanceTimer(operation_name, log_level, threshold_ms):
                return func(*args, **kwargs)

        return wrapper

    return decorator
