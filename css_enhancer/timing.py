"""Timing helpers for pipeline stages.

Both helpers log ``[PERF]`` lines with ``duration_ms`` and ``operation``
extras at DEBUG, or at ERROR when the timed code raises.
"""

import functools
import time
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from .enhancer_logging import get_logger

P = ParamSpec("P")
T = TypeVar("T")


class PerformanceTimer:
    """Context manager for timing code blocks.

    The duration is available as ``duration_ms`` after the context exits.

    Example:
        >>> with PerformanceTimer("enhance") as timer:
        ...     result = run()
        >>> print(f"Enhanced in {timer.duration_ms:.2f}ms")
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "PerformanceTimer":
        self.start_time = time.perf_counter()
        return self

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the timer started, usable inside the block."""
        return (time.perf_counter() - self.start_time) * 1000

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.duration_ms = self.elapsed_ms
        if not self.auto_log:
            return

        extra = {"duration_ms": self.duration_ms, "operation": self.operation_name}
        if exc_type is None:
            get_logger().debug(
                f"[PERF] {self.operation_name}: {self.duration_ms:.2f}ms", extra=extra
            )
        else:
            get_logger().error(
                f"[PERF] {self.operation_name} failed after "
                f"{self.duration_ms:.2f}ms: {exc_val}",
                extra=extra,
            )


def timed(
    operation_name: str | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator timing every call of a function with PerformanceTimer.

    Args:
        operation_name: Name logged for the stage (defaults to function name).
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with PerformanceTimer(operation_name or func.__name__):
                return func(*args, **kwargs)

        return wrapper

    return decorator
