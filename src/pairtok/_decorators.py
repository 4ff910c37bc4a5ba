"""Timing decorator for long-running learning calls."""

import functools
import logging
import time
from typing import Callable


def format_elapsed(seconds: float) -> str:
    """Render a duration as seconds below one minute, minutes above."""
    if seconds >= 60:
        return f"{seconds / 60:.2f} mins"
    return f"{seconds:.2f} secs"


def measure_time(func: Callable) -> Callable:
    """
    Log how long each call to ``func`` takes.

    The record goes to the logger of the module that defines ``func`` at INFO
    and states whether the call returned or raised.
    """
    func_log = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        outcome = "failed"
        try:
            value = func(*args, **kwargs)
            outcome = "finished"
            return value
        finally:
            func_log.info(
                "%s %s after %s",
                func.__qualname__,
                outcome,
                format_elapsed(time.perf_counter() - start),
            )

    return wrapper
