"""
Uniform failure logging around awaited operations.
"""

import sys
from datetime import datetime
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")


def timestamp() -> str:
    """Current local time with millisecond precision."""
    return datetime.now().isoformat(sep=" ", timespec="milliseconds")


async def log_exception(when: str, process: Callable[[], Awaitable[T]]) -> T:
    """
    Await ``process()`` and return its result.

    On failure, print a timestamped line naming ``when`` and re-raise the
    exception unchanged. Nothing is retried or swallowed.
    """
    try:
        return await process()
    except Exception as e:
        print(f'[{timestamp()}] Exception at {when}: "{e}"', file=sys.stderr, flush=True)
        raise
