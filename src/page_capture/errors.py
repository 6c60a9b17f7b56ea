"""
Error taxonomy for page capture.

Every failure is logged once where it happens (see ``log.log_exception``)
and then classified into one of the kinds below. The engine or OS error
that caused it stays reachable as ``__cause__``.
"""

from contextlib import contextmanager
from typing import Iterator


class CaptureError(Exception):
    """Base class for all capture failures."""
    pass


class InvalidRequest(CaptureError):
    """Raised when capture parameters are missing or malformed."""
    pass


class EngineAcquisitionFailure(CaptureError):
    """Raised when launching or connecting to Chromium fails."""
    pass


class NavigationFailure(CaptureError):
    """Raised when loading content or a readiness wait fails or times out."""
    pass


class CaptureFailure(CaptureError):
    """Raised when Chromium fails to produce a screenshot or PDF."""
    pass


class CompressionFailure(CaptureError):
    """Raised when Ghostscript or its scratch files fail."""
    pass


class TeardownFailure(CaptureError):
    """Raised when closing the page or the browser fails."""
    pass


@contextmanager
def failure_kind(kind: type[CaptureError]) -> Iterator[None]:
    """
    Re-raise any non-taxonomy exception from the block as ``kind``.

    The message is kept as-is and the original exception is chained.
    """
    try:
        yield
    except CaptureError:
        raise
    except Exception as e:
        raise kind(str(e)) from e
