"""
Page Capture - Render pages in headless Chromium and capture them.

Usage:
    from page_capture import capture, CaptureType

    pdf_bytes = await capture(CaptureType.PDF, {"html": html})
"""

__version__ = "0.1.0"

# Public API exports
from .config import EngineAcquisitionStrategy, EngineMode, Settings, get_settings
from .errors import (
    CaptureError,
    InvalidRequest,
    EngineAcquisitionFailure,
    NavigationFailure,
    CaptureFailure,
    CompressionFailure,
    TeardownFailure,
)
from .models import CaptureParameters, CaptureType
from .compression import compress_pdf
from .session import BrowserSession, PageCapturer, capture

__all__ = [
    # Version
    "__version__",
    # Main entry points
    "capture",
    "PageCapturer",
    "BrowserSession",
    "compress_pdf",
    # Request types
    "CaptureParameters",
    "CaptureType",
    # Configuration
    "EngineAcquisitionStrategy",
    "EngineMode",
    "Settings",
    "get_settings",
    # Exceptions
    "CaptureError",
    "InvalidRequest",
    "EngineAcquisitionFailure",
    "NavigationFailure",
    "CaptureFailure",
    "CompressionFailure",
    "TeardownFailure",
]
