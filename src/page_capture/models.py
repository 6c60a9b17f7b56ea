"""
Capture request types and rendering defaults.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import InvalidRequest


DEFAULT_URL = "about:blank"

DEFAULT_NAVIGATION_TIMEOUT = 300000  # ms

# Element the rendered content adds once it is laid out and ready
READY_SELECTOR = "#pdf-ready"

# Some common notebook screen resolution, callers override it
DEFAULT_VIEWPORT = {
    "width": 1200,
    "height": 800,
}

# Merged under caller supplied pdf options
DEFAULT_PDF_OPTIONS = {
    "printBackground": True,
    "preferCSSPageSize": True,
    "timeout": DEFAULT_NAVIGATION_TIMEOUT,
    "margin": {
        "top": "0",
        "right": "0",
        "bottom": "0",
        "left": "0",
    },
}

URL_WAIT_UNTIL = ["domcontentloaded", "load", "networkidle2", "networkidle0"]
HTML_WAIT_UNTIL = ["load"]


class CaptureType(str, Enum):
    """Artifact kinds a capture can produce."""
    SCREENSHOT = "screenshot"
    PDF = "pdf"

    @classmethod
    def coerce(cls, value: "CaptureType | str") -> "CaptureType":
        try:
            return cls(value)
        except ValueError:
            raise InvalidRequest(f"Unknown capture type: {value!r}") from None


@dataclass
class CaptureParameters:
    """
    What to render and how to capture it.

    ``html`` takes precedence over ``url``; with neither set the blank page
    is rendered. The option dicts are handed to Chromium unchanged apart
    from default merging and ``path`` stripping.
    """
    url: str | None = None
    html: str | None = None
    timeout: int | None = None  # ms, page navigation timeout
    wait_until: list[str] | None = None
    viewport: dict[str, Any] | None = None
    pdf_options: dict[str, Any] | None = None
    screenshot_options: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CaptureParameters":
        """Build parameters from a dict using the camelCase wire names."""
        if not isinstance(data, dict):
            raise InvalidRequest("Capture parameters should be a mapping")

        wait_until = data.get("waitUntil", data.get("wait_until"))
        if isinstance(wait_until, str):
            wait_until = [wait_until]

        return cls(
            url=data.get("url"),
            html=data.get("html"),
            timeout=data.get("timeout"),
            wait_until=list(wait_until) if wait_until else None,
            viewport=data.get("viewport"),
            pdf_options=data.get("pdfOptions", data.get("pdf_options")),
            screenshot_options=data.get("screenshotOptions", data.get("screenshot_options")),
        )
