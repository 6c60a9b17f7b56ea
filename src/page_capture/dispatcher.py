"""
Produce the requested artifact from a ready page.
"""

from typing import Any, Awaitable, Callable

from pyppeteer.page import Page

from .compression import compress_pdf
from .errors import CaptureFailure, CompressionFailure, failure_kind
from .log import log_exception, timestamp
from .models import DEFAULT_PDF_OPTIONS, CaptureParameters, CaptureType

Compressor = Callable[[bytes], Awaitable[bytes]]


def strip_path(options: dict[str, Any] | None) -> dict[str, Any]:
    """Copy of ``options`` without ``path``, artifacts never go to local disk."""
    return {k: v for k, v in (options or {}).items() if k != 'path'}


async def take_screenshot(page: Page, options: dict[str, Any] | None = None) -> bytes:
    """Screenshot ``page`` as binary image data."""
    options = strip_path(options)
    media_type = options.pop('emulateMediaType', None)

    with failure_kind(CaptureFailure):
        if media_type:
            await log_exception('page.emulateMedia', lambda: page.emulateMedia(media_type))

        return await log_exception(
            'page.screenshot',
            lambda: page.screenshot({**options, 'encoding': 'binary'}),
        )


async def print_pdf(
    page: Page,
    options: dict[str, Any] | None = None,
    compress: Compressor = compress_pdf,
    request_id: str | None = None,
) -> bytes:
    """Print ``page`` to PDF and return the compressed document."""
    options = {**DEFAULT_PDF_OPTIONS, **strip_path(options)}
    tag = f"[Capture] {request_id}" if request_id else "[Capture]"

    with failure_kind(CaptureFailure):
        data = await log_exception('page.pdf', lambda: page.pdf(options))
    print(f"{tag} PDF {timestamp()}", flush=True)

    with failure_kind(CompressionFailure):
        compressed = await log_exception('compressPdf', lambda: compress(data))
    print(f"{tag} Optimized {timestamp()}", flush=True)

    return compressed


async def dispatch(
    page: Page,
    capture_type: CaptureType,
    params: CaptureParameters,
    compress: Compressor = compress_pdf,
    request_id: str | None = None,
) -> bytes:
    """Capture ``page`` in the mode given by ``capture_type``."""
    if capture_type == CaptureType.SCREENSHOT:
        return await take_screenshot(page, params.screenshot_options)
    return await print_pdf(page, params.pdf_options, compress, request_id)
