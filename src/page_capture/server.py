"""
HTTP API for page capture.

Provides:
- GET /health - Service status
- POST /screenshot - Render content and return an image
- POST /pdf - Render content and return a compressed PDF

Run with:
    uvicorn page_capture.server:app
"""

from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .errors import CaptureError, InvalidRequest, NavigationFailure
from .models import CaptureParameters, CaptureType
from .session import PageCapturer


class CaptureRequestModel(BaseModel):
    """Request body shared by /screenshot and /pdf."""

    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    html: Optional[str] = None
    timeout: Optional[int] = None
    wait_until: Optional[list[str]] = Field(default=None, alias="waitUntil")
    viewport: Optional[dict[str, Any]] = None
    pdf_options: Optional[dict[str, Any]] = Field(default=None, alias="pdfOptions")
    screenshot_options: Optional[dict[str, Any]] = Field(default=None, alias="screenshotOptions")

    def to_parameters(self) -> CaptureParameters:
        return CaptureParameters(**self.model_dump(by_alias=False))


def media_type_for(capture_type: CaptureType, params: CaptureParameters) -> str:
    """Content type of the artifact ``params`` produces."""
    if capture_type == CaptureType.PDF:
        return "application/pdf"
    image_type = (params.screenshot_options or {}).get("type", "png")
    return "image/jpeg" if image_type in ("jpeg", "jpg") else f"image/{image_type}"


def create_app(capturer: PageCapturer | None = None) -> FastAPI:
    """FastAPI app capturing through ``capturer`` (default: from environment)."""
    web_app = FastAPI(
        title="Page Capture API",
        description="Render pages in headless Chromium and capture them",
        version=__version__,
    )

    def get_capturer() -> PageCapturer:
        nonlocal capturer
        if capturer is None:
            capturer = PageCapturer.from_settings()
        return capturer

    async def run_capture(capture_type: CaptureType, request: CaptureRequestModel | None) -> Response:
        # a missing body reaches the capturer as None and comes back as a 400
        params = request.to_parameters() if request is not None else None
        try:
            data = await get_capturer().capture(capture_type, params)
        except InvalidRequest as e:
            print(f"[API] Invalid request: {e}", flush=True)
            raise HTTPException(status_code=400, detail=str(e))
        except NavigationFailure as e:
            print(f"[API] {capture_type.value} navigation error: {e}", flush=True)
            raise HTTPException(status_code=504, detail=str(e))
        except CaptureError as e:
            print(f"[API] {capture_type.value} error: {e}", flush=True)
            raise HTTPException(status_code=500, detail=str(e))

        return Response(content=data, media_type=media_type_for(capture_type, params))

    @web_app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": "page-capture",
            "version": __version__,
            "capabilities": [t.value for t in CaptureType],
        }

    @web_app.post("/screenshot")
    async def screenshot(request: Optional[CaptureRequestModel] = None):
        """Render the content and return a screenshot."""
        return await run_capture(CaptureType.SCREENSHOT, request)

    @web_app.post("/pdf")
    async def pdf(request: Optional[CaptureRequestModel] = None):
        """Render the content and return a compressed PDF."""
        return await run_capture(CaptureType.PDF, request)

    return web_app


app = create_app()
