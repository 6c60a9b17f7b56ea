"""
Capture orchestration: one browser, one page, one artifact per call.

We trust the content we open in Chromium, so it is launched with
``--no-sandbox`` and site isolation disabled. Running without a sandbox
is strongly discouraged for untrusted content.
See https://github.com/puppeteer/puppeteer/blob/main/docs/troubleshooting.md
"""

import functools
import uuid
from pathlib import Path

from pyppeteer import connect, launch
from pyppeteer.browser import Browser
from pyppeteer.page import Page

from .compression import compress_pdf
from .config import EngineAcquisitionStrategy, EngineMode, get_settings
from .dispatcher import dispatch
from .errors import (
    EngineAcquisitionFailure,
    InvalidRequest,
    NavigationFailure,
    TeardownFailure,
    failure_kind,
)
from .loader import load_content
from .log import log_exception, timestamp
from .models import (
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_VIEWPORT,
    CaptureParameters,
    CaptureType,
)


LAUNCH_ARGS = [
    '--disable-accelerated-2d-canvas',
    '--disable-background-networking',
    '--disable-background-timer-throttling',
    '--disable-backgrounding-occluded-windows',
    '--disable-breakpad',
    '--disable-component-extensions-with-background-pages',
    '--disable-dev-shm-usage',
    '--disable-extensions',
    '--disable-features=TranslateUI,BlinkGenPropertyTrees,IsolateOrigins,site-per-process',
    '--disable-gpu',
    '--disable-infobars',
    '--disable-ipc-flooding-protection',
    '--disable-notifications',
    '--disable-setuid-sandbox',
    '--enable-features=NetworkService,NetworkServiceInProcess',
    '--font-render-hinting=none',
    '--hide-scrollbars',
    '--mute-audio',
    '--no-first-run',
    '--no-sandbox',  # see module docstring
    '--no-zygote',  # with --single-process about 30% faster
    '--safebrowsing-disable-auto-update',
    '--single-process',
]


class BrowserSession:
    """
    A browser handle and a single page, released on every exit path.

    Usage:
        async with BrowserSession(strategy) as session:
            await session.page.goto(url)

    Local browsers are closed on exit. Remote browsers are only
    disconnected, other captures may be using the same engine.
    """

    def __init__(self, strategy: EngineAcquisitionStrategy, launch_args: list[str] | None = None):
        self.strategy = strategy
        self.launch_args = LAUNCH_ARGS if launch_args is None else launch_args
        self.browser: Browser | None = None
        self.page: Page | None = None
        self._released = False

    async def _acquire(self) -> Browser:
        if self.strategy.mode == EngineMode.REMOTE:
            return await log_exception(
                'puppeteer.connect',
                lambda: connect(browserWSEndpoint=self.strategy.endpoint),
            )

        options = {}
        if self.strategy.executable_path:
            options['executablePath'] = self.strategy.executable_path

        return await log_exception('puppeteer.launch', lambda: launch(
            headless=True,
            args=self.launch_args,
            handleSIGINT=False,
            handleSIGTERM=False,
            handleSIGHUP=False,
            **options,
        ))

    async def _close_page(self) -> None:
        if self.page is not None:
            await self.page.close()

    async def _close_browser(self) -> None:
        if self.strategy.mode == EngineMode.REMOTE:
            await self.browser.disconnect()
        else:
            await self.browser.close()

    async def release(self, in_flight: bool = False) -> None:
        """
        Close the page, then the browser. Runs at most once.

        Failures are logged. They are raised as ``TeardownFailure`` only when
        no other error is already propagating (``in_flight``).
        """
        if self._released or self.browser is None:
            return
        self._released = True

        failures = []

        async def attempt(when, step):
            try:
                await log_exception(when, step)
            except Exception as e:
                failures.append(e)

        # the browser is released even when closing the page is cancelled
        try:
            await attempt('page.close', self._close_page)
        finally:
            await attempt('browser.close', self._close_browser)

        if failures and not in_flight:
            raise TeardownFailure(str(failures[0])) from failures[0]

    async def __aenter__(self) -> "BrowserSession":
        with failure_kind(EngineAcquisitionFailure):
            self.browser = await self._acquire()

        try:
            with failure_kind(EngineAcquisitionFailure):
                self.page = await log_exception('browser.newPage', self.browser.newPage)
        except BaseException:
            await self.release(in_flight=True)
            raise

        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.release(in_flight=exc_type is not None)
        return False


class PageCapturer:
    """
    Renders content in headless Chromium and returns a screenshot or a PDF.

    Every call gets its own browser session, nothing is shared or reused
    between calls.
    """

    def __init__(
        self,
        strategy: EngineAcquisitionStrategy,
        scratch_dir: Path | None = None,
        ghostscript: str | None = None,
        launch_args: list[str] | None = None,
    ):
        self.strategy = strategy
        self.launch_args = launch_args
        self.compress = functools.partial(
            compress_pdf, scratch_dir=scratch_dir, ghostscript=ghostscript,
        )

    @classmethod
    def from_settings(cls) -> "PageCapturer":
        settings = get_settings()
        return cls(
            strategy=settings.strategy,
            scratch_dir=settings.scratch_dir,
            ghostscript=settings.ghostscript,
        )

    async def capture(
        self,
        capture_type: CaptureType | str,
        params: CaptureParameters | dict | None,
    ) -> bytes:
        """
        Render ``params``' content and capture it.

        Args:
            capture_type: ``CaptureType.SCREENSHOT`` or ``CaptureType.PDF``
            params: What to render, as ``CaptureParameters`` or a camelCase dict

        Returns:
            Image bytes, or compressed PDF bytes

        Raises:
            InvalidRequest: If ``params`` is missing or malformed
            EngineAcquisitionFailure: If Chromium cannot be launched or reached
            NavigationFailure: If the content never loads or never gets ready
            CaptureFailure: If Chromium cannot produce the artifact
            CompressionFailure: If Ghostscript fails
            TeardownFailure: If closing the page or browser fails
        """
        if params is None:
            raise InvalidRequest('Capture parameters should be defined')
        if not isinstance(params, CaptureParameters):
            params = CaptureParameters.from_dict(params)
        capture_type = CaptureType.coerce(capture_type)

        request_id = uuid.uuid4().hex[:8]
        print(f"[Capture] {request_id} New {capture_type.value} {timestamp()}", flush=True)

        async with BrowserSession(self.strategy, self.launch_args) as session:
            page = session.page
            page.setDefaultNavigationTimeout(params.timeout or DEFAULT_NAVIGATION_TIMEOUT)

            if params.viewport or capture_type == CaptureType.SCREENSHOT:
                viewport = {**DEFAULT_VIEWPORT, **(params.viewport or {})}
                with failure_kind(NavigationFailure):
                    await log_exception('page.setViewport', lambda: page.setViewport(viewport))

            await load_content(page, params)

            print(f"[Capture] {request_id} Start {timestamp()}", flush=True)
            artifact = await dispatch(page, capture_type, params, self.compress, request_id)

        print(f"[Capture] {request_id} Done {len(artifact)} bytes {timestamp()}", flush=True)
        return artifact


async def capture(
    capture_type: CaptureType | str,
    params: CaptureParameters | dict | None,
) -> bytes:
    """Capture with the process-wide settings (see ``config``)."""
    return await PageCapturer.from_settings().capture(capture_type, params)
