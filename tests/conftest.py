"""
Pytest fixtures for page-capture tests.

The browser is replaced by small in-memory fakes so the orchestration can
be tested without Chromium.
"""

import asyncio

import pytest

from page_capture import session as session_module

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n" + b"0" * 512 + b"\n%%EOF\n"


class FakePage:
    """Records every call made on it, fails the ones listed in ``fail``."""

    def __init__(self, ready: bool = True, fail: dict | None = None):
        self.ready = ready
        self.fail = fail or {}
        self.calls: list[tuple] = []
        self.content_set = False
        self.navigation_timeout = None
        self.closed = False

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]

    def call(self, name) -> tuple:
        return next(c for c in self.calls if c[0] == name)

    def setDefaultNavigationTimeout(self, timeout):
        self.navigation_timeout = timeout

    async def setViewport(self, viewport):
        self._record("setViewport", viewport)

    async def waitForNavigation(self, **options):
        # listening must start before the content is injected
        self._record("waitForNavigation", options, self.content_set)
        while not self.content_set:
            await asyncio.sleep(0)

    async def setContent(self, html):
        self._record("setContent", html)
        self.content_set = True

    async def goto(self, url, **options):
        self._record("goto", url, options)

    async def evaluateHandle(self, expression):
        self._record("evaluateHandle", expression)

    async def waitForSelector(self, selector, **options):
        self._record("waitForSelector", selector, options)
        if not self.ready:
            from pyppeteer.errors import TimeoutError
            raise TimeoutError(f'Waiting for selector "{selector}" failed: timeout 300000ms exceeds.')

    async def emulateMedia(self, media_type):
        self._record("emulateMedia", media_type)

    async def screenshot(self, options):
        self._record("screenshot", options)
        return PNG_BYTES

    async def pdf(self, options):
        self._record("pdf", options)
        return PDF_BYTES

    async def close(self):
        self._record("close")
        self.closed = True


class FakeBrowser:
    def __init__(self, page: FakePage, fail: dict | None = None):
        self.page = page
        self.fail = fail or {}
        self.closed = 0
        self.disconnected = 0

    async def newPage(self):
        if "newPage" in self.fail:
            raise self.fail["newPage"]
        return self.page

    async def close(self):
        self.closed += 1
        if "close" in self.fail:
            raise self.fail["close"]

    async def disconnect(self):
        self.disconnected += 1
        if "disconnect" in self.fail:
            raise self.fail["disconnect"]


class FakeEngine:
    """Stands in for pyppeteer's ``launch`` and ``connect``."""

    def __init__(self, browser: FakeBrowser, fail: Exception | None = None):
        self.browser = browser
        self.fail = fail
        self.launches: list[dict] = []
        self.connects: list[dict] = []

    async def launch(self, **options):
        self.launches.append(options)
        if self.fail:
            raise self.fail
        return self.browser

    async def connect(self, **options):
        self.connects.append(options)
        if self.fail:
            raise self.fail
        return self.browser


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def browser(page):
    return FakeBrowser(page)


@pytest.fixture
def engine(browser, monkeypatch):
    """Fake engine patched into the session module."""
    fake = FakeEngine(browser)
    monkeypatch.setattr(session_module, "launch", fake.launch)
    monkeypatch.setattr(session_module, "connect", fake.connect)
    return fake


@pytest.fixture
def fake_compress():
    """Compressor that records its input and returns a shorter PDF."""
    received = []

    async def compress(data):
        received.append(data)
        return PDF_BYTES[:32]

    compress.received = received
    return compress
