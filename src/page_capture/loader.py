"""
Drive a page to its content and wait until it is ready to capture.

Readiness is reached in three steps:
1. Navigation settles according to the completion policy (``waitUntil``)
2. The document's web fonts report ready
3. The content adds the readiness marker element (``#pdf-ready``)
"""

import asyncio

from pyppeteer.page import Page

from .errors import NavigationFailure, failure_kind
from .log import log_exception
from .models import (
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_URL,
    HTML_WAIT_UNTIL,
    READY_SELECTOR,
    URL_WAIT_UNTIL,
    CaptureParameters,
)


def resolve_target(params: CaptureParameters) -> str:
    """URL to navigate to when no inline html is given."""
    return params.url or DEFAULT_URL


def resolve_wait_until(params: CaptureParameters) -> list[str]:
    """Completion policy for the navigation."""
    if params.wait_until:
        return list(params.wait_until)
    # inline content never produces the network idle signals
    return list(URL_WAIT_UNTIL) if params.url else list(HTML_WAIT_UNTIL)


async def _set_content(page: Page, html: str, wait_until: list[str]) -> None:
    # The navigation wait has to be listening before the content is injected,
    # the load event can fire before setContent returns.
    navigation = asyncio.ensure_future(log_exception(
        'page.waitForNavigation',
        lambda: page.waitForNavigation(waitUntil=wait_until),
    ))
    # pyppeteer's waitForNavigation creates its NavigatorWatcher, which
    # subscribes to the frame lifecycle events, before its first await.
    # One loop turn runs the task up to that await.
    await asyncio.sleep(0)

    try:
        await log_exception('page.setContent', lambda: page.setContent(html))
    except BaseException:
        navigation.cancel()
        # retrieves the wait's own failure if it finished before the cancel
        await asyncio.gather(navigation, return_exceptions=True)
        raise

    await navigation


async def load_content(page: Page, params: CaptureParameters) -> None:
    """
    Load ``params``' content into ``page`` and wait for readiness.

    Raises:
        NavigationFailure: If navigation or a readiness wait fails or times out
    """
    wait_until = resolve_wait_until(params)

    with failure_kind(NavigationFailure):
        if params.html:
            await _set_content(page, params.html, wait_until)
        else:
            await log_exception('page.goto', lambda: page.goto(
                resolve_target(params),
                waitUntil=wait_until,
                timeout=DEFAULT_NAVIGATION_TIMEOUT,
            ))

        await log_exception(
            'page.evaluateHandle',
            lambda: page.evaluateHandle('document.fonts.ready'),
        )

        # the blank page has no content that could signal readiness
        if not params.html and not params.url:
            return

        await log_exception(
            'page.waitForSelector',
            lambda: page.waitForSelector(READY_SELECTOR, timeout=DEFAULT_NAVIGATION_TIMEOUT),
        )
