"""
Tests for screenshot and PDF capture.
"""

import asyncio

import pytest

from page_capture.dispatcher import dispatch, print_pdf, strip_path, take_screenshot
from page_capture.errors import CaptureFailure, CompressionFailure
from page_capture.models import CaptureParameters, CaptureType

from conftest import PDF_BYTES, PNG_BYTES, FakePage


def test_strip_path_copies():
    options = {"path": "/tmp/out.png", "fullPage": True}

    stripped = strip_path(options)

    assert stripped == {"fullPage": True}
    assert options == {"path": "/tmp/out.png", "fullPage": True}
    assert strip_path(None) == {}


def test_screenshot_defaults():
    page = FakePage()

    data = asyncio.run(take_screenshot(page))

    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    assert page.names() == ["screenshot"]
    assert page.call("screenshot") == ("screenshot", {"encoding": "binary"})


def test_screenshot_options():
    page = FakePage()
    options = {
        "path": "/tmp/out.png",
        "fullPage": True,
        "type": "jpeg",
        "emulateMediaType": "print",
        "encoding": "base64",
    }

    asyncio.run(take_screenshot(page, options))

    assert page.names() == ["emulateMedia", "screenshot"]
    assert page.call("emulateMedia") == ("emulateMedia", "print")
    assert page.call("screenshot")[1] == {"fullPage": True, "type": "jpeg", "encoding": "binary"}
    assert "path" in options


def test_screenshot_failure():
    page = FakePage(fail={"screenshot": RuntimeError("Protocol error")})

    with pytest.raises(CaptureFailure, match="Protocol error"):
        asyncio.run(take_screenshot(page))


def test_pdf_default_options(fake_compress):
    page = FakePage()

    data = asyncio.run(print_pdf(page, None, fake_compress))

    assert page.call("pdf")[1] == {
        "printBackground": True,
        "preferCSSPageSize": True,
        "timeout": 300000,
        "margin": {"top": "0", "right": "0", "bottom": "0", "left": "0"},
    }
    assert fake_compress.received == [PDF_BYTES]
    assert data == PDF_BYTES[:32]


def test_pdf_caller_options_win(fake_compress):
    page = FakePage()

    asyncio.run(print_pdf(
        page,
        {"path": "/tmp/out.pdf", "format": "A4", "printBackground": False, "margin": {"top": "1cm"}},
        fake_compress,
    ))

    options = page.call("pdf")[1]
    assert "path" not in options
    assert options["format"] == "A4"
    assert options["printBackground"] is False
    assert options["preferCSSPageSize"] is True
    assert options["margin"] == {"top": "1cm"}


def test_pdf_failure_skips_compression(fake_compress):
    page = FakePage(fail={"pdf": RuntimeError("Printing failed")})

    with pytest.raises(CaptureFailure, match="Printing failed"):
        asyncio.run(print_pdf(page, None, fake_compress))

    assert fake_compress.received == []


def test_pdf_compression_failure():
    async def broken(data):
        raise OSError("No space left on device")

    with pytest.raises(CompressionFailure, match="No space left"):
        asyncio.run(print_pdf(FakePage(), None, broken))


def test_dispatch_by_type(fake_compress):
    page = FakePage()
    params = CaptureParameters(screenshot_options={"fullPage": True}, pdf_options={"landscape": True})

    image = asyncio.run(dispatch(page, CaptureType.SCREENSHOT, params, fake_compress))
    document = asyncio.run(dispatch(page, CaptureType.PDF, params, fake_compress))

    assert image == PNG_BYTES
    assert document.startswith(b"%PDF")
    assert page.call("screenshot")[1]["fullPage"] is True
    assert page.call("pdf")[1]["landscape"] is True


def test_pdf_progress_lines(fake_compress, capsys):
    asyncio.run(print_pdf(FakePage(), None, fake_compress, request_id="abcd1234"))

    out = capsys.readouterr().out
    assert "[Capture] abcd1234 PDF " in out
    assert "[Capture] abcd1234 Optimized " in out
    assert out.index(" PDF ") < out.index(" Optimized ")
