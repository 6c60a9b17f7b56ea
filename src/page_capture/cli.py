"""
Command-line interface for page-capture.

Commands:
- screenshot: Render a URL or HTML file and save an image
- pdf: Render a URL or HTML file and save a compressed PDF
"""

import asyncio
from pathlib import Path

import click
from rich.console import Console

from .errors import CaptureError
from .models import CaptureParameters, CaptureType
from .session import PageCapturer

console = Console()


def build_parameters(target: str, timeout: int | None, wait_until: tuple[str, ...]) -> CaptureParameters:
    """Parameters for TARGET: an existing file is sent inline, anything else is a URL."""
    params = CaptureParameters(timeout=timeout, wait_until=list(wait_until) or None)
    path = Path(target)
    if path.is_file():
        params.html = path.read_text(encoding="utf-8")
    else:
        params.url = target
    return params


def run_capture(capture_type: CaptureType, params: CaptureParameters, output: Path) -> None:
    console.print(f"[bold]Capturing {capture_type.value}:[/] {params.url or 'inline HTML'}")

    try:
        with console.status("Rendering..."):
            data = asyncio.run(PageCapturer.from_settings().capture(capture_type, params))
    except CaptureError as e:
        console.print(f"[red]✗ {type(e).__name__}: {e}[/]")
        raise click.Abort()

    output.write_bytes(data)
    console.print(f"  ✓ Wrote [cyan]{output}[/] ({len(data):,} bytes)")


def shared_options(f):
    f = click.option('--wait-until', multiple=True,
                     type=click.Choice(['load', 'domcontentloaded', 'networkidle0', 'networkidle2']),
                     help='Navigation completion event (repeatable)')(f)
    f = click.option('--timeout', type=int, default=None,
                     help='Navigation timeout in milliseconds')(f)
    return f


@click.group()
def main():
    """Render pages in headless Chromium and capture them."""
    pass


@main.command()
@click.argument('target')
@click.option('-o', '--output', type=click.Path(path_type=Path), required=True, help='Output image path')
@click.option('--width', type=int, default=None, help='Viewport width')
@click.option('--height', type=int, default=None, help='Viewport height')
@click.option('--full-page', is_flag=True, help='Capture the full scrollable page')
@click.option('--type', 'image_type', type=click.Choice(['png', 'jpeg']), default='png',
              help='Image format')
@shared_options
def screenshot(target, output, width, height, full_page, image_type, timeout, wait_until):
    """Save a screenshot of TARGET (URL or HTML file)."""
    params = build_parameters(target, timeout, wait_until)

    viewport = {}
    if width:
        viewport['width'] = width
    if height:
        viewport['height'] = height
    params.viewport = viewport or None
    params.screenshot_options = {'type': image_type, 'fullPage': full_page}

    run_capture(CaptureType.SCREENSHOT, params, output)


@main.command()
@click.argument('target')
@click.option('-o', '--output', type=click.Path(path_type=Path), required=True, help='Output PDF path')
@click.option('--format', 'paper_format', default=None, help='Paper format, e.g. A4 or Letter')
@click.option('--landscape', is_flag=True, help='Landscape orientation')
@shared_options
def pdf(target, output, paper_format, landscape, timeout, wait_until):
    """Save a compressed PDF of TARGET (URL or HTML file)."""
    params = build_parameters(target, timeout, wait_until)

    options = {'landscape': landscape}
    if paper_format:
        options['format'] = paper_format
    params.pdf_options = options

    run_capture(CaptureType.PDF, params, output)


if __name__ == '__main__':
    main()
