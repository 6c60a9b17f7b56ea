"""
PDF compression through Ghostscript.

Chromium's PDFs embed full fonts and uncompressed images. Rewriting them
with Ghostscript's pdfwrite device at the /printer preset shrinks them a
lot without changing the layout. Ghostscript only talks through files, so
each call shuttles the bytes through a pair of scratch files.
"""

import asyncio
import time
import uuid
from pathlib import Path

from .config import get_settings
from .errors import CompressionFailure, failure_kind


def ghostscript_command(source: Path, target: Path, binary: str = "gs") -> list[str]:
    """Argument list rewriting ``source`` into a compressed ``target``."""
    return [
        binary,
        "-sDEVICE=pdfwrite",
        "-dSAFER",
        "-dCompatibilityLevel=1.4",
        "-dColorConversionStrategy=/LeaveColorUnchanged",
        "-dSubsetFonts=true",
        "-dEmbedAllFonts=true",
        "-dPDFSETTINGS=/printer",
        "-dNOPAUSE",
        "-dQUIET",
        "-dBATCH",
        f"-sOutputFile={target}",
        str(source),
    ]


def scratch_paths(scratch_dir: Path) -> tuple[Path, Path]:
    """Unique ``(original, compressed)`` scratch file pair for one call."""
    # millisecond timestamp plus a random suffix, concurrent calls can share a millisecond
    token = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    return (
        scratch_dir / f"{token}_original.pdf",
        scratch_dir / f"{token}_compress.pdf",
    )


async def compress_pdf(
    data: bytes,
    scratch_dir: Path | None = None,
    ghostscript: str | None = None,
) -> bytes:
    """
    Compress a PDF with Ghostscript and return the compressed bytes.

    Args:
        data: PDF bytes as produced by Chromium
        scratch_dir: Directory for the scratch files (created if missing)
        ghostscript: Ghostscript binary name or path

    Raises:
        CompressionFailure: If Ghostscript exits non-zero or a scratch
            file cannot be written, read or created
    """
    if scratch_dir is None or ghostscript is None:
        settings = get_settings()
        scratch_dir = scratch_dir or settings.scratch_dir
        ghostscript = ghostscript or settings.ghostscript
    scratch_dir = Path(scratch_dir)

    original, compressed = scratch_paths(scratch_dir)

    with failure_kind(CompressionFailure):
        try:
            await asyncio.to_thread(scratch_dir.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(original.write_bytes, data)

            process = await asyncio.create_subprocess_exec(
                *ghostscript_command(original, compressed, ghostscript),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()

            if process.returncode != 0:
                message = stderr.decode(errors="replace").strip()
                raise CompressionFailure(
                    f"Ghostscript exited with code {process.returncode}: {message}"
                )

            return await asyncio.to_thread(compressed.read_bytes)
        finally:
            original.unlink(missing_ok=True)
            compressed.unlink(missing_ok=True)
