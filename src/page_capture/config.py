"""
Process-wide configuration for page capture.

Settings come from the environment and are resolved once, on the first
call to ``get_settings()``:

    BROWSERLESS=1                   connect to a remote Chromium instead of launching
    BROWSERLESS_URL                 websocket endpoint of the remote Chromium
    PYPPETEER_CHROMIUM_EXECUTABLE   Chromium binary for local launches
    PAGE_CAPTURE_SCRATCH_DIR        scratch directory for PDF compression
    PAGE_CAPTURE_GHOSTSCRIPT        Ghostscript binary (default: gs)
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Mapping


class EngineMode(str, Enum):
    """How a capture obtains its browser."""
    LOCAL = "local"    # launch a fresh Chromium per capture
    REMOTE = "remote"  # connect to a shared Chromium endpoint


@dataclass(frozen=True)
class EngineAcquisitionStrategy:
    """Where the browser for a capture comes from."""
    mode: EngineMode = EngineMode.LOCAL
    endpoint: str | None = None
    executable_path: str | None = None

    def __post_init__(self):
        if self.mode == EngineMode.REMOTE and not self.endpoint:
            raise ValueError("Remote engine mode requires an endpoint")

    @classmethod
    def local(cls, executable_path: str | None = None) -> "EngineAcquisitionStrategy":
        return cls(mode=EngineMode.LOCAL, executable_path=executable_path)

    @classmethod
    def remote(cls, endpoint: str) -> "EngineAcquisitionStrategy":
        return cls(mode=EngineMode.REMOTE, endpoint=endpoint)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineAcquisitionStrategy":
        env = os.environ if environ is None else environ
        if env.get("BROWSERLESS") == "1":
            return cls.remote(env.get("BROWSERLESS_URL", ""))
        return cls.local(env.get("PYPPETEER_CHROMIUM_EXECUTABLE") or None)


@dataclass(frozen=True)
class Settings:
    """Resolved configuration."""
    strategy: EngineAcquisitionStrategy = field(default_factory=EngineAcquisitionStrategy)
    scratch_dir: Path = field(default_factory=lambda: Path.cwd() / "temp")
    ghostscript: str = "gs"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        scratch_dir = env.get("PAGE_CAPTURE_SCRATCH_DIR")
        return cls(
            strategy=EngineAcquisitionStrategy.from_env(env),
            scratch_dir=Path(scratch_dir) if scratch_dir else Path.cwd() / "temp",
            ghostscript=env.get("PAGE_CAPTURE_GHOSTSCRIPT") or "gs",
        )


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Settings resolved from the environment on first use."""
    return Settings.from_env()
