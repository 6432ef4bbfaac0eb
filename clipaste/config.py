"""Runtime settings for the clipboard access layer.

The core only ever receives a ClipboardConfig. Environment variables are
read by from_env(), which is meant to be called once at the application
boundary.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

ENV_CACHE_TTL_MS = "CLIPASTE_CACHE_TTL_MS"
ENV_DISABLE_CACHE = "CLIPASTE_DISABLE_CACHE"
ENV_PHASE_PROF = "CLIPASTE_PHASE_PROF"

_FALSE_VALUES = {"", "0", "false", "no", "off"}


def _flag(value):
    return value is not None and value.strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True)
class ClipboardConfig:
    """Clipboard settings"""

    # Snapshot cache
    cache_enabled: bool = True
    cache_ttl: float = 0.25             # Seconds

    # Instrumentation
    profiling: bool = False

    # Backend reads
    read_attempts: int = 3
    retry_delay: float = 0.015          # Seconds between attempts

    # Platform probes
    detect_timeout: float = 5.0         # Seconds
    image_timeout: float = 10.0         # Seconds
    temp_dir: Optional[str] = None      # None = system temp directory

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        kwargs = {}

        ttl_ms = environ.get(ENV_CACHE_TTL_MS)
        if ttl_ms:
            try:
                kwargs["cache_ttl"] = max(0.0, float(ttl_ms) / 1000.0)
            except ValueError:
                logging.warning(f"Ignoring invalid {ENV_CACHE_TTL_MS}={ttl_ms!r}")

        if _flag(environ.get(ENV_DISABLE_CACHE)):
            kwargs["cache_enabled"] = False
        if _flag(environ.get(ENV_PHASE_PROF)):
            kwargs["profiling"] = True
        return cls(**kwargs)
