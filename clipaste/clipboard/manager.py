import asyncio
import logging
import os
import platform

from . import backends
from .cache import CachePolicy, SnapshotCache
from .common import ContentType, is_base64_image, parse_base64_image
from .errors import ClipboardError, ImageNotFound, ReadFailure, WriteFailure
from .probes import ProbeResult, get_probe
from ..config import ClipboardConfig
from ..environment import is_headless_environment
from ..profiling import PhaseProfiler


class ClipboardManager:
    """Uniform async access to the system clipboard.

    Operations are not serialized internally: the clipboard is one global
    OS resource, so callers should await each operation before starting
    the next one.
    """

    def __init__(self, config=None, backend=None, probe=None, headless=is_headless_environment,
                 profiler=None, cache_policy=None, clock=None):
        self.config = config or ClipboardConfig()
        self._backend = backend
        self._is_headless = headless
        self.probe = probe or get_probe(platform.system(), self.config)
        self.profiler = profiler or PhaseProfiler(enabled=self.config.profiling)
        cache_kwargs = {"clock": clock} if clock else {}
        self.cache = SnapshotCache(
            ttl=self.config.cache_ttl,
            policy=cache_policy or CachePolicy(enabled=self.config.cache_enabled),
            **cache_kwargs,
        )

    # -- helpers ------------------------------------------------------------

    @property
    def injected(self):
        return self._backend is not None or backends.injected_backend() is not None

    def _headless(self):
        if self.injected:
            return False
        return self._is_headless(True)

    async def _get_backend(self):
        if self._backend is not None:
            return self._backend
        if backends.is_loaded():
            return await backends.get_backend()
        with self.profiler.phase("backend-init"):
            return await backends.get_backend()

    async def _detect(self):
        with self.profiler.phase(f"{self.probe.name}-detect"):
            result = await self.probe.detect()
        logging.debug(f"{self.probe.name} probe reported {result}")
        return result

    async def _extract_image(self):
        with self.profiler.phase(f"{self.probe.name}-extract"):
            return await self.probe.extract_image()

    async def _read_with_retry(self):
        """Return (raw, type_hint); type_hint is set when a probe decided."""
        backend = await self._get_backend()
        attempts = max(1, self.config.read_attempts)
        for attempt in range(attempts):
            try:
                with self.profiler.phase("backend-read"):
                    raw = await backend.read()
                if raw:
                    return raw, None
            except Exception as e:
                if self.probe.handles_read_error(e):
                    result = await self._detect()
                    if result is ProbeResult.IMAGE:
                        return "", ContentType.IMAGE
                    if result in (ProbeResult.EMPTY, None):
                        return "", ContentType.EMPTY
                if attempt == attempts - 1:
                    raise
                logging.debug(f"Clipboard read attempt {attempt + 1} failed: {e}")
            if attempt < attempts - 1:
                await asyncio.sleep(self.config.retry_delay)

        if self.probe.checks_empty_reads:
            result = await self._detect()
            if result is ProbeResult.IMAGE:
                return "", ContentType.IMAGE
            if result is ProbeResult.TEXT:
                return "", ContentType.TEXT
        return "", None

    async def _snapshot(self):
        if self.cache.valid():
            return self.cache.snapshot
        raw, type_hint = await self._read_with_retry()
        return self.cache.update(raw, type_hint)

    # -- text ---------------------------------------------------------------

    async def has_content(self):
        if self._headless():
            return False
        try:
            snapshot = await self._snapshot()
        except Exception as e:
            if self._headless():
                return False
            if isinstance(e, ClipboardError):
                raise
            raise ReadFailure(f"Failed to read clipboard: {e}", e) from e
        return snapshot.type is ContentType.IMAGE or not snapshot.is_empty

    async def read_text(self):
        if self._headless():
            return ""
        try:
            snapshot = await self._snapshot()
        except Exception as e:
            if self._headless():
                return ""
            if isinstance(e, ClipboardError):
                raise
            raise ReadFailure(f"Failed to read text from clipboard: {e}", e) from e
        if snapshot.type is ContentType.IMAGE and not snapshot.raw:
            logging.debug("Clipboard holds image data only, no text to read")
        return snapshot.raw

    async def _write(self, text, prefix):
        if self._headless():
            return True
        try:
            backend = await self._get_backend()
            with self.profiler.phase("backend-write"):
                await backend.write(text)
        except Exception as e:
            if self._headless():
                return True
            if isinstance(e, ClipboardError):
                raise
            raise WriteFailure(f"{prefix}: {e}", e) from e
        self.cache.invalidate()
        return True

    async def write_text(self, text):
        return await self._write(text, "Failed to write text to clipboard")

    async def clear(self):
        return await self._write("", "Failed to clear clipboard")

    async def get_content_type(self):
        if self._headless():
            return ContentType.EMPTY
        try:
            snapshot = await self._snapshot()
        except Exception as e:
            if self._headless():
                return ContentType.EMPTY
            if isinstance(e, ClipboardError):
                raise
            raise ReadFailure(f"Failed to determine clipboard content type: {e}", e) from e
        return snapshot.type

    # -- images -------------------------------------------------------------

    async def read_image(self):
        if self._headless():
            return None
        try:
            snapshot = await self._snapshot()
            if is_base64_image(snapshot.raw):
                return parse_base64_image(snapshot.raw)
            if snapshot.type is not ContentType.IMAGE:
                if await self._detect() is not ProbeResult.IMAGE:
                    return None
            return await self._extract_image()
        except Exception as e:
            if self._headless():
                return None
            if isinstance(e, ClipboardError):
                raise
            raise ReadFailure(f"Failed to read image from clipboard: {e}", e) from e

    async def write_image(self, path):
        if self._headless():
            return True
        if not os.path.exists(path):
            raise ImageNotFound(f"Image file not found: {path}")
        with self.profiler.phase(f"{self.probe.name}-write"):
            written = await self.probe.write_image(path)
        if written:
            self.cache.invalidate()
        return written
