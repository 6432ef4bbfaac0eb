import asyncio
import logging

from .errors import BackendUnavailable


class ClipboardBackend:
    """Abstract text clipboard primitive."""

    async def read(self):
        raise NotImplementedError

    async def write(self, text):
        raise NotImplementedError


class PyperclipBackend(ClipboardBackend):
    """Runs pyperclip's blocking copy/paste pair in the default executor."""

    def __init__(self, copy, paste):
        self._copy = copy
        self._paste = paste

    async def read(self):
        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, self._paste)
        return text or ""

    async def write(self, text):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._copy, text)


def _load_pyperclip():
    try:
        import pyperclip
    except ImportError as e:
        raise BackendUnavailable(f"Failed to load pyperclip: {e}", e) from e
    try:
        copy, paste = pyperclip.determine_clipboard()
    except Exception as e:
        raise BackendUnavailable(f"Failed to initialize clipboard backend: {e}", e) from e
    # pyperclip hands back falsy placeholders when no copy/paste tool exists
    if not copy or not paste:
        raise BackendUnavailable("No clipboard mechanism available")
    logging.debug(f"Using clipboard backend {getattr(paste, '__name__', paste)}")
    return PyperclipBackend(copy, paste)


_injected = None
_resolved = None
_loading = None


def inject_backend(backend):
    """Substitute the whole primitive, skipping initialization. None restores it."""
    global _injected
    _injected = backend


def injected_backend():
    return _injected


def is_loaded():
    return _injected is not None or _resolved is not None


def reset_backend():
    global _injected, _resolved, _loading
    _injected = None
    _resolved = None
    _loading = None


async def get_backend():
    """Return the process-wide backend, initializing it at most once.

    Concurrent callers share the same pending initialization future.
    """
    global _resolved, _loading
    if _injected is not None:
        return _injected
    if _resolved is not None:
        return _resolved

    loop = asyncio.get_running_loop()
    if _loading is None or _loading[0] is not loop:
        _loading = (loop, loop.run_in_executor(None, _load_pyperclip))
    future = _loading[1]
    backend = await asyncio.shield(future)
    _resolved = backend
    return backend
