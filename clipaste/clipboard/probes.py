"""Out-of-band helpers that inspect the OS clipboard through native tools.

A probe is chosen once per manager from platform.system(). Every probe
method resolves to an inconclusive value (None/False) instead of raising
when its helper process fails or times out.
"""

import asyncio
import enum
import logging
from collections import namedtuple

import psutil

from .errors import ProbeFailure, ProbeTimeout, UnsupportedPlatform

ProcessResult = namedtuple("ProcessResult", ["returncode", "stdout", "stderr"])


class ProbeResult(str, enum.Enum):
    IMAGE = "image"
    TEXT = "text"
    EMPTY = "empty"
    UNKNOWN = "unknown"

    def __str__(self):
        return self.value


def kill_process_tree(pid):
    try:
        parent = psutil.Process(pid)
    except psutil.Error:
        return
    try:
        children = parent.children(recursive=True)
    except psutil.Error:
        children = []
    for child in children:
        try:
            child.kill()
        except psutil.Error:
            pass
    try:
        parent.kill()
    except psutil.Error:
        pass


async def run_process(args, timeout):
    """Run a helper process to completion within timeout seconds.

    Raises ProbeTimeout after killing the process tree, and ProbeFailure when
    the process cannot start, exits non-zero or writes to stderr.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProbeFailure(f"Could not start {args[0]}: {e}", e) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        kill_process_tree(proc.pid)
        await proc.wait()
        raise ProbeTimeout(f"{args[0]} did not finish within {timeout}s")

    result = ProcessResult(
        proc.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )
    if result.returncode != 0 or result.stderr.strip():
        raise ProbeFailure(
            f"{args[0]} exited with {result.returncode}: {result.stderr.strip()}"
        )
    return result


class PlatformProbe:
    """Abstract platform probe."""

    name = "null"
    # Backend error messages (lowercase substrings) that the probe can explain
    READ_ERROR_SIGNATURES = ()
    # Whether an empty backend read may hide an image
    checks_empty_reads = False

    def __init__(self, detect_timeout=5.0, image_timeout=10.0, temp_dir=None):
        self.detect_timeout = detect_timeout
        self.image_timeout = image_timeout
        self.temp_dir = temp_dir

    def handles_read_error(self, error):
        message = str(error).lower()
        return any(signature in message for signature in self.READ_ERROR_SIGNATURES)

    async def _run(self, args, timeout):
        return await run_process(args, timeout)

    async def detect(self):
        raise NotImplementedError

    async def extract_image(self):
        raise NotImplementedError

    async def write_image(self, path):
        raise NotImplementedError


class NullProbe(PlatformProbe):
    """Linux and unknown systems: no OS-level image fallback."""

    async def detect(self):
        return None

    async def extract_image(self):
        return None

    async def write_image(self, path):
        raise UnsupportedPlatform("Image-to-clipboard is not implemented on this platform")


def _windows_probe():
    from .win import WindowsProbe
    return WindowsProbe


def _macos_probe():
    from .macos import MacOSProbe
    return MacOSProbe


PROBES = {
    "Windows": _windows_probe,
    "Darwin": _macos_probe,
}


def get_probe(system, config=None):
    factory = PROBES.get(system)
    probe_class = factory() if factory else NullProbe
    if config is None:
        return probe_class()
    return probe_class(
        detect_timeout=config.detect_timeout,
        image_timeout=config.image_timeout,
        temp_dir=config.temp_dir,
    )
