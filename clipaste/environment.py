"""Detection of CI/headless contexts where the system clipboard is unusable."""

import os
import re
import sys

_CI_VARIABLES = ("CI", "GITHUB_ACTIONS", "HEADLESS", "XVFB_RUN")
_TEST_RUNNER_VARIABLES = ("PYTEST_CURRENT_TEST", "CLIPASTE_TEST")
# Xvfb displays are usually numbered :99 or similar
_VIRTUAL_DISPLAY = re.compile(r"^:\d{2,}")


def is_headless_environment(include_test_runner=False, environ=None, argv=None, system=None):
    """Return True when no interactive clipboard is expected to be available.

    include_test_runner treats a running test suite as headless too. The
    clipboard manager passes True only when no backend was injected, so
    unit tests with a fake backend still exercise the real code paths.
    """
    environ = os.environ if environ is None else environ
    argv = sys.argv if argv is None else argv
    system = sys.platform if system is None else system

    if include_test_runner and any(environ.get(name) for name in _TEST_RUNNER_VARIABLES):
        return True
    if any(environ.get(name) for name in _CI_VARIABLES):
        return True
    if "--headless" in argv:
        return True

    # DISPLAY is meaningless on Windows and macOS
    if system.startswith("win") or system == "darwin":
        return False
    display = environ.get("DISPLAY")
    if not display:
        return not environ.get("WAYLAND_DISPLAY")
    return bool(_VIRTUAL_DISPLAY.match(display))
