import time
from dataclasses import dataclass

from .common import ContentType, classify


@dataclass(frozen=True)
class ClipboardSnapshot:
    raw: str
    is_empty: bool
    type: ContentType
    captured_at: float


class CachePolicy:
    """Decides whether a fresh snapshot may be reused."""

    def __init__(self, enabled=True):
        self.enabled = enabled

    def allows_reuse(self):
        return self.enabled


class NoCachePolicy(CachePolicy):
    """Test mode: every read goes to the backend."""

    def __init__(self):
        super().__init__(enabled=False)

    def allows_reuse(self):
        return False


class SnapshotCache:
    """Single-slot, short-lived memo of the last observed clipboard state.

    Another process may change the clipboard inside the TTL window; the
    cache does not try to notice.
    """

    def __init__(self, ttl=0.25, policy=None, clock=time.monotonic):
        self.ttl = ttl
        self.policy = policy or CachePolicy()
        self._clock = clock
        self.snapshot = None

    def valid(self):
        if not self.policy.allows_reuse() or self.snapshot is None:
            return False
        return self._clock() - self.snapshot.captured_at <= self.ttl

    def update(self, raw, type_hint=None):
        raw = raw or ""
        self.snapshot = ClipboardSnapshot(
            raw=raw,
            is_empty=not raw.strip(),
            type=type_hint or classify(raw),
            captured_at=self._clock(),
        )
        return self.snapshot

    def invalidate(self):
        self.snapshot = None
