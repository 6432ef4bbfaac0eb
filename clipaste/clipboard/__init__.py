from .common import ContentType, ImagePayload, classify, is_base64_image, parse_base64_image
from .errors import (
    BackendUnavailable,
    ClipboardError,
    ImageNotFound,
    ProbeFailure,
    ProbeTimeout,
    ReadFailure,
    UnsupportedPlatform,
    WriteFailure,
)
from .probes import ProbeResult
from .manager import ClipboardManager
