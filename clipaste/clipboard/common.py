import base64
import binascii
import enum
import logging
import os
import re
import tempfile
from dataclasses import dataclass

DATA_URL_PATTERN = re.compile(r'^data:image/(png|jpeg|jpg|gif|bmp|webp|svg);base64,', re.IGNORECASE)
_DATA_URL_PARTS = re.compile(r'^data:image/(\w+);base64,(.+)$', re.IGNORECASE | re.DOTALL)
_BASE64_CHARS = re.compile(r'^[A-Za-z0-9+/]*={0,2}$')

# Share of the string above which content is treated as binary
NUL_RATIO = 0.1
NON_PRINTABLE_RATIO = 0.3


class ContentType(str, enum.Enum):
    EMPTY = 'empty'
    TEXT = 'text'
    IMAGE = 'image'
    BINARY = 'binary'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class ImagePayload:
    format: str
    data: bytes


def _is_non_printable(code):
    return (
        code <= 0x08
        or code in (0x0B, 0x0C)
        or 0x0E <= code <= 0x1F
        or 0x7F <= code <= 0x9F
    )


def is_binary_data(content):
    if not isinstance(content, str) or not content:
        return False
    nul_bytes = 0
    non_printable = 0
    for ch in content:
        code = ord(ch)
        if code == 0:
            nul_bytes += 1
        if _is_non_printable(code):
            non_printable += 1
    length = len(content)
    return nul_bytes > length * NUL_RATIO or non_printable > length * NON_PRINTABLE_RATIO


def is_base64_image(content):
    """Cheap check for an image data URL, without decoding it."""
    if not content or not isinstance(content, str):
        return False
    return DATA_URL_PATTERN.match(content.strip()) is not None


def parse_base64_image(content):
    """Decode an image data URL into an ImagePayload.

    Returns None when the content is not a well-formed, non-empty base64
    image so callers can treat every failure the same way.
    """
    if not content or not isinstance(content, str):
        return None
    match = _DATA_URL_PARTS.match(content.strip())
    if not match:
        return None

    image_format, payload = match.groups()
    if not _BASE64_CHARS.match(payload):
        return None
    try:
        data = base64.b64decode(payload)
    except (binascii.Error, ValueError):
        logging.debug("Rejected malformed base64 image payload")
        return None
    if not data:
        return None
    return ImagePayload(format=image_format.lower(), data=data)


def classify(raw):
    if raw is None or not raw.strip():
        return ContentType.EMPTY
    if is_base64_image(raw):
        return ContentType.IMAGE
    if is_binary_data(raw):
        return ContentType.BINARY
    return ContentType.TEXT


def make_temp_path(suffix, temp_dir=None):
    fd, path = tempfile.mkstemp(prefix='clipaste-', suffix=suffix, dir=temp_dir)
    os.close(fd)
    return path


def remove_quietly(path):
    if not path:
        return
    try:
        if os.path.exists(path):
            os.unlink(path)
    except OSError:
        logging.debug(f"Could not remove temp file {path}")
