__version__ = "0.1.0"

from .clipboard import ClipboardManager, ContentType, ImagePayload
from .config import ClipboardConfig
from .profiling import PhaseProfiler
