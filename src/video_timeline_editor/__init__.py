"""
Video Timeline Editor

Non-destructive editing of a video timeline: the source file is never
touched, the edit is the ordered list of kept source ranges, with
bounded undo/redo and export of the result through ffmpeg.
"""

# Version information
__version__ = "1.0.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"

# Package metadata
__title__ = "video-timeline-editor"
__description__ = "Non-destructive video timeline editing with undo/redo"
__url__ = "https://github.com/yourusername/video-timeline-editor"
__license__ = "MIT"
__copyright__ = "Copyright 2024 Your Name"

# Import main components
from .exceptions import TimelineError, InvalidRange, OutOfBounds
from .models import VideoSegment, TimelineSelection, TimelineMetrics
from .utils import TimeParser
from .segment_list import SegmentList
from .history import EditHistory
from .manager import SegmentManager
from .parser import EditCommand, EditScriptParser
from .processor import ExportProcessor

# Public API
__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__title__",
    "__description__",
    "__url__",
    "__license__",
    "__copyright__",

    # Exceptions
    "TimelineError",
    "InvalidRange",
    "OutOfBounds",

    # Classes
    "VideoSegment",
    "TimelineSelection",
    "TimelineMetrics",
    "TimeParser",
    "SegmentList",
    "EditHistory",
    "SegmentManager",
    "EditCommand",
    "EditScriptParser",
    "ExportProcessor",
]

# Convenience imports for CLI
try:
    from .cli import TimelineEditorApp, main
    __all__.extend(["TimelineEditorApp", "main"])
except ImportError:
    # CLI might not be available in all contexts
    pass
