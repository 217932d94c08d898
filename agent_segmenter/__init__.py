"""agent-segmenter: parse streamed AI coding-agent messages into segments."""

__version__ = "1.0.0"

from .classifier import get_tool_type, is_read_tool, parse_result_status
from .display import (
    get_language_display_name,
    get_result_status_class,
    get_result_status_icon,
    get_tool_call_icon,
)
from .parser import parse_message
from .segments import ResultStatus, Segment, SegmentKind, ToolType

__all__ = [
    "__version__",
    "parse_message",
    "Segment",
    "SegmentKind",
    "ToolType",
    "ResultStatus",
    "get_tool_type",
    "is_read_tool",
    "parse_result_status",
    "get_language_display_name",
    "get_tool_call_icon",
    "get_result_status_icon",
    "get_result_status_class",
]
