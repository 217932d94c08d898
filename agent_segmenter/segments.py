"""Segment records produced by the message segmenter."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

__all__ = ["SegmentKind", "ToolType", "ResultStatus", "Segment"]


class SegmentKind(Enum):
    TEXT = "text"
    TOOL_SELECT = "tool-select"    # agent picked a tool, not yet run
    TOOL_CALL = "tool-call"        # tool invoked with an action and target
    TOOL_RESULT = "tool-result"    # outcome line of a tool invocation
    CODE = "code"


class ToolType(Enum):
    READ_FILE = "readFile"
    READ_DIR = "readDir"
    MODIFY_FILE = "modifyFile"
    WRITE_FILE = "writeFile"
    DELETE_FILE = "deleteFile"
    SEARCH_IMAGES = "searchImages"
    GET_ILLUSTRATION = "getIllustration"
    GENERATE_LOGO = "generateLogo"
    UNKNOWN = "unknown"


class ResultStatus(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Segment:
    """A classified, contiguous span of an agent message.

    Only ``kind`` and ``content`` are always set. The remaining fields are
    populated for the kinds they belong to and are ``None`` otherwise.
    """
    kind: SegmentKind
    content: str
    language: Optional[str] = None           # code
    tool_action: Optional[str] = None        # tool-select, tool-call
    tool_target: Optional[str] = None        # tool-call
    tool_type: Optional[ToolType] = None     # tool-select, tool-call
    result_status: Optional[ResultStatus] = None  # tool-result

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the wire field names used by the web client."""
        data: Dict[str, Any] = {"type": self.kind.value, "content": self.content}
        optional = {
            "language": self.language,
            "toolAction": self.tool_action,
            "toolTarget": self.tool_target,
            "toolType": self.tool_type.value if self.tool_type else None,
            "resultStatus": self.result_status.value if self.result_status else None,
        }
        for key, value in optional.items():
            if value is not None:
                data[key] = value
        return data
