"""Protocol classifier for plain-text runs of an agent message.

Each line is checked against the three protocol markers the backend emits
around tool use, in fixed priority order:

    [选择工具] 写入文件            tool selected, not yet run
    [工具调用] 写入文件 src/App.vue  tool invoked: action, then target
    **执行结果**: 写入成功          outcome of the invocation

Unmarked lines are coalesced into trimmed prose segments.
"""

import re
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .scanner import LINE_CHAR
from .segments import ResultStatus, Segment, SegmentKind, ToolType

__all__ = [
    "TOOL_ACTION_TYPES",
    "RESULT_STATUS_KEYWORDS",
    "get_tool_type",
    "is_read_tool",
    "parse_result_status",
    "classify_text",
]

_TOOL_SELECT_RE = re.compile(rf"^\[选择工具\]\s*({LINE_CHAR}+)$")
# Lazy action: the first whitespace run ends the action, so an action name
# that itself contains a space is split there. Known limitation.
_TOOL_CALL_RE = re.compile(rf"^\[工具调用\]\s*({LINE_CHAR}+?)\s+({LINE_CHAR}+)$")
_TOOL_RESULT_RE = re.compile(rf"^\*\*执行结果\*\*:\s*({LINE_CHAR}+)$")

TOOL_ACTION_TYPES: Mapping[str, ToolType] = MappingProxyType({
    "读取文件": ToolType.READ_FILE,
    "读取目录": ToolType.READ_DIR,
    "修改文件": ToolType.MODIFY_FILE,
    "写入文件": ToolType.WRITE_FILE,
    "删除文件": ToolType.DELETE_FILE,
    "搜索图片": ToolType.SEARCH_IMAGES,
    "获取插画": ToolType.GET_ILLUSTRATION,
    "生成Logo": ToolType.GENERATE_LOGO,
})

# Checked top to bottom; the first status with a matching keyword wins.
RESULT_STATUS_KEYWORDS: Tuple[Tuple[ResultStatus, Tuple[str, ...]], ...] = (
    (ResultStatus.SUCCESS, ("成功",)),
    (ResultStatus.WARNING, ("警告", "未找到")),
    (ResultStatus.ERROR, ("错误", "失败")),
)

_READ_TOOL_TYPES = frozenset({ToolType.READ_FILE, ToolType.READ_DIR})


def get_tool_type(action: str) -> ToolType:
    """Map an action name to its tool type, ``UNKNOWN`` when not listed."""
    return TOOL_ACTION_TYPES.get(action, ToolType.UNKNOWN)


def is_read_tool(tool_type: ToolType) -> bool:
    """Read-only tools whose results are not worth displaying."""
    return tool_type in _READ_TOOL_TYPES


def parse_result_status(result: str) -> ResultStatus:
    """Derive a status from keywords in the result text.

    Unrecognized results default to ``SUCCESS``.
    """
    for status, keywords in RESULT_STATUS_KEYWORDS:
        if any(keyword in result for keyword in keywords):
            return status
    return ResultStatus.SUCCESS


def _flush_prose(segments: List[Segment], prose_lines: List[str]) -> None:
    text = "\n".join(prose_lines).strip()
    if text:
        segments.append(Segment(kind=SegmentKind.TEXT, content=text))
    prose_lines.clear()


def _match_marker(line: str):
    """Return the marker segment for ``line``, or ``None`` for prose."""
    match = _TOOL_SELECT_RE.match(line)
    if match:
        action = match.group(1).strip()
        return Segment(
            kind=SegmentKind.TOOL_SELECT,
            content=line,
            tool_action=action,
            tool_type=get_tool_type(action),
        )

    match = _TOOL_CALL_RE.match(line)
    if match:
        action, target = match.group(1), match.group(2)
        return Segment(
            kind=SegmentKind.TOOL_CALL,
            content=line,
            tool_action=action,
            tool_target=target,
            tool_type=get_tool_type(action),
        )

    match = _TOOL_RESULT_RE.match(line)
    if match:
        result = match.group(1)
        return Segment(
            kind=SegmentKind.TOOL_RESULT,
            content=result,
            result_status=parse_result_status(result),
        )

    return None


def classify_text(text: str) -> List[Segment]:
    """Classify a run of plain lines into text and tool marker segments."""
    segments: List[Segment] = []
    prose_lines: List[str] = []

    for line in text.split("\n"):
        marker = _match_marker(line)
        if marker is None:
            prose_lines.append(line)
            continue
        _flush_prose(segments, prose_lines)
        segments.append(marker)

    _flush_prose(segments, prose_lines)
    return segments
