"""Post-pass over parsed segments."""

from typing import List, Sequence, Set

from .segments import Segment, SegmentKind

__all__ = ["filter_completed_tool_selects"]


def filter_completed_tool_selects(segments: Sequence[Segment]) -> List[Segment]:
    """Drop tool selections that have a matching tool call.

    An action counts as completed when any tool-call segment in the message
    carries it, regardless of where the selection appears relative to the
    call. Other segments keep their order.
    """
    completed: Set[str] = {
        seg.tool_action for seg in segments
        if seg.kind is SegmentKind.TOOL_CALL and seg.tool_action
    }
    if not completed:
        return list(segments)

    return [
        seg for seg in segments
        if not (
            seg.kind is SegmentKind.TOOL_SELECT
            and seg.tool_action
            and seg.tool_action in completed
        )
    ]
