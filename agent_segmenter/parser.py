"""Segment an agent message: scanner -> classifier -> filter."""

from typing import Iterable, List

from .classifier import classify_text
from .filters import filter_completed_tool_selects
from .scanner import CodeBlock, RawBlock, scan_blocks
from .segments import Segment, SegmentKind

__all__ = ["parse_message", "segment_blocks"]


def segment_blocks(blocks: Iterable[RawBlock]) -> List[Segment]:
    """Turn raw scanner blocks into segments, before filtering."""
    segments: List[Segment] = []
    for block in blocks:
        if isinstance(block, CodeBlock):
            segments.append(Segment(
                kind=SegmentKind.CODE,
                content=block.body,
                language=block.language,
            ))
        else:
            segments.extend(classify_text(block.text))
    return segments


def parse_message(content: str) -> List[Segment]:
    """Parse an accumulated agent message into ordered segments.

    Never raises: empty or whitespace-only input gives an empty list, and
    anything that fails to match a marker is kept as text.
    """
    if not content:
        return []
    return filter_completed_tool_selects(segment_blocks(scan_blocks(content)))
