"""Streaming boundary: decode payloads, accumulate, re-segment.

The transport hands over loosely-typed payloads (raw strings, or JSON
objects carrying the text under ``"d"``). They are decoded to plain strings
here, before the segmenter ever sees them, and appended to the message
buffer. After every increment the whole buffer is segmented again.

With ``incremental=True`` the segments before the last stable boundary (a
closed code fence followed by a newline) are kept and only the tail is
scanned again. The scanner starts from a clean state after such a fence,
so the output equals a full re-parse of the buffer at every step.
"""

import json
import logging
from typing import Any, Iterable, List, Mapping, Tuple

from .errors import StreamBusinessError
from .filters import filter_completed_tool_selects
from .parser import parse_message, segment_blocks
from .scanner import CodeBlock, normalize_newlines, scan_blocks
from .segments import Segment

__all__ = [
    "decode_sse_data",
    "decode_chunk",
    "MessageStream",
    "consume_events",
]

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_ERROR = "生成过程中出现错误"


def decode_sse_data(raw: Any) -> Any:
    """JSON-decode an SSE ``data`` field, keeping the raw string on failure."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def decode_chunk(payload: Any) -> str:
    """Resolve a decoded payload to the text chunk it carries.

    Strings pass through; mappings yield their ``"d"`` field when it is a
    string. Anything else carries no text.
    """
    if isinstance(payload, str):
        return payload
    if isinstance(payload, Mapping):
        chunk = payload.get("d")
        if isinstance(chunk, str):
            return chunk
    return ""


class MessageStream:
    """Accumulates a streamed agent message and keeps its segments current."""

    def __init__(self, incremental: bool = False):
        self.incremental = incremental
        self._content = ""
        self._closed = False
        self._segments: List[Segment] = []
        # Incremental state, offsets in newline-normalized content
        self._stable_offset = 0
        self._stable_segments: List[Segment] = []
        self.chunk_count = 0

    @property
    def content(self) -> str:
        return self._content

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def segments(self) -> List[Segment]:
        return list(self._segments)

    def feed(self, payload: Any) -> List[Segment]:
        """Append one payload and return the refreshed segments."""
        if self._closed:
            logger.info("Ignoring chunk received after stream close")
            return self.segments

        chunk = decode_chunk(payload)
        if not chunk:
            return self.segments

        self._content += chunk
        self.chunk_count += 1
        if self.incremental:
            self._segments = self._resegment_tail()
        else:
            self._segments = parse_message(self._content)
        return self.segments

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.info(
            "Stream closed: %d chunks, %d chars, %d segments",
            self.chunk_count, len(self._content), len(self._segments),
        )

    def _resegment_tail(self) -> List[Segment]:
        normalized = normalize_newlines(self._content)
        base = self._stable_offset
        pending: List[Segment] = []

        for block in scan_blocks(normalized[base:]):
            pending.extend(segment_blocks([block]))
            if isinstance(block, CodeBlock) and block.stable_end is not None:
                self._stable_segments.extend(pending)
                self._stable_offset = base + block.stable_end
                pending = []

        return filter_completed_tool_selects(self._stable_segments + pending)


def _as_mapping(data: Any) -> Mapping:
    decoded = decode_sse_data(data)
    return decoded if isinstance(decoded, Mapping) else {}


def consume_events(
    events: Iterable[Tuple[str, Any]],
    *,
    incremental: bool = False,
) -> MessageStream:
    """Drive a ``MessageStream`` from ``(event_type, data)`` tuples.

    ``message`` events feed the stream, ``done`` closes it and
    ``business-error`` closes it and raises ``StreamBusinessError``.
    """
    stream = MessageStream(incremental=incremental)

    for event_type, data in events:
        if event_type == "message":
            stream.feed(decode_sse_data(data))
        elif event_type == "done":
            stream.close()
            break
        elif event_type == "business-error":
            stream.close()
            error = _as_mapping(data)
            code = error.get("code", 0)
            message = error.get("message") or DEFAULT_BUSINESS_ERROR
            logger.warning("Stream business error %s: %s", code, message)
            raise StreamBusinessError(code, message)
        else:
            logger.info("Skipping unknown stream event %r", event_type)

    return stream
