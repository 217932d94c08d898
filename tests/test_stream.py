"""Tests for the streaming boundary and incremental re-segmentation."""

import json

import pytest

from agent_segmenter.errors import StreamBusinessError
from agent_segmenter.parser import parse_message
from agent_segmenter.segments import SegmentKind
from agent_segmenter.stream import (
    MessageStream,
    consume_events,
    decode_chunk,
    decode_sse_data,
)


def _chunks(text, size):
    return [text[i:i + size] for i in range(0, len(text), size)]


class TestDecoding:

    def test_sse_json_is_decoded(self):
        assert decode_sse_data('{"d": "hi"}') == {"d": "hi"}

    def test_sse_non_json_kept_raw(self):
        assert decode_sse_data("plain [选择工具] text") == "plain [选择工具] text"

    def test_sse_bytes(self):
        assert decode_sse_data('{"d": "字"}'.encode("utf-8")) == {"d": "字"}

    @pytest.mark.parametrize("payload, expected", [
        ("chunk", "chunk"),
        ({"d": "chunk"}, "chunk"),
        ({"d": None}, ""),
        ({"d": 5}, ""),
        ({"other": "x"}, ""),
        (None, ""),
        (42, ""),
        (["d"], ""),
    ])
    def test_decode_chunk(self, payload, expected):
        assert decode_chunk(payload) == expected


class TestMessageStream:

    def test_feed_accumulates_and_reparses(self):
        stream = MessageStream()
        stream.feed("[选择工具] 写入")
        assert stream.segments[0].tool_action == "写入"
        stream.feed("文件\n")
        assert stream.segments[0].tool_action == "写入文件"
        stream.feed({"d": "[工具调用] 写入文件 a.txt"})
        assert [s.kind for s in stream.segments] == [SegmentKind.TOOL_CALL]
        assert stream.chunk_count == 3

    def test_empty_chunks_ignored(self):
        stream = MessageStream()
        stream.feed("hello")
        before = stream.segments
        assert stream.feed({"d": ""}) == before
        assert stream.feed(None) == before
        assert stream.chunk_count == 1

    def test_feed_after_close_is_ignored(self):
        stream = MessageStream()
        stream.feed("hello")
        stream.close()
        stream.feed(" world")
        assert stream.closed
        assert stream.content == "hello"

    def test_partial_code_visible_while_streaming(self):
        stream = MessageStream()
        stream.feed("```py\n")
        assert stream.segments == []
        stream.feed("x = 1")
        seg, = stream.segments
        assert seg.kind is SegmentKind.CODE
        assert seg.content == "x = 1"

    def test_segments_returns_copy(self):
        stream = MessageStream()
        stream.feed("hello")
        stream.segments.clear()
        assert len(stream.segments) == 1


class TestIncremental:
    """Incremental output must equal a full re-parse after every chunk."""

    @pytest.mark.parametrize("size", [1, 2, 3, 7, 16, 1000])
    def test_matches_full_reparse(self, agent_transcript, size):
        stream = MessageStream(incremental=True)
        for chunk in _chunks(agent_transcript, size):
            assert stream.feed(chunk) == parse_message(stream.content)

    @pytest.mark.parametrize("size", [1, 2, 5])
    def test_crlf_split_across_chunks(self, size):
        text = "intro\r\n```js\r\na\r\n```\r\n[选择工具] 写入文件\r\n```\r\nb\r\n```\r\n[工具调用] 写入文件 x\r\n"
        stream = MessageStream(incremental=True)
        for chunk in _chunks(text, size):
            assert stream.feed(chunk) == parse_message(stream.content)

    def test_fence_line_extended_by_later_chunk(self):
        stream = MessageStream(incremental=True)
        stream.feed("```\na\n```")
        stream.feed("js\nb\n```\n")
        assert stream.segments == parse_message("```\na\n```js\nb\n```\n")

    def test_filter_spans_stable_prefix(self):
        stream = MessageStream(incremental=True)
        stream.feed("[选择工具] 写入文件\n```\ncode\n```\n")
        assert stream.segments[0].kind is SegmentKind.TOOL_SELECT
        stream.feed("[工具调用] 写入文件 a.txt")
        assert [s.kind for s in stream.segments] == [SegmentKind.CODE, SegmentKind.TOOL_CALL]


class TestConsumeEvents:

    def test_message_and_done(self):
        events = [
            ("message", json.dumps({"d": "hello "})),
            ("message", "world"),
            ("done", ""),
            ("message", "ignored"),
        ]
        stream = consume_events(iter(events))
        assert stream.closed
        assert stream.content == "hello world"

    def test_unknown_events_skipped(self):
        stream = consume_events([("ping", ""), ("message", "x")])
        assert stream.content == "x"
        assert not stream.closed

    def test_business_error_raises(self):
        events = [
            ("message", "partial"),
            ("business-error", json.dumps({"error": True, "code": 42900, "message": "请求过于频繁"})),
        ]
        with pytest.raises(StreamBusinessError) as excinfo:
            consume_events(events)
        assert excinfo.value.code == 42900
        assert excinfo.value.message == "请求过于频繁"

    def test_business_error_default_message(self):
        with pytest.raises(StreamBusinessError) as excinfo:
            consume_events([("business-error", "not json")])
        assert excinfo.value.code == 0
        assert excinfo.value.message == "生成过程中出现错误"

    def test_incremental_flag_passed_through(self, agent_transcript):
        events = [("message", c) for c in _chunks(agent_transcript, 5)]
        stream = consume_events(events, incremental=True)
        assert stream.incremental
        assert stream.segments == parse_message(agent_transcript)
