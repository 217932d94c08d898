"""Line scanner: splits a message into code blocks and runs of plain lines.

The scanner walks the message once, line by line, tracking whether it is
inside a fenced code block. Plain lines between fences are handed on as
``TextBlock`` runs for the protocol classifier; fenced content becomes a
``CodeBlock``. A fence left open at end of input (a stream cut off mid-block)
still produces a ``CodeBlock`` with whatever was accumulated.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Union

__all__ = [
    "DEFAULT_LANGUAGE",
    "LINE_CHAR",
    "TextBlock",
    "CodeBlock",
    "RawBlock",
    "normalize_newlines",
    "scan_blocks",
]

DEFAULT_LANGUAGE = "plaintext"

# Any character but a line terminator. Captures never run across a lone \r
# (half of a CRLF pair split between stream chunks) or a Unicode line
# separator.
LINE_CHAR = r"[^\r\u2028\u2029]"

# Opening fence may follow prose on the same line:
#   group 1: leading prose, group 2: whitespace, group 3: fence, group 4: tag
_FENCE_OPEN_RE = re.compile(
    rf"^({LINE_CHAR}*?)(\s*)(`{{3,}}|~{{3,}})({LINE_CHAR}*)$"
)
# Closing fence must stand alone (checked against the stripped line).
_FENCE_CLOSE_RE = re.compile(r"^(`{3,}|~{3,})\s*$")


@dataclass(frozen=True)
class TextBlock:
    """A run of non-code lines, joined with newlines."""
    text: str


@dataclass(frozen=True)
class CodeBlock:
    """Body of a fenced block, without the fence lines.

    ``stable_end`` is the offset just past the closing fence line's newline.
    It is ``None`` for unclosed blocks and for a closing fence on the last
    line, since more input could still change how that line scans.
    """
    language: str
    body: str
    closed: bool = True
    stable_end: Optional[int] = None


RawBlock = Union[TextBlock, CodeBlock]


def normalize_newlines(content: str) -> str:
    """Fold CRLF line endings to LF."""
    return content.replace("\r\n", "\n")


def _flush_text(blocks: List[RawBlock], text_lines: List[str]) -> None:
    text = "\n".join(text_lines)
    if text.strip():
        blocks.append(TextBlock(text))
    text_lines.clear()


def scan_blocks(content: str) -> List[RawBlock]:
    """Split ``content`` into ordered text and code blocks.

    Offsets in ``CodeBlock.stable_end`` refer to the newline-normalized
    content.
    """
    content = normalize_newlines(content)
    lines = content.split("\n")
    last_index = len(lines) - 1

    blocks: List[RawBlock] = []
    text_lines: List[str] = []
    code_lines: List[str] = []
    in_code = False
    fence_lang = ""
    offset = 0

    for index, line in enumerate(lines):
        has_newline = index < last_index
        offset += len(line) + (1 if has_newline else 0)

        if in_code:
            if _FENCE_CLOSE_RE.match(line.strip()):
                blocks.append(CodeBlock(
                    language=fence_lang or DEFAULT_LANGUAGE,
                    body="\n".join(code_lines),
                    closed=True,
                    stable_end=offset if has_newline else None,
                ))
                in_code = False
                fence_lang = ""
                code_lines = []
            else:
                code_lines.append(line)
            continue

        match = _FENCE_OPEN_RE.match(line)
        if match:
            prefix = match.group(1)
            if prefix.strip():
                text_lines.append(prefix)
            _flush_text(blocks, text_lines)
            in_code = True
            fence_lang = match.group(4).strip()
            code_lines = []
            continue

        text_lines.append(line)

    _flush_text(blocks, text_lines)

    # Only empty lines after an open fence: no code has arrived yet.
    if in_code and any(code_lines):
        blocks.append(CodeBlock(
            language=fence_lang or DEFAULT_LANGUAGE,
            body="\n".join(code_lines),
            closed=False,
        ))

    return blocks
