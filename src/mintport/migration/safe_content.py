"""
Code-safe text processing.

Every migration pass is a regex rewrite over Markdown. Code must never be
touched by those rewrites, so fenced blocks and inline code spans are swapped
for placeholders before a pass runs and restored afterwards.
"""

import re
from typing import Callable, List, Optional, Union

# Private-use code points: no rewrite pattern matches them
_BLOCK_OPEN, _BLOCK_CLOSE = "\ue000", "\ue001"
_INLINE_OPEN, _INLINE_CLOSE = "\ue002", "\ue003"

_BLOCK_PLACEHOLDER_RE = re.compile(f"{_BLOCK_OPEN}(\\d+){_BLOCK_CLOSE}")
_INLINE_PLACEHOLDER_RE = re.compile(f"{_INLINE_OPEN}(\\d+){_INLINE_CLOSE}")

FENCE_RE = re.compile(r"^([ \t]*)(`{3,}|~{3,})(.*)$")
INLINE_CODE_RE = re.compile(r"(`+)([^`\n]*?)\1")


class CodeFence:
    """A fenced code block, kept as its raw lines so it renders back unchanged."""

    def __init__(self, opening: str, body_lines: List[str], closing: Optional[str]):
        self.opening = opening
        self.body_lines = body_lines
        self.closing = closing

    @property
    def indent(self) -> str:
        return FENCE_RE.match(self.opening.rstrip("\r\n")).group(1)

    @property
    def marker(self) -> str:
        return FENCE_RE.match(self.opening.rstrip("\r\n")).group(2)

    @property
    def info(self) -> str:
        return FENCE_RE.match(self.opening.rstrip("\r\n")).group(3).strip()

    @property
    def lang(self) -> str:
        parts = self.info.split(None, 1)
        return parts[0] if parts else ""

    @property
    def meta(self) -> str:
        parts = self.info.split(None, 1)
        return parts[1] if len(parts) > 1 else ""

    @property
    def closed(self) -> bool:
        return self.closing is not None

    @property
    def code(self) -> str:
        """Body text without the final newline, as a Markdown parser reports it."""
        body = "".join(self.body_lines)
        if body.endswith("\n"):
            body = body[:-1]
        return body

    def render(self) -> str:
        return self.opening + "".join(self.body_lines) + (self.closing or "")


def _is_closing_fence(line: str, marker: str) -> bool:
    stripped = line.strip()
    return (
        len(stripped) >= len(marker)
        and set(stripped) == {marker[0]}
    )


def split_fences(text: str) -> List[Union[str, CodeFence]]:
    """
    Split text into prose strings and CodeFence blocks.

    A fence left open at the end of the text runs to the end, as in CommonMark.
    """
    segments: List[Union[str, CodeFence]] = []
    lines = text.splitlines(keepends=True)
    prose: List[str] = []
    i = 0
    while i < len(lines):
        match = FENCE_RE.match(lines[i].rstrip("\r\n"))
        # A backtick fence whose info string holds a backtick is inline code
        if match and not (match.group(2)[0] == "`" and "`" in match.group(3)):
            if prose:
                segments.append("".join(prose))
                prose = []
            marker = match.group(2)
            body: List[str] = []
            closing = None
            j = i + 1
            while j < len(lines):
                if _is_closing_fence(lines[j], marker):
                    closing = lines[j]
                    break
                body.append(lines[j])
                j += 1
            segments.append(CodeFence(lines[i], body, closing))
            i = j + 1
            continue
        prose.append(lines[i])
        i += 1
    if prose:
        segments.append("".join(prose))
    return segments


def safe_process_content(text: str, processor: Callable[[str], str]) -> str:
    """
    Run processor over text with all code protected.

    Args:
        text: Markdown/MDX text
        processor: Function rewriting the non-code text

    Returns:
        Processed text with code blocks and inline code restored verbatim
    """
    blocks: List[str] = []
    pieces: List[str] = []
    for segment in split_fences(text):
        if isinstance(segment, CodeFence):
            raw = segment.render()
            trailing = ""
            if raw.endswith("\n"):
                raw, trailing = raw[:-1], "\n"
            pieces.append(f"{_BLOCK_OPEN}{len(blocks)}{_BLOCK_CLOSE}{trailing}")
            blocks.append(raw)
        else:
            pieces.append(segment)

    inline: List[str] = []

    def _stash_inline(match):
        inline.append(match.group(0))
        return f"{_INLINE_OPEN}{len(inline) - 1}{_INLINE_CLOSE}"

    protected = INLINE_CODE_RE.sub(_stash_inline, "".join(pieces))
    processed = processor(protected)

    processed = _INLINE_PLACEHOLDER_RE.sub(lambda m: inline[int(m.group(1))], processed)
    processed = _BLOCK_PLACEHOLDER_RE.sub(lambda m: blocks[int(m.group(1))], processed)
    return processed


def mask_code(text: str) -> str:
    """Blank out code with spaces, keeping every newline so line numbers hold."""
    pieces = []
    for segment in split_fences(text):
        if isinstance(segment, CodeFence):
            pieces.append(re.sub(r"[^\n]", " ", segment.render()))
        else:
            pieces.append(INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), segment))
    return "".join(pieces)


def map_prose(text: str, processor: Callable[[str], str]) -> str:
    """Apply processor to prose segments only, leaving fences untouched in place."""
    out = []
    for segment in split_fences(text):
        if isinstance(segment, CodeFence):
            out.append(segment.render())
        else:
            out.append(processor(segment))
    return "".join(out)
