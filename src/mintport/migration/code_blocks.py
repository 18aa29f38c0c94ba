"""
Code block repair and enhancement.
"""

import re
import logging
from typing import Callable, List, Optional

from mintport.core.settings import EXPANDABLE_LINE_THRESHOLD
from mintport.migration.code_formatter import format_code_by_language
from mintport.migration.report import MigrationReport
from mintport.migration.safe_content import CodeFence, FENCE_RE, split_fences
from mintport.remote.github_client import FetchError

logger = logging.getLogger(__name__)

LIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
GITHUB_URL_PREFIX = "https://github.com/"

HASH_COMMENT_LANGS = ("python", "py", "bash", "shell", "sh")
FETCHABLE_LANGS = ("go", "golang")

# Checked in order against lowercased code
LANGUAGE_HINTS = [
    ("go", ("package ", "func ", 'import "', "interface{")),
    ("javascript", ("const ", "let ", "function ", "=> ")),
    ("bash", ("#!/bin/bash", "echo ", "npm ", "yarn ")),
    ("python", ("def ", "class ")),
]

Fetcher = Callable[[str], str]


def _opens_fence(match) -> bool:
    return bool(match) and not (match.group(2)[0] == "`" and "`" in match.group(3))


def _closes_fence(line: str, marker: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= len(marker) and set(stripped) == {marker[0]}


def fix_malformed_code_blocks(content: str, report: Optional[MigrationReport] = None) -> str:
    """
    Repair fences that would break MDX parsing.

    - Fences indented outside of a list are moved back to column 0, with their body.
    - Closing fences are aligned with their opening fence.
    - A fence still open at the end of the document is closed.
    """
    lines = content.split("\n")
    out: List[str] = []
    fence = None  # (indent, marker, dedent, line number)
    previous = ""

    for number, line in enumerate(lines, start=1):
        if fence is None:
            match = FENCE_RE.match(line)
            if _opens_fence(match):
                indent = match.group(1)
                dedent = ""
                if indent and not (LIST_ITEM_RE.match(previous) or previous[:1] in (" ", "\t")):
                    dedent, indent = indent, ""
                    line = line.lstrip()
                fence = (indent, match.group(2), dedent, number)
            elif line.strip():
                previous = line
            out.append(line)
            continue

        indent, marker, dedent, _ = fence
        if _closes_fence(line, marker):
            out.append(indent + line.strip())
            fence = None
            continue
        if dedent and line.startswith(dedent):
            line = line[len(dedent):]
        out.append(line)

    if fence is not None:
        indent, marker, _, number = fence
        closing = indent + marker
        if out and out[-1] == "":
            out.insert(len(out) - 1, closing)
        else:
            out.append(closing)
        if report is not None:
            report.add_warning("Unclosed code block", line=number, fixed="Added closing fence")

    return "\n".join(out)


def detect_language(code: str) -> Optional[str]:
    """Guess a fence language from keywords; None when nothing matches."""
    lowered = code.lower()
    for lang, hints in LANGUAGE_HINTS:
        if any(hint in lowered for hint in hints):
            return lang
    if lowered.strip().startswith("{") and '"' in lowered:
        return "json"
    if "message " in lowered or "service " in lowered:
        return "protobuf"
    return None


def reference_comment(url: str, lang: str) -> str:
    prefix = "#" if lang.lower() in HASH_COMMENT_LANGS else "//"
    return f"{prefix} Reference: {url}"


def resolve_reference(url: str, lang: str, fetcher: Optional[Fetcher] = None) -> str:
    """
    Replace a reference URL with the referenced code.

    Only Go references are fetched; everything else, and any failed fetch,
    becomes a one-line comment pointing at the URL.
    """
    if fetcher is not None and lang.lower() in FETCHABLE_LANGS:
        try:
            fetched = fetcher(url)
            if fetched.strip():
                return fetched
        except FetchError as e:
            logger.warning(f"Failed to fetch GitHub code from {url}: {e}")
    return reference_comment(url, lang or "text")


def _is_reference_url(code: str) -> bool:
    stripped = code.strip()
    return stripped.startswith(GITHUB_URL_PREFIX) and "\n" not in stripped


def enhance_fence(fence: CodeFence, fetcher: Optional[Fetcher] = None,
                  format_code: bool = False) -> str:
    lang = fence.lang
    meta_tokens = fence.meta.split()
    code = fence.code
    code_changed = False

    is_reference = _is_reference_url(code)
    if is_reference:
        code = resolve_reference(code.strip(), lang, fetcher)
        code_changed = True

    if "reference" in meta_tokens:
        meta_tokens = [token for token in meta_tokens if token != "reference"]

    line_count = len(code.split("\n"))
    if line_count > EXPANDABLE_LINE_THRESHOLD:
        short_reference = (
            is_reference
            and code.startswith(("// Reference:", "# Reference:"))
            and line_count <= 2
        )
        if not short_reference and "expandable" not in meta_tokens:
            meta_tokens.append("expandable")

    if not lang and code.strip():
        lang = detect_language(code) or ""

    if format_code and lang:
        formatted = format_code_by_language(lang, code)
        if formatted != code:
            code = formatted
            code_changed = True

    if lang == fence.lang and meta_tokens == fence.meta.split() and not code_changed:
        return fence.render()

    indent = fence.indent
    info = " ".join(([lang] if lang else []) + meta_tokens)
    newline = "\n" if fence.opening.endswith("\n") else ""
    opening = f"{indent}{fence.marker}{info}\n"
    if code_changed:
        body = "".join(f"{indent}{line}\n" if line else "\n" for line in code.split("\n"))
    else:
        body = "".join(fence.body_lines)
        if body and not body.endswith("\n"):
            body += "\n"
    closing = fence.closing if fence.closed else f"{indent}{fence.marker}{newline}"
    return opening + body + closing


def enhance_code_blocks(content: str, fetcher: Optional[Fetcher] = None,
                        format_code: bool = False) -> str:
    """
    Resolve reference blocks, mark long blocks expandable and fill in languages.

    Args:
        content: Markdown text
        fetcher: Callable returning the code behind a GitHub URL; None keeps
                 every reference as a comment
        format_code: Also run the language formatters over each block

    Returns:
        Content with every fenced block enhanced
    """
    pieces = []
    for segment in split_fences(content):
        if isinstance(segment, CodeFence):
            pieces.append(enhance_fence(segment, fetcher, format_code))
        else:
            pieces.append(segment)
    return "".join(pieces)
