"""
YAML frontmatter handling for Docusaurus sources and Mintlify outputs.
"""

import os
import re
import logging
from typing import Any, Dict, Optional, Tuple

import yaml

from mintport.core.settings import FRONTMATTER_KEYS, MAX_FRONTMATTER_VALUE_LENGTH

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
H1_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)

# Characters Mintlify cannot take in a frontmatter value
_UNSAFE_VALUE_MARKERS = ("|", ":::", "```", "{", "}", "<", ">")


def parse_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into its frontmatter mapping and body.

    Args:
        text: Full document text

    Returns:
        (frontmatter dict, body). Documents without frontmatter give ({}, text).

    Raises:
        ValueError: If the frontmatter block is not valid YAML
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid frontmatter: {e}") from e
    if not isinstance(data, dict):
        data = {}
    return data, text[match.end():]


def dump_frontmatter(data: Dict[str, Any], body: str) -> str:
    """Serialise frontmatter and body into one document."""
    if not body.endswith("\n"):
        body += "\n"
    if not data:
        return body
    dumped = yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    )
    return f"---\n{dumped}---\n{body}"


def extract_title(body: str) -> Tuple[Optional[str], str]:
    """Pull the first H1 out of body. Returns (title or None, remaining body)."""
    match = H1_RE.search(body)
    if not match:
        return None, body
    title = match.group(1).strip()
    remaining = body[:match.start()] + body[match.end():]
    return title, remaining.lstrip("\n").strip() + "\n"


def title_from_filename(filepath: str) -> str:
    filename = os.path.splitext(os.path.basename(filepath))[0]
    title = re.sub(r"[-_]", " ", filename)
    title = re.sub(r"\b\w", lambda m: m.group(0).upper(), title)
    return re.sub(r"\bAdr\b", "ADR", title)


def extract_description(body: str) -> Optional[str]:
    """
    Use the first paragraph as the page description.

    Only short plain prose qualifies: tables, admonitions and code are skipped.
    """
    after_title = re.sub(r"^#+\s+.*\n", "", body, count=1, flags=re.MULTILINE).strip()
    first_paragraph = after_title.split("\n\n")[0]
    if not first_paragraph:
        return None
    if any(m in first_paragraph for m in ("|", ":::", "```", "~~~")):
        return None

    cleaned = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", first_paragraph)
    cleaned = re.sub(r"[*_`]", "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    if 10 < len(cleaned) < 300:
        return cleaned
    return None


def clean_frontmatter(data: Dict[str, Any]) -> Dict[str, str]:
    """
    Keep only the keys Mintlify understands, dropping values it would choke on.
    """
    cleaned = {}
    for key in FRONTMATTER_KEYS:
        if data.get(key) is None:
            continue
        value = str(data[key]).strip()
        if any(m in value for m in _UNSAFE_VALUE_MARKERS) or len(value) > MAX_FRONTMATTER_VALUE_LENGTH:
            logger.debug(f"Dropping frontmatter field {key}: unsafe value")
            continue
        cleaned[key] = re.sub(r"\s+", " ", value)
    return cleaned
