"""
Docusaurus admonitions (:::note ... :::) to Mintlify callout components.
"""

import re
from typing import List, Optional, Tuple

from mintport.core.settings import ADMONITION_MAP, DEFAULT_ADMONITION
from mintport.migration.report import MigrationReport
from mintport.migration.safe_content import safe_process_content

# :::note, :::note Title, :::tip[Title], ::::warning (nesting uses longer markers)
OPEN_RE = re.compile(r"^(\s*):{3,}(\w+)(?:\[(.*?)\]|\s+(.+?))?\s*$")
CLOSE_RE = re.compile(r"^\s*:{3,}\s*$")


def component_for(admonition_type: str) -> str:
    return ADMONITION_MAP.get(admonition_type.lower(), DEFAULT_ADMONITION)


def convert_admonitions(content: str, report: Optional[MigrationReport] = None) -> str:
    """
    Convert admonition blocks to callout components.

    A title on the opening line is kept as a bold first line inside the
    component. Blocks still open at the end of the document are closed.

    Args:
        content: Markdown text
        report: Receives a warning for every block that had to be closed

    Returns:
        Converted text, code untouched
    """
    def _convert(text: str) -> str:
        lines = text.split("\n")
        result: List[str] = []
        stack: List[Tuple[str, str, int]] = []

        for number, line in enumerate(lines, start=1):
            open_match = OPEN_RE.match(line)
            if open_match:
                indent = open_match.group(1)
                component = component_for(open_match.group(2))
                title = open_match.group(3) or open_match.group(4)
                stack.append((component, indent, number))
                title = title.strip() if title else ""
                if component == "Accordion":
                    # Accordions need a title to be clickable
                    label = (title or "Details").replace('"', "&quot;")
                    result.append(f'{indent}<Accordion title="{label}">')
                    continue
                result.append(f"{indent}<{component}>")
                if title:
                    result.append(f"{indent}**{title}**")
                continue

            if CLOSE_RE.match(line):
                if stack:
                    component, indent, _ = stack.pop()
                    result.append(f"{indent}</{component}>")
                # Stray closers are dropped
                continue

            result.append(line)

        converted = "\n".join(result)
        converted = re.sub(r":::\.", "", converted)

        while stack:
            component, indent, number = stack.pop()
            if report is not None:
                report.add_warning(
                    f"Unclosed :::{component.lower()} admonition",
                    line=number,
                    fixed=f"Added </{component}> at end of document",
                )
            converted = converted.rstrip("\n") + f"\n{indent}</{component}>\n"

        return converted

    return safe_process_content(content, _convert)
