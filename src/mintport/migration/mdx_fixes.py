"""
MDX compatibility fixes.

Docusaurus accepts Markdown that Mintlify's MDX parser rejects: raw HTML
comments, placeholder tags such as <host>, bare {template} variables and
kebab-case tags. Each function here rewrites one family of those constructs
outside of code.
"""

import re
import logging
from typing import Dict, List, Optional, Tuple

from mintport.core.settings import (
    COMMAND_PLACEHOLDERS,
    COMMON_PLACEHOLDERS,
    MAX_COMMENT_LINES,
)
from mintport.migration.report import MigrationReport
from mintport.migration.safe_content import map_prose, mask_code, safe_process_content

logger = logging.getLogger(__name__)

_COMMANDS = "|".join(COMMAND_PLACEHOLDERS)
_PLACEHOLDERS = "|".join(COMMON_PLACEHOLDERS)

TRACKED_TAGS = ("Info", "Warning", "Note", "Tip", "Check", "Accordion", "details", "Expandable")
TRACKED_TAG_RE = re.compile(rf"<(/?)({'|'.join(TRACKED_TAGS)})\b([^>]*)>")

DETAILS_RE = re.compile(
    r"<details[^>]*>\s*<summary[^>]*>(.*?)</summary>\s*([\s\S]*?)</details>",
    re.IGNORECASE,
)


def _line_of(text: str, index: int) -> int:
    return text.count("\n", 0, index) + 1


def _expandable(summary: str, body: str, closed: bool = True) -> str:
    title = summary.strip().replace('"', "&quot;")
    block = f'<Expandable title="{title}">\n{body.strip()}\n'
    return block + ("</Expandable>" if closed else "")


def _kebab_to_pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("-"))


def _kebab_to_camel(name: str) -> str:
    return re.sub(r"-([a-z])", lambda m: m.group(1).upper(), name)


def convert_html_comments(content: str, report: Optional[MigrationReport] = None) -> str:
    """
    Turn HTML comments into JSX comments.

    Long comments (usually maintainer notes) are dropped and recorded as removals.
    A comment opened but never closed on its line is closed in place.
    """
    def _convert(text: str) -> str:
        def _comment(match):
            body = match.group(1)
            line_count = len(body.split("\n"))
            if line_count > MAX_COMMENT_LINES:
                if report is not None:
                    report.add_removal(
                        "Removed long HTML comment",
                        f"{line_count}-line comment removed (likely documentation notes)",
                    )
                return ""
            cleaned = body.replace("/*", "/").replace("*/", "/")
            cleaned = " ".join(line.strip() for line in cleaned.split("\n") if line.strip())
            return f"{{/* {cleaned} */}}"

        text = re.sub(r"<!--\s*([\s\S]*?)\s*-->", _comment, text)
        return re.sub(r"<!--([^>\n]*?)$", lambda m: f"{{/* {m.group(1).strip()} */}}", text, flags=re.MULTILINE)

    return safe_process_content(content, _convert)


def _tab_attributes(attrs: str) -> Dict[str, str]:
    found = {}
    for match in re.finditer(r"""(\w+)=(?:"([^"]*)"|'([^']*)'|\{["']([^"']*)["']\})""", attrs):
        found[match.group(1)] = next(g for g in match.groups()[1:] if g is not None)
    return found


def convert_tabs(content: str) -> str:
    """Docusaurus <Tabs>/<TabItem> to Mintlify <Tabs>/<Tab title>."""
    def _convert(text: str) -> str:
        text = re.sub(r"<Tabs\b[^>]*>", "<Tabs>", text)

        def _tab(match):
            attrs = _tab_attributes(match.group(1))
            title = attrs.get("label") or attrs.get("value") or "Tab"
            return f'<Tab title="{title}">'

        text = re.sub(r"<TabItem\b([^>]*)>", _tab, text)
        return text.replace("</TabItem>", "</Tab>")

    return safe_process_content(content, _convert)


def fix_html_elements(content: str) -> str:
    """
    Neutralise tag-like text MDX would parse as JSX, and convert <details>.

    Table rows are left to fix_mdx_issues, link targets are never touched.
    """
    def _fix_line(line: str) -> str:
        if line.lstrip().startswith("|"):
            return line
        line = re.sub(rf"<({_COMMANDS})>", r"`\1`", line)
        line = re.sub(r"(?<!`)(<=>|<->)(?!`)", r"`\1`", line)
        line = re.sub(rf"(?<!`)<({_PLACEHOLDERS})>", r"`<\1>`", line)
        return re.sub(r"(?<!`)<([a-z]+-[a-z]+(?:-[a-z]+)*)>", r"`<\1>`", line)

    def _fix(text: str) -> str:
        text = DETAILS_RE.sub(lambda m: _expandable(m.group(1), m.group(2)), text)
        return "\n".join(_fix_line(line) for line in text.split("\n"))

    return safe_process_content(content, _fix)


def _escape_table_row(row: str) -> str:
    # Link targets keep their underscores
    parts = re.split(r"(\]\([^)]*\))", row)
    for i in range(0, len(parts), 2):
        parts[i] = re.sub(r"(?<=[a-zA-Z])(?<!\\)_(?=[a-zA-Z])", r"\\_", parts[i])
        parts[i] = re.sub(r"(?<!`)(\{[^}|\n]+\})(?!`)", r"`\1`", parts[i])
    return "".join(parts)


def _balance_tracked_tags(text: str, report: Optional[MigrationReport]) -> str:
    """Drop closing tags with no opener and close openers left at the end."""
    stack: List[Tuple[str, int]] = []
    lines = text.split("\n")
    for number, line in enumerate(lines, start=1):
        def _visit(match):
            closing, tag, attrs = match.group(1), match.group(2), match.group(3)
            if not closing:
                if not attrs.rstrip().endswith("/"):
                    stack.append((tag, number))
                return match.group(0)
            for i in range(len(stack) - 1, -1, -1):
                if stack[i][0] == tag:
                    del stack[i]
                    return match.group(0)
            if report is not None:
                report.add_warning(f"Orphaned closing tag </{tag}>", line=number, fixed="Removed")
            return ""

        new_line = TRACKED_TAG_RE.sub(_visit, line)
        if new_line != line and not new_line.strip():
            new_line = ""
        lines[number - 1] = new_line

    for tag, number in stack:
        if report is not None:
            report.add_warning(f"Unclosed <{tag}>", line=number, fixed=f"Added </{tag}> at end of document")
        lines.append(f"</{tag}>")
    return "\n".join(lines)


def _wrap_template_variables(text: str) -> str:
    # /path{var}
    text = re.sub(r"(?<![`\w])(/[a-zA-Z][a-zA-Z0-9/._-]*\{[^}\n]+\})(?!`)", r"`\1`", text)
    # {var}, {some var}
    text = re.sub(r"(?<!`)\{([a-zA-Z_][\w \t]*)\}(?!`)", r"`{\1}`", text)
    # {module.path}
    text = re.sub(r"(?<!`)\{([a-zA-Z_]\w*\.[\w.]+)\}(?!`)", r"`{\1}`", text)
    # {data[0]}
    return re.sub(r"(?<!`)\{([a-zA-Z_]\w*\[[^\]\n]+\])\}(?!`)", r"`{\1}`", text)


def _wrap_unbalanced_braces(line: str) -> str:
    if line.count("{") <= line.count("}") or "/*" in line or "*/" in line:
        return line
    start = line.index("{")
    return line[:start] + "`" + line[start:].rstrip() + "`"


def _remove_imports(text: str, report: Optional[MigrationReport]) -> str:
    kept = []
    for line in text.split("\n"):
        if re.match(r"^(import\s+.+\s+from\s+['\"].+['\"]|import\s+['\"].+['\"]|export\s+(default|const|function)\b.*);?\s*$", line):
            if report is not None:
                report.add_removal("Removed Docusaurus import/export", line.strip())
            continue
        kept.append(line)
    return "\n".join(kept)


def normalize_inline_code(content: str) -> str:
    """``code`` -> `code` when the code holds no backtick, and unwrap code-only link text."""
    def _collapse(text: str) -> str:
        text = re.sub(r"(?<!`)``(?!`) ?([^`\n]+?) ?(?<!`)``(?!`)", r"`\1`", text)
        # [`code`](link) renders badly in Mintlify
        return re.sub(r"\[`([^`\]]+)`\]\(([^)]+)\)", r"[\1](\2)", text)

    return map_prose(content, _collapse)


def fix_mdx_issues(content: str, report: Optional[MigrationReport] = None) -> str:
    """
    Apply the MDX auto-fixes in order.

    Args:
        content: Markdown text after link and code block processing
        report: Receives warnings for repaired tags and removals for dropped lines

    Returns:
        MDX-safe text; code blocks and inline code are untouched
    """
    content = normalize_inline_code(content)

    def _fix(text: str) -> str:
        # Table cells: underscores and braces
        text = "\n".join(
            _escape_table_row(line) if line.lstrip().startswith("|") else line
            for line in text.split("\n")
        )

        # Escaped and half-written JSX comments
        text = re.sub(r"\{/\\\*([^}]*)\\\*/\}", lambda m: f"{{/* {m.group(1).strip()} */}}", text)
        text = text.replace("{/\\*", "{/*").replace("\\*/}", "*/}")
        text = re.sub(r"\{/\*(?:[^*\n]|\*(?!/))*$", lambda m: m.group(0) + " */}", text, flags=re.MULTILINE)
        text = re.sub(r"^([^{\n]*)\*/\}", r"{/* \1*/}", text, flags=re.MULTILINE)

        # <custom-element> -> <CustomElement>
        text = re.sub(
            r"<([a-zA-Z]+(?:-[a-zA-Z]+)+)([^>]*>)",
            lambda m: f"<{_kebab_to_pascal(m.group(1))}{m.group(2)}",
            text,
        )
        text = re.sub(r"</([a-zA-Z]+(?:-[a-zA-Z]+)+)>", lambda m: f"</{_kebab_to_pascal(m.group(1))}>", text)

        # Autolinks
        text = re.sub(r"<(https?://[^>\s]+)>", r"[\1](\1)", text)

        # Operators and version markers
        text = re.sub(r"(?<!`)(<->|<=>)(?!`)", r"`\1`", text)
        text = re.sub(r"\*\*<=\s*v([\d.]+)\*\*:", r"**v\1 and earlier**:", text)
        text = re.sub(r"\*\*>=\s*v([\d.]+)\*\*:", r"**v\1 and later**:", text)
        text = re.sub(r"(\s)(<=|>=)(\s)", r"\1`\2`\3", text)

        # A template line after a block quote is read as a lazy continuation
        text = re.sub(
            r"(^>.*\n>.*\n>.*\n)>\s*\{([^}\n]+)\}",
            r"\1\n`{\2}`",
            text,
            flags=re.MULTILINE,
        )

        text = _balance_tracked_tags(text, report)

        text = DETAILS_RE.sub(lambda m: _expandable(m.group(1), m.group(2)), text)
        text = re.sub(
            r"<details[^>]*>\s*<summary[^>]*>(.*?)</summary>\s*([\s\S]*)$",
            lambda m: _expandable(m.group(1), m.group(2), closed=False),
            text,
            flags=re.IGNORECASE,
        )

        text = re.sub(rf"<({_COMMANDS}|module)>", r"`\1`", text)
        text = _wrap_template_variables(text)

        # Tags without attributes but with spaces are prose, not HTML
        def _malformed(match):
            if "=" not in match.group(2) and re.search(r"\s", match.group(2)):
                return f"`<{match.group(1)} {match.group(2)}>`"
            return match.group(0)

        text = re.sub(r"(?<!`)<([a-z][a-z0-9-]*)\s+([^>\n]+?)>", _malformed, text)
        text = re.sub(r"(?<!`)<([a-z][a-z0-9-]*)\s*$", r"`<\1>`", text, flags=re.MULTILINE)

        text = _remove_imports(text, report)

        # <Component data-id="x"> -> <Component dataId="x">
        text = re.sub(
            r"<([A-Z][a-zA-Z]*)\s+([^>]+)>",
            lambda m: "<{} {}>".format(
                m.group(1),
                re.sub(r"([a-z]+-[a-z-]+)=", lambda a: _kebab_to_camel(a.group(1)) + "=", m.group(2)),
            ),
            text,
        )

        text = "\n".join(_wrap_unbalanced_braces(line) for line in text.split("\n"))

        text = re.sub(r"<details>", '<Expandable title="Details">', text, flags=re.IGNORECASE)
        return re.sub(r"</details>", "</Expandable>", text, flags=re.IGNORECASE)

    return safe_process_content(content, _fix)


def close_unbalanced_expandables(content: str) -> str:
    prose = mask_code(content)
    opened = len(re.findall(r"<Expandable\b[^>]*>", prose))
    closed = prose.count("</Expandable>")
    if opened > closed:
        content = content.rstrip("\n") + "\n" + "\n</Expandable>" * (opened - closed) + "\n"
    return content
