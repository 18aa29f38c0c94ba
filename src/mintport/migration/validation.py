"""
Report-only MDX checks for problems the auto-fixes could not repair.
"""

import re
from typing import List, Tuple

from mintport.core.settings import BALANCED_COMPONENTS
from mintport.migration.safe_content import CodeFence, mask_code, split_fences
from mintport.schemas.migration import IssueKind, MigrationIssue

TEMPLATE_VAR_RE = re.compile(r"(?<!`)\{([a-zA-Z_]\w*)\}(?!`)")
JSX_HYPHEN_ATTR_RE = re.compile(r"<([A-Z][a-zA-Z]*)\s+([a-z]+-[a-z-]+)=")
ESCAPED_COMMENT_RE = re.compile(r"\{/\\\*|\\\*/\}")
OPEN_EXPRESSION_RE = re.compile(r"(\{[^}]*$)")
COMPONENT_TAG_RE = re.compile(rf"<(/?)({'|'.join(BALANCED_COMPONENTS)})\b([^>]*)>")

# Lines searched for the closing brace of an expression
EXPRESSION_LOOKAHEAD = 4


def _error(line: int, issue: str, suggestion: str) -> MigrationIssue:
    return MigrationIssue(kind=IssueKind.ERROR, line=line, issue=issue, suggestion=suggestion)


def _mask_fences(text: str) -> str:
    return "".join(
        re.sub(r"[^\n]", " ", s.render()) if isinstance(s, CodeFence) else s
        for s in split_fences(text)
    )


def _check_line(lines: List[str], index: int, raw_line: str) -> List[MigrationIssue]:
    line = lines[index]
    number = index + 1
    issues = []

    if re.search(r"``[^`]+``", raw_line):
        issues.append(_error(number, "Double backticks still present",
                             "Manually change to single backticks or escape the content"))

    template = TEMPLATE_VAR_RE.search(line)
    if template:
        issues.append(_error(number, f"Unescaped template variable: {template.group(0)}",
                             "Wrap in backticks or escape with backslash"))

    attr = JSX_HYPHEN_ATTR_RE.search(line)
    if attr:
        camel = re.sub(r"-([a-z])", lambda m: m.group(1).upper(), attr.group(2))
        issues.append(_error(number, f"JSX attribute with hyphen: {attr.group(2)}",
                             f"Convert to camelCase (e.g., {camel})"))

    if ESCAPED_COMMENT_RE.search(line):
        issues.append(_error(number, "Invalid JSX comment with escaped characters",
                             "Change to proper JSX comment: {/* content */}"))

    if OPEN_EXPRESSION_RE.search(line) and "*/}" not in line and "/*" not in line:
        following = lines[index + 1:index + 1 + EXPRESSION_LOOKAHEAD]
        if not any("}" in candidate for candidate in following):
            issues.append(_error(number, "Unclosed JSX expression",
                                 "Missing closing brace for JSX expression"))

    if re.search(r"\{/\*", line) and not re.search(r"\{/\*.*\*/\}", line):
        issues.append(_error(number, "Unclosed comment in JSX expression",
                             "Comments inside JSX expressions must be properly closed"))

    return issues


def _check_components(text: str) -> List[MigrationIssue]:
    issues = []
    stack: List[Tuple[str, int]] = []
    for match in COMPONENT_TAG_RE.finditer(text):
        closing, tag, attrs = match.group(1), match.group(2), match.group(3)
        if not closing:
            if not attrs.rstrip().endswith("/"):
                stack.append((tag, match.start()))
            continue
        if not stack or stack[-1][0] != tag:
            issues.append(_error(text.count("\n", 0, match.start()) + 1,
                                 f"Orphaned or mismatched closing tag </{tag}>",
                                 "Check for missing opening tag or remove this closing tag"))
        else:
            stack.pop()
    for tag, index in stack:
        issues.append(_error(text.count("\n", 0, index) + 1,
                             f"Unclosed opening tag <{tag}>",
                             "Add matching closing tag or remove this opening tag"))
    return issues


def validate_mdx_content(content: str) -> List[MigrationIssue]:
    """
    Find MDX constructs that are still likely to break parsing.

    Nothing is changed; callers record the returned issues in a MigrationReport.

    Args:
        content: Converted document body

    Returns:
        One MigrationIssue per finding, line numbers relative to content
    """
    masked = mask_code(content)
    fence_masked = _mask_fences(content)
    lines = masked.split("\n")
    raw_lines = fence_masked.split("\n")

    issues: List[MigrationIssue] = []
    for index in range(len(lines)):
        issues.extend(_check_line(lines, index, raw_lines[index]))
    issues.extend(_check_components(masked))
    return issues
