"""
Single-document Docusaurus to Mintlify conversion.
"""

import re
import logging
from typing import Callable, Optional

from mintport.core.settings import DEFAULT_SIDEBAR_POSITION
from mintport.migration.admonitions import convert_admonitions
from mintport.migration.code_blocks import enhance_code_blocks, fix_malformed_code_blocks
from mintport.migration.frontmatter import (
    FRONTMATTER_RE,
    clean_frontmatter,
    dump_frontmatter,
    extract_description,
    extract_title,
    parse_frontmatter,
    title_from_filename,
)
from mintport.migration.links import fix_internal_links, fix_markdown_links
from mintport.migration.mdx_fixes import (
    close_unbalanced_expandables,
    convert_html_comments,
    convert_tabs,
    fix_html_elements,
    fix_mdx_issues,
)
from mintport.migration.report import MigrationReport
from mintport.migration.safe_content import map_prose
from mintport.migration.validation import validate_mdx_content
from mintport.schemas.migration import ConversionMetadata, ConversionResult

logger = logging.getLogger(__name__)

# Title placeholder written by path-independent conversions; the title is
# derived from the file name once the file is known
FILENAME_TITLE = "\ue021"


def _sidebar_position(frontmatter: dict) -> float:
    value = frontmatter.get("sidebar_position", frontmatter.get("sidebarPosition"))
    if value is None:
        return DEFAULT_SIDEBAR_POSITION
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric sidebar_position: {value!r}")
        return DEFAULT_SIDEBAR_POSITION


def convert_docusaurus_to_mintlify(
    content: str,
    version: str = "next",
    product: str = "generic",
    filepath: str = "",
    keep_title: bool = False,
    report: Optional[MigrationReport] = None,
    fetcher: Optional[Callable[[str], str]] = None,
    format_code: bool = False,
    defer_source_path: bool = False,
) -> ConversionResult:
    """
    Convert one Docusaurus Markdown/MDX document to Mintlify MDX.

    Args:
        content: Raw source document
        version: Version folder the page is written to (e.g. "next", "v0.50")
        product: Product folder used to namespace internal links
        filepath: Source path relative to the docs root, used for relative
                  links, the fallback title and issue attribution
        keep_title: Keep the H1 in the body when the title comes from frontmatter
        report: Collects errors, warnings and removals; a fresh one is used if None
        fetcher: Resolves GitHub reference code blocks; None keeps them as comments
        format_code: Run the regex code formatters over fenced blocks
        defer_source_path: Leave relative links and the file-name title to
                           apply_source_path, so the result can be shared by
                           identical files at other paths

    Returns:
        ConversionResult with the MDX text and the page title/sidebar position
    """
    report = report if report is not None else MigrationReport()
    if filepath:
        report.set_current_file(filepath)

    try:
        frontmatter, body = parse_frontmatter(content)
    except ValueError as e:
        report.add_warning(str(e), line=1, fixed="Frontmatter ignored")
        frontmatter, body = {}, re.sub(r"\A---\n[\s\S]*?\n---\n?", "", content)

    title = frontmatter.get("title") or frontmatter.get("sidebar_label")
    if not title:
        title, body = extract_title(body)
        if not title:
            if defer_source_path:
                title = FILENAME_TITLE
            else:
                title = title_from_filename(filepath) if filepath else "Documentation"
    elif not keep_title:
        extracted, remaining = extract_title(body)
        if extracted:
            body = remaining
    title = str(title)

    description = frontmatter.get("description") or extract_description(body)

    body = convert_html_comments(body, report)
    body = fix_malformed_code_blocks(body, report)
    body = convert_tabs(body)
    body = fix_markdown_links(body, version, product, filepath, resolve_relative=not defer_source_path)
    body = fix_html_elements(body)
    body = enhance_code_blocks(body, fetcher=fetcher, format_code=format_code)
    body = fix_mdx_issues(body, report)
    body = convert_admonitions(body, report)
    body = fix_internal_links(body)
    body = close_unbalanced_expandables(body)

    for issue in validate_mdx_content(body):
        report.add_error(issue.issue, line=issue.line, suggestion=issue.suggestion)

    page_frontmatter = {"title": title}
    if description:
        page_frontmatter["description"] = description
    if frontmatter.get("icon"):
        page_frontmatter["icon"] = frontmatter["icon"]

    final = dump_frontmatter(clean_frontmatter(page_frontmatter), body)
    final = map_prose(final, lambda text: re.sub(r"\n{3,}", "\n\n", text))

    return ConversionResult(
        content=final,
        metadata=ConversionMetadata(title=title, sidebar_position=_sidebar_position(frontmatter)),
    )


def apply_source_path(result: ConversionResult, filepath: str, version: str, product: str) -> ConversionResult:
    """
    Finish a conversion made with defer_source_path for one source file.

    Relative links are resolved against the file's folder and a missing title
    is derived from its name. The frontmatter is left as is otherwise.
    """
    match = FRONTMATTER_RE.match(result.content)
    head = result.content[:match.end()] if match else ""
    body = fix_markdown_links(result.content[len(head):], version, product, filepath)

    title = result.metadata.title
    if title != FILENAME_TITLE:
        content = head + body
    else:
        title = title_from_filename(filepath) if filepath else "Documentation"
        page_frontmatter, _ = parse_frontmatter(head)
        page_frontmatter["title"] = title
        content = dump_frontmatter(clean_frontmatter(page_frontmatter), body)

    metadata = result.metadata.model_copy(update={"title": title})
    return ConversionResult(content=content, metadata=metadata)
