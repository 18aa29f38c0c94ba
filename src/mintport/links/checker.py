"""
Static link checker for the generated MDX tree.

Internal links are resolved against files on disk; external links are
checked with HEAD requests when asked to.
"""

import os
import re
import time
import logging
from typing import Callable, List, Optional

import requests
from tqdm import tqdm

from mintport.schemas.links import DocLink, LinkCheckResult, LinkCheckSummary, LinkType

logger = logging.getLogger(__name__)

MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
HTML_LINK_RE = re.compile(r"""<a\s+[^>]*href=["']([^"']+)["'][^>]*>""", re.IGNORECASE)
CARD_LINK_RE = re.compile(r"""<Card[^>]*href=["']([^"']+)["'][^>]*>""", re.IGNORECASE)

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
SKIPPED_DIRS = ("node_modules",)
# Pause between external requests
EXTERNAL_DELAY = 0.1


def _keep(url: str) -> bool:
    return bool(url) and not url.startswith("#") and not url.startswith("mailto:")


def _line_of(content: str, index: int) -> int:
    return content.count("\n", 0, index) + 1


def extract_links(content: str) -> List[DocLink]:
    """Markdown links, <a href> and <Card href>, with 1-based line numbers."""
    links: List[DocLink] = []
    for match in MARKDOWN_LINK_RE.finditer(content):
        url = match.group(2).strip()
        if _keep(url):
            links.append(DocLink(url=url, text=match.group(1), line=_line_of(content, match.start()),
                                 type=LinkType.MARKDOWN))
    for regex, link_type in ((HTML_LINK_RE, LinkType.HTML), (CARD_LINK_RE, LinkType.CARD)):
        for match in regex.finditer(content):
            url = match.group(1).strip()
            if _keep(url):
                links.append(DocLink(url=url, text=match.group(0), line=_line_of(content, match.start()),
                                     type=link_type))
    return links


def is_external(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


def resolve_url(url: str, file_path: str, project_root: str, base_url: str = "") -> str:
    """
    Turn a link into an absolute URL or a site path.

    Relative links are resolved against the linking file and expressed as
    /path without the .md/.mdx extension.
    """
    if is_external(url):
        return url
    if url.startswith("/"):
        return f"{base_url}{url}"
    resolved = os.path.normpath(os.path.join(os.path.dirname(file_path), url))
    relative = os.path.relpath(resolved, project_root).replace(os.sep, "/")
    web_path = "/" + re.sub(r"\.mdx?$", "", relative)
    return f"{base_url}{web_path}"


def check_internal_link(url: str, file_path: str, project_root: str) -> Optional[str]:
    """
    Find the file an internal link points to.

    Returns:
        Path of the first existing candidate (.mdx, .md, index.mdx, index.md),
        or None when the link is broken
    """
    clean = url.split("?", 1)[0].split("#", 1)[0]
    root = os.path.abspath(project_root)
    if clean.startswith("/"):
        base = os.path.join(root, clean.lstrip("/"))
    else:
        base = os.path.abspath(os.path.join(os.path.dirname(file_path), clean))

    candidates = [
        base + ".mdx",
        base + ".md",
        os.path.join(base, "index.mdx"),
        os.path.join(base, "index.md"),
    ]
    for candidate in candidates:
        if os.path.isfile(candidate) and os.path.abspath(candidate).startswith(root):
            return candidate
    return None


def check_external_link(session: requests.Session, url: str, timeout: int = 5) -> LinkCheckResult:
    """
    HEAD an external URL. Status 400 and above, timeouts and transport
    errors count as broken.

    The result carries a placeholder link; callers fill in file and link.
    """
    result = LinkCheckResult(file="", link=DocLink(url=url, line=0), resolved=url, external=True)
    try:
        response = session.head(url, timeout=timeout, allow_redirects=True,
                                headers={"User-Agent": BROWSER_USER_AGENT})
    except requests.Timeout:
        result.ok = False
        result.error = "Request timeout"
        return result
    except requests.RequestException as e:
        result.ok = False
        result.error = str(e)
        return result
    result.status = response.status_code
    result.ok = response.status_code < 400
    return result


class LinkChecker:
    """Scans a docs tree and checks every link it finds."""

    def __init__(self, project_root: str, check_external: bool = False, check_internal: bool = True,
                 base_url: str = "", timeout: int = 5, session: Optional[requests.Session] = None,
                 on_broken: Optional[Callable[[LinkCheckResult], None]] = None):
        """
        Args:
            project_root: Directory to scan
            check_external: Check http(s) links
            check_internal: Resolve site and relative links on disk
            base_url: Prefix for resolved internal URLs in reports
            timeout: Per-request timeout for external links, in seconds
            session: requests session for external checks
            on_broken: Called with each broken link as it is found
        """
        self.project_root = os.path.abspath(project_root)
        self.check_external = check_external
        self.check_internal = check_internal
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.on_broken = on_broken

    def find_markdown_files(self) -> List[str]:
        files = []
        for root, dirs, names in os.walk(self.project_root):
            dirs[:] = sorted(d for d in dirs if not d.startswith(".") and d not in SKIPPED_DIRS)
            for name in sorted(names):
                if name.endswith((".md", ".mdx")):
                    files.append(os.path.join(root, name))
        return files

    def _check(self, file_path: str, link: DocLink) -> Optional[LinkCheckResult]:
        resolved = resolve_url(link.url, file_path, self.project_root, self.base_url)
        relative_file = os.path.relpath(file_path, self.project_root)

        if is_external(link.url):
            result = check_external_link(self.session, resolved, self.timeout)
            time.sleep(EXTERNAL_DELAY)
            return result.model_copy(update={"file": relative_file, "link": link})

        found = check_internal_link(link.url, file_path, self.project_root)
        return LinkCheckResult(
            file=relative_file,
            link=link,
            resolved=resolved,
            ok=found is not None,
            error=None if found else "File not found",
        )

    def run(self, show_progress: bool = False) -> LinkCheckSummary:
        files = self.find_markdown_files()
        logger.info(f"Found {len(files)} markdown files under {self.project_root}")
        summary = LinkCheckSummary(files_checked=len(files))

        pending = []
        for file_path in files:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
            for link in extract_links(content):
                summary.total_links += 1
                external = is_external(link.url)
                if external and not self.check_external:
                    summary.skipped_links += 1
                    continue
                if not external and not self.check_internal:
                    summary.skipped_links += 1
                    continue
                pending.append((file_path, link))

        for file_path, link in tqdm(pending, desc="Checking links", disable=not show_progress):
            result = self._check(file_path, link)
            if result.external:
                summary.external_links += 1
            else:
                summary.internal_links += 1
            if not result.ok:
                summary.broken.append(result)
                if self.on_broken is not None:
                    self.on_broken(result)

        logger.info(
            f"Checked {summary.internal_links + summary.external_links} of {summary.total_links} links, "
            f"{len(summary.broken)} broken"
        )
        return summary
