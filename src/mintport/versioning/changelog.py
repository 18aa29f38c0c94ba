"""
Release notes pages generated from upstream CHANGELOG.md files.
"""

import os
import re
import logging
from typing import Dict, List, Optional, Tuple

from mintport.core.settings import (
    CHANGELOG_FALLBACK_PATHS,
    DEFAULT_CHANGELOG_PATH,
    DEFAULT_PRODUCT_REPOS,
)
from mintport.remote.github_client import FetchError, GitHubClient
from mintport.schemas.registry import ProductConfig
from mintport.schemas.release import ReleaseUpdate
from mintport.versioning.versions import NEXT, load_versions_registry, parse_version_tuple

logger = logging.getLogger(__name__)

HTML_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
TITLE_RE = re.compile(r"^#\s+Changelog", re.IGNORECASE)
UNRELEASED_RE = re.compile(r"^##\s*\[?Unreleased\]?(?:\([^)]*\))?", re.IGNORECASE)
VERSION_HEADER_RE = re.compile(
    r"^##\s*\[?([vV]?\d+\.\d+(?:\.(?:\d+|x))?)\]?(?:\([^)]*\))?\s*(?:-\s*(.+))?$"
)
SECTION_RE = re.compile(r"^###\s+(.+)$")
RULE_RE = re.compile(r"^[-=]+$")
BULLET_PREFIX_RE = re.compile(r"^[*-]\s*")
TARGET_FILTER_RE = re.compile(r"^(v?\d+\.\d+)")

FALLBACK_LINE_LIMIT = 100
DEFAULT_SECTION = "Changes"


def strip_html_comments(text: str) -> str:
    return HTML_COMMENT_RE.sub("", text)


def sanitize_line(line: str) -> str:
    """Escape spaced comparison operators so MDX does not read them as tags."""
    links: List[str] = []

    def _stash(match):
        links.append(match.group(0))
        return f"\ue010{len(links) - 1}\ue011"

    cleaned = MARKDOWN_LINK_RE.sub(_stash, line.strip())
    cleaned = (
        cleaned.replace(" <= ", " &lt;= ")
        .replace(" >= ", " &gt;= ")
        .replace(" < ", " &lt; ")
        .replace(" > ", " &gt; ")
    )
    return re.sub(r"\ue010(\d+)\ue011", lambda m: links[int(m.group(1))], cleaned)


def _is_bullet(line: str) -> bool:
    return line.startswith("- ") or line.startswith("* ") or bool(re.match(r"^\s+\*", line))


def _matches_filter(version: str, version_filter: str) -> bool:
    # 0.5 matches 0.5 and 0.5.x, never 0.50.x
    number = version.lstrip("vV")
    wanted = version_filter.lstrip("vV").rstrip(".")
    return number == wanted or number.startswith(wanted + ".")


def parse_changelog(content: str, version_filter: Optional[str] = None,
                    fallback: bool = False) -> List[ReleaseUpdate]:
    """
    Parse a keep-a-changelog style file into releases, newest first as written.

    Args:
        content: Raw changelog text
        version_filter: Keep only versions starting with this prefix (v optional)
        fallback: When nothing parses, return one "latest" release holding the
                  first non-empty lines of the file

    Returns:
        Releases with at least one section
    """
    updates: List[ReleaseUpdate] = []
    current: Optional[ReleaseUpdate] = None
    section: Optional[str] = None
    skipping = True
    lines = content.split("\n")

    def _flush():
        if current is not None and current.sections:
            updates.append(current)

    for line in lines:
        if TITLE_RE.match(line):
            continue
        if UNRELEASED_RE.match(line):
            skipping = True
            continue

        header = VERSION_HEADER_RE.match(line)
        if header:
            _flush()
            skipping = False
            current = ReleaseUpdate(version=header.group(1), date=(header.group(2) or "").strip())
            section = None
            continue

        if skipping or not line.strip() or RULE_RE.match(line):
            continue

        section_match = SECTION_RE.match(line)
        if section_match:
            section = section_match.group(1).strip()
            current.sections.setdefault(section, [])
            continue

        if current is not None and _is_bullet(line):
            item = sanitize_line(BULLET_PREFIX_RE.sub("", line.strip()))
            current.sections.setdefault(section or DEFAULT_SECTION, []).append(item)

    _flush()

    if version_filter:
        updates = [u for u in updates if _matches_filter(u.version, version_filter)]

    if not updates and fallback:
        logger.warning("No versions parsed from changelog, creating fallback entry")
        non_empty = [l for l in lines if l.strip()][:FALLBACK_LINE_LIMIT]
        updates.append(ReleaseUpdate(
            version="latest",
            date="",
            sections={DEFAULT_SECTION: [sanitize_line(l) for l in non_empty]},
            raw=True,
        ))

    return updates


def version_filter_for_target(target: str) -> Optional[str]:
    """v0.50.1 -> v0.50, v0.4.x -> v0.4, next -> None."""
    if target == NEXT:
        return None
    match = TARGET_FILTER_RE.match(target)
    return match.group(1) if match else None


def render_release_notes(updates: List[ReleaseUpdate], repo: str, product: str, target: str) -> str:
    """
    Render releases as a Mintlify page of <Update> blocks.
    """
    label = product.upper()
    if target == NEXT:
        pointer = (
            f"For the latest development updates, see the "
            f"[UNRELEASED](https://github.com/{repo}/blob/main/CHANGELOG.md#unreleased) section."
        )
    else:
        pointer = (
            f"For the latest development updates, see the "
            f"[next](/{product}/next/changelog/release-notes) version."
        )

    blocks = []
    for update in updates:
        sections = [
            f"## {name}\n\n" + "\n".join(f"- {item}" for item in items)
            for name, items in update.sections.items()
            if items
        ]
        blocks.append(
            f'<Update label="{update.date or "Release"}" description="{update.version}" '
            f'tags={{["{label}", "Release"]}}>\n'
            + "\n\n".join(sections)
            + "\n</Update>"
        )

    return (
        "---\n"
        'title: "Release Notes"\n'
        f'description: "Release history and changelog for Cosmos {label}"\n'
        'mode: "wide"\n'
        "---\n\n"
        "<Info>\n"
        f"  This page tracks all releases and changes from the [{repo}](https://github.com/{repo}) repository.\n"
        f"  {pointer}\n"
        "</Info>\n\n"
        + "\n\n".join(blocks)
        + "\n"
    )


def release_notes_path(docs_root: str, product: str, target: str) -> str:
    return os.path.join(docs_root, product, target, "changelog", "release-notes.mdx")


def write_release_notes(docs_root: str, product: str, target: str, content: str) -> Tuple[str, int]:
    """
    Returns:
        (output path, number of <Update> blocks written)
    """
    output_path = release_notes_path(docs_root, product, target)
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(content)
    count = content.count("<Update")
    logger.info(f"Updated {output_path} with {count} version(s)")
    return output_path, count


def includes_version_in_release_notes(content: str, version: str) -> bool:
    """
    True when an <Update> block names the version.

    Blocks are matched on their version or description attribute. A minor
    version (v0.5) also matches its patches, and a release line (v0.5.x)
    matches any patch of that line.
    """
    if not content or not version:
        return False
    parsed = parse_version_tuple(version)
    if parsed is None:
        return f'"{version}"' in content

    major, minor, patch, is_x = parsed
    if is_x:
        number = rf"{major}\.{minor}\.(?:\d+|x)"
    elif re.match(r"^v\d+\.\d+$", version):
        number = rf"{major}\.{minor}(?:\.\d+)?"
    else:
        number = rf"{major}\.{minor}\.{patch}"
    pattern = re.compile(rf'<Update[^>]*\b(?:version|description)="v?{number}"')
    return bool(pattern.search(content))


class ChangelogService:
    """Fetches upstream changelogs and writes release-notes pages."""

    def __init__(self, client: Optional[GitHubClient] = None, docs_root: str = "."):
        self.client = client or GitHubClient()
        self.docs_root = docs_root

    def product_config(self, product: str) -> ProductConfig:
        registry = load_versions_registry(self.docs_root, discover=False)
        config = registry.products.get(product)
        if config is None:
            config = ProductConfig(versions=[NEXT], default_version=NEXT)
        if not config.repository:
            config.repository = DEFAULT_PRODUCT_REPOS.get(product, f"cosmos/{product}")
        if not config.changelog_path:
            config.changelog_path = DEFAULT_CHANGELOG_PATH
        return config

    def fetch_changelog(self, repo: str, ref: str, changelog_path: Optional[str] = None) -> str:
        """
        Fetch a changelog, trying the configured path first and then the
        common fallbacks.

        Raises:
            FetchError: When no candidate path returns content
        """
        candidates = [changelog_path or DEFAULT_CHANGELOG_PATH] + CHANGELOG_FALLBACK_PATHS
        path, text = self.client.fetch_first(repo, ref, candidates)
        logger.info(f"Fetched {path} ({len(text.splitlines())} lines)")
        return strip_html_comments(text)

    def resolve_source(self, source: str, repo: Optional[str] = None) -> str:
        """
        Map a --source value to a git ref.

        "latest" reads main: release tags often carry only their own notes
        while main has the full history. "release" reads the newest release
        tag of repo, or main when the repository has no releases.
        """
        if source == "latest":
            return "main"
        if source == "release":
            tag = self.client.latest_release_tag(repo) if repo else None
            if not tag:
                logger.warning(f"No release tag found for {repo}, falling back to main")
                return "main"
            return tag
        return source

    def generate(self, product: str, target: str, source: str = "main",
                 version_filter: Optional[str] = None) -> Optional[Tuple[str, int]]:
        """
        Write <product>/<target>/changelog/release-notes.mdx.

        Args:
            product: Product folder name
            target: "next" or a version folder
            source: Branch or tag to read the changelog from
            version_filter: Overrides the filter derived from the target

        Returns:
            (output path, version count), or None when no version matched

        Raises:
            FetchError: When the changelog could not be fetched
        """
        config = self.product_config(product)
        version_filter = version_filter or version_filter_for_target(target)
        ref = self.resolve_source(source, config.repository)
        logger.info(f"Generating changelog for {product}/{target} from {config.repository}@{ref}")

        changelog = self.fetch_changelog(config.repository, ref, config.changelog_path)
        updates = parse_changelog(changelog, version_filter)
        if not updates:
            logger.warning(f"No versions found matching filter: {version_filter or 'none'}")
            return None

        content = render_release_notes(updates, config.repository, product, target)
        result = write_release_notes(self.docs_root, product, target, content)
        logger.info(f"Versions: {', '.join(u.version for u in updates)}")
        return result

    def generate_all(self, product: str, source: str = "main") -> Dict[str, Optional[Tuple[str, int]]]:
        """Generate release notes for every registered version of a product."""
        config = self.product_config(product)
        results = {}
        for version in config.versions or [NEXT]:
            results[version] = self.generate(product, version, source)
        return results
