"""
Mirror of the cosmos/security repository as Mintlify pages.

Produces security-policy.mdx, bug-bounty.mdx and audits.mdx.
"""

import os
import re
import posixpath
import logging
from datetime import datetime
from typing import Dict, List, Optional

import requests

from mintport.core.settings import AUDIT_EXTENSIONS, SECURITY_COMPONENT_NAMES, SECURITY_PAGES
from mintport.remote.github_client import GitHubClient

logger = logging.getLogger(__name__)

TITLE_HEADING_RE = re.compile(r"^#\s+[^\n]+\n*", re.MULTILINE)
HTML_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
ABSOLUTE_URL_RE = re.compile(r"^(https?://|//|#)")

DEFAULT_OUTPUT_DIR = os.path.join("sdk", "v0.53", "security")


def display_name(filename: str) -> str:
    """2024-03_oak_audit.pdf -> 2024 03 Oak Audit"""
    stem = re.sub(r"\.[^.]+$", "", filename)
    words = stem.replace("_", " ").replace("-", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def format_sync_date(now: datetime) -> str:
    return f"{now:%b} {now.day}, {now.year}"


class SecurityDocsSync:
    """Fetches security docs and audit listings and writes them as MDX pages."""

    def __init__(self, client: Optional[GitHubClient] = None, output_dir: str = DEFAULT_OUTPUT_DIR,
                 repo: str = "cosmos/security", branch: str = "main"):
        self.client = client or GitHubClient()
        self.output_dir = output_dir
        self.repo = repo
        self.branch = branch

    def blob_url(self, path: str) -> str:
        return f"https://github.com/{self.repo}/blob/{self.branch}/{path}"

    def tree_url(self, path: str) -> str:
        return f"https://github.com/{self.repo}/tree/{self.branch}/{path}"

    def _absolute_link(self, url: str, source_file: str) -> str:
        if ABSOLUTE_URL_RE.match(url):
            return url
        if url.startswith("/"):
            path = url.lstrip("/")
        else:
            source_dir = posixpath.dirname(source_file)
            path = posixpath.normpath(posixpath.join(source_dir, url))
            # Climbing above the repository root stays at the root
            while path.startswith("../"):
                path = path[3:]
        return self.blob_url(path)

    def transform_to_mdx(self, content: str, source_file: str, title: str,
                         now: Optional[datetime] = None) -> str:
        """
        Turn a security repository markdown file into a Mintlify page.

        Args:
            content: Markdown fetched from the repository
            source_file: Path of the file inside the repository
            title: Page title; replaces the document's own H1
            now: Sync time shown in the banner

        Returns:
            MDX page with frontmatter and a source banner
        """
        body = TITLE_HEADING_RE.sub("", content, count=1)
        body = HTML_COMMENT_RE.sub("", body)
        body = MARKDOWN_LINK_RE.sub(
            lambda m: f"[{m.group(1)}]({self._absolute_link(m.group(2), source_file)})",
            body,
        )
        date = format_sync_date(now or datetime.now())

        return (
            "---\n"
            f'title: "{title}"\n'
            'description: "Security and maintenance policy documentation for the Cosmos Stack"\n'
            "---\n\n"
            "<Info>\n"
            f"This content is sourced from the official [Cosmos Security](https://github.com/{self.repo}) repository.\n\n"
            f"**Last sync:** {date} | [View source]({self.blob_url(source_file)})\n"
            "</Info>\n\n"
            f"{body}\n"
        )

    def _write(self, filename: str, content: str) -> str:
        os.makedirs(self.output_dir, exist_ok=True)
        output_path = os.path.join(self.output_dir, filename)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
        logger.info(f"Written: {output_path}")
        return output_path

    def _generate_page(self, source_file: str) -> str:
        filename, title = SECURITY_PAGES[source_file]
        content = self.client.fetch_raw(self.repo, self.branch, source_file)
        logger.info(f"Fetched {source_file} ({len(content.splitlines())} lines)")
        return self._write(filename, self.transform_to_mdx(content, source_file, title))

    def generate_policy_page(self) -> str:
        return self._generate_page("POLICY.md")

    def generate_bug_bounty_page(self) -> str:
        return self._generate_page("SECURITY.md")

    def _list_optional(self, path: str, recursive: bool = False) -> List[Dict]:
        try:
            if recursive:
                return self.client.list_contents_recursive(self.repo, path)
            return self.client.list_contents(self.repo, path)
        except requests.RequestException as e:
            logger.warning(f"Could not fetch {path}: {e}")
            return []

    def render_audit_section(self, directory: str, files: List[Dict]) -> str:
        """Markdown for one component: files grouped by subdirectory, root first."""
        component = SECURITY_COMPONENT_NAMES.get(directory, directory.upper())
        section = f"\n## {component}\n\n"
        audits = [f for f in files if f.get("name", "").endswith(AUDIT_EXTENSIONS)]
        if not audits:
            return section + f"[View all {component} audits]({self.tree_url(f'audits/{directory}')})\n"

        prefix = f"audits/{directory}/"
        by_dir: Dict[str, List[Dict]] = {}
        for file in audits:
            relative = file["path"][len(prefix):] if file["path"].startswith(prefix) else file["name"]
            by_dir.setdefault(posixpath.dirname(relative), []).append(file)

        for subdir in sorted(by_dir, key=lambda d: (d != "", d)):
            if subdir:
                section += f"\n**{subdir}/**\n\n"
            for file in by_dir[subdir]:
                section += f"- [{display_name(file['name'])}]({file['html_url']})\n"
        return section

    def generate_audits_page(self, now: Optional[datetime] = None) -> str:
        """
        Build audits.mdx from the audits/ tree and the reports/ folder.

        Raises:
            requests.RequestException: When the audits/ listing itself fails
        """
        directories = [item for item in self.client.list_contents(self.repo, "audits") if item.get("type") == "dir"]
        reports = [item for item in self._list_optional("reports") if item.get("type", "file") == "file"]

        body = ""
        for directory in directories:
            files = self._list_optional(f"audits/{directory['name']}", recursive=True)
            if files:
                body += self.render_audit_section(directory["name"], files)

        if reports:
            body += "\n## Transparency Reports\n\n"
            for report in reports:
                body += f"- [{display_name(report['name'])}]({report['html_url']})\n"

        date = format_sync_date(now or datetime.now())
        content = (
            "---\n"
            'title: "Security Audits"\n'
            'description: "Security audits and transparency reports for Cosmos Stack components"\n'
            "---\n\n"
            "<Info>\n"
            f"This page is auto-generated from the [{self.repo}](https://github.com/{self.repo}) repository.\n\n"
            f"**Last synced:** {date} | [View all audits]({self.tree_url('audits')})\n"
            "</Info>\n\n"
            "Cosmos Labs maintains a comprehensive security program for all Cosmos Stack components. "
            "This page provides links to third-party security audits and transparency reports.\n"
            f"{body}\n"
            "## Additional Resources\n\n"
            "- [Security Policy](./security-policy) - Release and maintenance policy\n"
            "- [Bug Bounty Program](./bug-bounty) - Report vulnerabilities and earn rewards\n"
            f"- [{self.repo} Repository](https://github.com/{self.repo}) - Complete security documentation\n"
        )
        return self._write("audits.mdx", content)

    def sync_all(self) -> List[str]:
        logger.info(f"Syncing github.com/{self.repo} into {self.output_dir}")
        return [
            self.generate_policy_page(),
            self.generate_bug_bounty_page(),
            self.generate_audits_page(),
        ]
