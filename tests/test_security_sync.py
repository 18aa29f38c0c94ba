# tests/test_security_sync.py
"""Tests for the security repository mirror."""

import pytest
import requests
from datetime import datetime
from unittest.mock import MagicMock

from mintport.security.sync import SecurityDocsSync, display_name, format_sync_date


POLICY = (
    "# Policy\n\n"
    "<!-- hidden maintainer note -->\n"
    "See [guide](./docs/guide.md) and [site](https://cosmos.network) and [up](../x.md).\n"
)

LISTINGS = {
    "audits": [
        {"name": "sdk", "type": "dir"},
        {"name": "misc", "type": "dir"},
        {"name": "README.md", "type": "file"},
    ],
    "reports": [
        {"name": "2024-q1-report.pdf", "type": "file", "html_url": "r1"},
    ],
}

RECURSIVE = {
    "audits/sdk": [
        {"name": "oak_audit.pdf", "path": "audits/sdk/oak_audit.pdf", "html_url": "u1", "type": "file"},
        {"name": "v050-review.md", "path": "audits/sdk/v0.50/v050-review.md", "html_url": "u2", "type": "file"},
        {"name": "notes.txt", "path": "audits/sdk/notes.txt", "html_url": "u3", "type": "file"},
    ],
    "audits/misc": [
        {"name": "data.txt", "path": "audits/misc/data.txt", "html_url": "u4", "type": "file"},
    ],
}


@pytest.fixture
def client():
    client = MagicMock()
    client.list_contents.side_effect = lambda repo, path="", ref=None: LISTINGS[path]
    client.list_contents_recursive.side_effect = lambda repo, path="", ref=None: RECURSIVE[path]
    return client


def test_display_name():
    assert display_name("2024-03_oak_audit.pdf") == "2024 03 Oak Audit"
    assert display_name("v050-review.md") == "V050 Review"


def test_format_sync_date():
    assert format_sync_date(datetime(2025, 3, 5)) == "Mar 5, 2025"


def test_transform_to_mdx(client, tmp_path):
    syncer = SecurityDocsSync(client, output_dir=str(tmp_path))
    page = syncer.transform_to_mdx(POLICY, "POLICY.md", "Security Policy", now=datetime(2025, 3, 5))

    assert page.startswith('---\ntitle: "Security Policy"\n')
    assert "**Last sync:** Mar 5, 2025 | [View source](https://github.com/cosmos/security/blob/main/POLICY.md)" in page
    assert "[guide](https://github.com/cosmos/security/blob/main/docs/guide.md)" in page
    assert "[site](https://cosmos.network)" in page
    assert "[up](https://github.com/cosmos/security/blob/main/x.md)" in page
    assert "hidden maintainer note" not in page
    assert "# Policy" not in page


def test_audits_page(client, tmp_path):
    syncer = SecurityDocsSync(client, output_dir=str(tmp_path))
    path = syncer.generate_audits_page(now=datetime(2025, 1, 1))
    content = (tmp_path / "audits.mdx").read_text(encoding="utf-8")

    assert path == str(tmp_path / "audits.mdx")
    assert "**Last synced:** Jan 1, 2025" in content
    assert "## Cosmos SDK" in content
    assert "- [Oak Audit](u1)" in content
    assert "**v0.50/**" in content
    assert "- [V050 Review](u2)" in content
    assert "notes.txt" not in content and "u3" not in content
    assert content.index("Oak Audit") < content.index("**v0.50/**")
    assert "[View all MISC audits](https://github.com/cosmos/security/tree/main/audits/misc)" in content
    assert content.index("## Cosmos SDK") < content.index("## MISC")
    assert "## Transparency Reports\n\n- [2024 Q1 Report](r1)" in content
    assert "## Additional Resources" in content


def test_missing_reports_folder(client, tmp_path):
    def list_contents(repo, path="", ref=None):
        if path == "reports":
            raise requests.HTTPError("404")
        return LISTINGS[path]

    client.list_contents.side_effect = list_contents
    SecurityDocsSync(client, output_dir=str(tmp_path)).generate_audits_page()

    assert "Transparency Reports" not in (tmp_path / "audits.mdx").read_text(encoding="utf-8")


def test_sync_all(tmp_path):
    client = MagicMock()
    client.fetch_raw.return_value = "# Title\n\nBody text.\n"
    client.list_contents.return_value = []

    written = SecurityDocsSync(client, output_dir=str(tmp_path / "security")).sync_all()

    assert [p.rsplit("/", 1)[-1] for p in written] == ["security-policy.mdx", "bug-bounty.mdx", "audits.mdx"]
    assert all((tmp_path / "security" / name).exists() for name in ("security-policy.mdx", "bug-bounty.mdx", "audits.mdx"))
    client.fetch_raw.assert_any_call("cosmos/security", "main", "POLICY.md")
    client.fetch_raw.assert_any_call("cosmos/security", "main", "SECURITY.md")
    bug_bounty = (tmp_path / "security" / "bug-bounty.mdx").read_text(encoding="utf-8")
    assert 'title: "Bug Bounty Program"' in bug_bounty
