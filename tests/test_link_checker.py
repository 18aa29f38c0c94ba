# tests/test_link_checker.py
"""Tests for the static link checker."""

import os
import pytest
import requests
from unittest.mock import MagicMock

from mintport.links import checker as checker_module
from mintport.links.checker import (
    LinkChecker,
    check_external_link,
    check_internal_link,
    extract_links,
    resolve_url,
)
from mintport.schemas.links import LinkType


INDEX = (
    "[Guide](./guide)\n"
    "[Missing](/docs/missing)\n"
    '<a href="/docs/guide">g</a>\n'
    '<Card title="x" href="https://example.com" />\n'
    "[mail](mailto:a@b.c)\n"
    "[anchor](#top)\n"
)


@pytest.fixture
def site(tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "index.mdx").write_text(INDEX, encoding="utf-8")
    (docs / "guide.md").write_text("# Guide\n", encoding="utf-8")
    for skipped in ("node_modules", ".hidden"):
        (tmp_path / skipped).mkdir()
        (tmp_path / skipped / "x.md").write_text("[broken](/nowhere)\n", encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def no_delay(monkeypatch):
    monkeypatch.setattr(checker_module, "EXTERNAL_DELAY", 0)


def test_extract_links():
    links = extract_links(INDEX)
    assert [link.url for link in links] == ["./guide", "/docs/missing", "/docs/guide", "https://example.com"]
    assert [link.type for link in links] == [LinkType.MARKDOWN, LinkType.MARKDOWN, LinkType.HTML, LinkType.CARD]
    assert [link.line for link in links] == [1, 2, 3, 4]


def test_resolve_url(tmp_path):
    file_path = os.path.join(str(tmp_path), "docs", "index.mdx")
    assert resolve_url("./guide.md", file_path, str(tmp_path)) == "/docs/guide"
    assert resolve_url("./guide.md", file_path, str(tmp_path), "https://docs.x") == "https://docs.x/docs/guide"
    assert resolve_url("/a", file_path, str(tmp_path), "https://docs.x") == "https://docs.x/a"
    assert resolve_url("https://e.com", file_path, str(tmp_path), "https://docs.x") == "https://e.com"


def test_check_internal_link(site):
    index = str(site / "docs" / "index.mdx")
    assert check_internal_link("./guide", index, str(site)) == str(site / "docs" / "guide.md")
    assert check_internal_link("/docs/guide#intro", index, str(site)) == str(site / "docs" / "guide.md")
    assert check_internal_link("/docs", index, str(site)) == str(site / "docs" / "index.mdx")
    assert check_internal_link("/docs/nothing", index, str(site)) is None
    assert check_internal_link("../../outside", index, str(site)) is None


def test_internal_run(site):
    found = []
    summary = LinkChecker(str(site), on_broken=found.append).run()

    assert summary.files_checked == 2
    assert summary.total_links == 4
    assert summary.internal_links == 3
    assert summary.skipped_links == 1
    assert len(summary.broken) == 1
    broken = summary.broken[0]
    assert broken.link.url == "/docs/missing"
    assert broken.file == os.path.join("docs", "index.mdx")
    assert broken.link.line == 2
    assert broken.error == "File not found"
    assert found == summary.broken
    assert not summary.ok


def test_external_run(site):
    session = MagicMock()
    session.head.return_value = MagicMock(status_code=404)

    summary = LinkChecker(str(site), check_external=True, check_internal=False, session=session).run()

    assert summary.external_links == 1
    assert summary.skipped_links == 3
    assert summary.broken[0].status == 404
    assert summary.broken[0].link.line == 4
    assert summary.broken[0].file == os.path.join("docs", "index.mdx")


def test_check_external_link_errors():
    session = MagicMock()
    session.head.side_effect = requests.Timeout()
    result = check_external_link(session, "https://slow.example.com")
    assert not result.ok
    assert result.error == "Request timeout"

    session.head.side_effect = requests.ConnectionError("boom")
    assert check_external_link(session, "https://down.example.com").error == "boom"

    session.head.side_effect = None
    session.head.return_value = MagicMock(status_code=301)
    assert check_external_link(session, "https://moved.example.com").ok
