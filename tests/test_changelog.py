# tests/test_changelog.py
"""Tests for changelog parsing and release notes generation."""

import json
import pytest
from unittest.mock import MagicMock

from mintport.core.settings import CHANGELOG_FALLBACK_PATHS
from mintport.remote.github_client import FetchError
from mintport.versioning.changelog import (
    ChangelogService,
    includes_version_in_release_notes,
    parse_changelog,
    render_release_notes,
    sanitize_line,
    strip_html_comments,
    version_filter_for_target,
    write_release_notes,
)


@pytest.fixture
def client(sample_changelog):
    client = MagicMock()
    client.fetch_first.return_value = ("CHANGELOG.md", sample_changelog)
    return client


def test_parse_changelog(sample_changelog):
    updates = parse_changelog(sample_changelog)

    assert [u.version for u in updates] == ["v0.50.1", "v0.50.0", "v0.47.5"]
    assert updates[0].date == "2024-01-15"
    assert updates[0].sections["Bug Fixes"] == [
        "fix a &lt; b comparison",
        "see [PR 1](https://github.com/cosmos/cosmos-sdk/pull/1)",
    ]
    assert updates[1].sections == {"Changes": ["initial release"]}
    assert updates[2].date == ""


def test_unreleased_section_skipped(sample_changelog):
    items = [item for u in parse_changelog(sample_changelog) for s in u.sections.values() for item in s]
    assert "unreleased thing" not in items


def test_releases_without_entries_are_dropped():
    updates = parse_changelog("## v1.0.0\n\n## v0.9.0\n- x\n")
    assert [u.version for u in updates] == ["v0.9.0"]


def test_version_filter(sample_changelog):
    assert [u.version for u in parse_changelog(sample_changelog, "v0.50")] == ["v0.50.1", "v0.50.0"]
    assert [u.version for u in parse_changelog(sample_changelog, "0.47")] == ["v0.47.5"]


def test_version_filter_stops_at_segment_boundary():
    changelog = "## v0.50.1\n\n- a\n\n## v0.5.2\n\n- b\n\n## v0.5\n\n- c\n"
    assert [u.version for u in parse_changelog(changelog, "v0.5")] == ["v0.5.2", "v0.5"]
    assert [u.version for u in parse_changelog(changelog, "v0.50")] == ["v0.50.1"]


def test_fallback_entry():
    assert parse_changelog("just some text\nmore") == []
    updates = parse_changelog("just some text\nmore", fallback=True)
    assert len(updates) == 1
    assert updates[0].version == "latest"
    assert updates[0].raw
    assert updates[0].sections == {"Changes": ["just some text", "more"]}


def test_sanitize_line_keeps_links():
    assert sanitize_line("a >= b and [x > y](https://e.com/a>b)") == "a &gt;= b and [x > y](https://e.com/a>b)"


def test_strip_html_comments():
    assert strip_html_comments("<!-- hi -->\n## v1.0.0") == "\n## v1.0.0"


@pytest.mark.parametrize("target,expected", [
    ("next", None),
    ("v0.50.1", "v0.50"),
    ("v0.4.x", "v0.4"),
    ("main", None),
])
def test_version_filter_for_target(target, expected):
    assert version_filter_for_target(target) == expected


def test_render_release_notes(sample_changelog):
    updates = parse_changelog(sample_changelog)
    page = render_release_notes(updates, "cosmos/cosmos-sdk", "sdk", "v0.50")

    assert page.startswith('---\ntitle: "Release Notes"\n')
    assert 'description: "Release history and changelog for Cosmos SDK"' in page
    assert '<Update label="2024-01-15" description="v0.50.1" tags={["SDK", "Release"]}>' in page
    assert '<Update label="Release" description="v0.47.5"' in page
    assert "## Bug Fixes\n\n- fix a &lt; b comparison" in page
    assert "[next](/sdk/next/changelog/release-notes)" in page
    assert page.count("</Update>") == 3
    assert page.endswith("</Update>\n")


def test_render_for_next_points_at_unreleased(sample_changelog):
    page = render_release_notes(parse_changelog(sample_changelog), "cosmos/cosmos-sdk", "sdk", "next")
    assert "[UNRELEASED](https://github.com/cosmos/cosmos-sdk/blob/main/CHANGELOG.md#unreleased)" in page


def test_write_release_notes(tmp_path, sample_changelog):
    page = render_release_notes(parse_changelog(sample_changelog), "cosmos/cosmos-sdk", "sdk", "next")
    path, count = write_release_notes(str(tmp_path), "sdk", "next", page)
    assert count == 3
    assert path == str(tmp_path / "sdk" / "next" / "changelog" / "release-notes.mdx")


def test_includes_version_in_release_notes(sample_changelog):
    page = render_release_notes(parse_changelog(sample_changelog, "v0.50"), "cosmos/cosmos-sdk", "sdk", "v0.50")
    assert includes_version_in_release_notes(page, "v0.50.1")
    assert includes_version_in_release_notes(page, "v0.50")
    assert includes_version_in_release_notes(page, "v0.50.x")
    assert not includes_version_in_release_notes(page, "v0.47.5")
    assert not includes_version_in_release_notes("", "v0.50")


def test_includes_version_attribute():
    assert includes_version_in_release_notes('<Update version="v0.4.2">', "v0.4.x")
    assert includes_version_in_release_notes('<Update version="custom">', "custom")


def test_service_generate(tmp_path, client):
    service = ChangelogService(client, str(tmp_path))
    path, count = service.generate("sdk", "v0.50")

    client.fetch_first.assert_called_once_with(
        "cosmos/cosmos-sdk", "main", ["CHANGELOG.md"] + CHANGELOG_FALLBACK_PATHS
    )
    assert count == 2
    assert path == str(tmp_path / "sdk" / "v0.50" / "changelog" / "release-notes.mdx")


def test_service_no_matching_versions(tmp_path, client):
    service = ChangelogService(client, str(tmp_path))
    assert service.generate("sdk", "v9.9") is None
    assert not (tmp_path / "sdk").exists()


def test_service_fetch_error_propagates(tmp_path, client):
    client.fetch_first.side_effect = FetchError("Failed to fetch changelog")
    with pytest.raises(FetchError):
        ChangelogService(client, str(tmp_path)).generate("sdk", "next")


def test_service_strips_comments(tmp_path, client):
    client.fetch_first.return_value = ("CHANGELOG.md", "<!-- hi -->\n## v1.0.0\n- x")
    text = ChangelogService(client, str(tmp_path)).fetch_changelog("cosmos/x", "main")
    assert text == "\n## v1.0.0\n- x"


def test_resolve_source(client):
    service = ChangelogService(client)
    assert service.resolve_source("latest") == "main"
    assert service.resolve_source("v1.0.0") == "v1.0.0"


def test_resolve_release_source(client):
    service = ChangelogService(client)
    client.latest_release_tag.return_value = "v0.53.0"
    assert service.resolve_source("release", "cosmos/cosmos-sdk") == "v0.53.0"
    client.latest_release_tag.assert_called_once_with("cosmos/cosmos-sdk")

    client.latest_release_tag.return_value = None
    assert service.resolve_source("release", "cosmos/cosmos-sdk") == "main"


def test_service_generate_all(tmp_path, client):
    (tmp_path / "versions.json").write_text(json.dumps({
        "products": {"sdk": {"versions": ["next", "v0.50"], "repository": "cosmos/cosmos-sdk"}}
    }), encoding="utf-8")

    results = ChangelogService(client, str(tmp_path)).generate_all("sdk")
    assert results["next"][1] == 3
    assert results["v0.50"][1] == 2


def test_product_config_defaults(tmp_path, client):
    config = ChangelogService(client, str(tmp_path)).product_config("ibc")
    assert config.repository == "cosmos/ibc-go"
    assert config.changelog_path == "CHANGELOG.md"
    assert config.versions == ["next"]
