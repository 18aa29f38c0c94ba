# tests/conftest.py
"""Shared fixtures for the mintport tests."""

import json
import pytest


SAMPLE_CHANGELOG = """# Changelog

## [Unreleased]

### Features
- unreleased thing

## [v0.50.1](https://github.com/cosmos/cosmos-sdk/releases/tag/v0.50.1) - 2024-01-15

### Bug Fixes
- fix a < b comparison
- see [PR 1](https://github.com/cosmos/cosmos-sdk/pull/1)

## v0.50.0 - 2023-12-01

* initial release

## v0.47.5

### Improvements
- faster
"""


@pytest.fixture
def sample_changelog():
    return SAMPLE_CHANGELOG


@pytest.fixture
def docusaurus_repo(tmp_path):
    """A small Docusaurus site with one frozen version identical to docs/."""
    repo = tmp_path / "repo"
    intro = (
        "---\n"
        "title: Intro\n"
        "sidebar_position: 1\n"
        "---\n\n"
        "Welcome to the docs. See the [guide](./01-learn/02-guide.md).\n"
    )
    guide = "# Guide\n\nThe guide body text here.\n\n![diagram](./diagram.png)\n"

    for docs in (repo / "docs", repo / "versioned_docs" / "version-0.50"):
        (docs / "01-learn").mkdir(parents=True)
        (docs / "intro.md").write_text(intro, encoding="utf-8")
        (docs / "01-learn" / "02-guide.md").write_text(guide, encoding="utf-8")
        (docs / "01-learn" / "diagram.png").write_bytes(b"\x89PNG")

    (repo / "static" / "img").mkdir(parents=True)
    (repo / "static" / "img" / "logo.png").write_bytes(b"\x89PNG")
    return repo


@pytest.fixture
def evm_docs_root(tmp_path):
    """A docs root with evm/next and a docs.json holding only the next version."""
    next_dir = tmp_path / "evm" / "next"
    next_dir.mkdir(parents=True)
    (next_dir / "intro.mdx").write_text(
        "---\ntitle: Intro\n---\n\n"
        "Read the [guide](/evm/next/learn/guide).\n\n"
        '<Card title="Concepts" href="/documentation/concepts" />\n',
        encoding="utf-8",
    )
    docs_json = {
        "navigation": {
            "dropdowns": [
                {
                    "dropdown": "EVM",
                    "icon": "code",
                    "versions": [
                        {
                            "version": "next",
                            "tabs": [{"tab": "Documentation", "groups": [{"group": "EVM", "pages": ["evm/next/intro"]}]}],
                        }
                    ],
                }
            ]
        }
    }
    (tmp_path / "docs.json").write_text(json.dumps(docs_json, indent=2), encoding="utf-8")
    return tmp_path
