# tests/test_converter.py
"""Tests for single document conversion."""

from mintport.migration.converter import FILENAME_TITLE, apply_source_path, convert_docusaurus_to_mintlify
from mintport.migration.report import MigrationReport


GETTING_STARTED = """---
title: Getting Started
sidebar_position: 3
---

# Getting Started

This guide explains the basics.

:::tip
Read [the intro](./intro.md) first.
:::
"""


def test_full_conversion():
    result = convert_docusaurus_to_mintlify(
        GETTING_STARTED, version="v0.50", product="sdk", filepath="learn/start.md"
    )
    content = result.content

    assert content.startswith("---\ntitle: Getting Started\n")
    assert "description: This guide explains the basics." in content
    assert "<Tip>" in content and "</Tip>" in content
    assert "](/sdk/v0.50/learn/intro)" in content
    assert "# Getting Started" not in content
    assert ":::" not in content
    assert result.metadata.title == "Getting Started"
    assert result.metadata.sidebar_position == 3.0


def test_title_from_heading():
    result = convert_docusaurus_to_mintlify("# Hello World\n\nSome text for the page body.\n", filepath="a.md")
    assert result.metadata.title == "Hello World"
    assert "# Hello World" not in result.content
    assert result.content.startswith("---\ntitle: Hello World\n")


def test_title_from_filename():
    result = convert_docusaurus_to_mintlify("Just text", filepath="learn/my-page.md")
    assert result.metadata.title == "My Page"
    assert result.content == "---\ntitle: My Page\n---\nJust text\n"


def test_keep_title():
    content = "---\ntitle: Page\n---\n# Page\n\nBody text here.\n"
    result = convert_docusaurus_to_mintlify(content, keep_title=True)
    assert "# Page" in result.content


def test_invalid_frontmatter_is_reported():
    report = MigrationReport()
    result = convert_docusaurus_to_mintlify(
        "---\ntitle: [bad\n---\nBody text\n", filepath="broken-page.md", report=report
    )
    assert result.metadata.title == "Broken Page"
    assert "Body text" in result.content
    assert report.warnings[0].fixed == "Frontmatter ignored"
    assert report.warnings[0].file == "broken-page.md"


def test_non_numeric_sidebar_position():
    result = convert_docusaurus_to_mintlify("---\ntitle: A\nsidebar_position: abc\n---\nBody\n")
    assert result.metadata.sidebar_position == 999


def test_code_preserved_verbatim():
    content = "# T\n\n```js\nconst x = {a: 1};\n<host>\n```\n"
    result = convert_docusaurus_to_mintlify(content)
    assert "```js\nconst x = {a: 1};\n<host>\n```" in result.content


def test_blank_lines_collapsed_outside_code():
    content = "# T\n\nPara one.\n\n\n\nPara two.\n\n```\na\n\n\n\nb\n```\n"
    result = convert_docusaurus_to_mintlify(content)
    assert "Para one.\n\nPara two." in result.content
    assert "a\n\n\n\nb" in result.content


def test_clean_document_reports_nothing():
    report = MigrationReport()
    convert_docusaurus_to_mintlify(GETTING_STARTED, filepath="learn/start.md", report=report)
    assert report.errors == report.warnings == report.removals == []


def test_empty_frontmatter_block_is_dropped():
    result = convert_docusaurus_to_mintlify("---\n---\n# Intro\n\nSome text for the page.\n")
    assert result.content.startswith("---\ntitle: Intro\n")
    assert result.content.count("---") == 2


def test_deferred_source_path_matches_direct_conversion():
    content = "See [next page](./next-page.md) for more.\n"
    shared = convert_docusaurus_to_mintlify(
        content, version="v2", product="ibc", filepath="a/first.md", defer_source_path=True
    )
    assert "(./next-page.md)" in shared.content
    assert shared.metadata.title == FILENAME_TITLE

    page = apply_source_path(shared, "guides/second-page.md", "v2", "ibc")
    direct = convert_docusaurus_to_mintlify(content, version="v2", product="ibc", filepath="guides/second-page.md")

    assert page.metadata.title == "Second Page"
    assert "[next page](/ibc/v2/guides/next-page)" in page.content
    assert page.content == direct.content
