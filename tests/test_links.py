# tests/test_links.py
"""Tests for link and image path rewriting."""

import pytest

from mintport.migration.links import (
    apply_path_mappings,
    fix_internal_links,
    fix_link_url,
    fix_markdown_links,
    fix_numbered_prefix_links,
    strip_numbered_prefixes,
    update_image_paths,
)


def test_strip_numbered_prefixes():
    assert strip_numbered_prefixes("01-learn/02-advanced/03-intro.md") == "learn/advanced/intro.md"


@pytest.mark.parametrize("url,source,expected", [
    ("./intro.md", "learn/start.md", "/sdk/v0.50/learn/intro"),
    ("../02-build/01-app.md#setup", "01-learn/intro.md", "/sdk/v0.50/build/app#setup"),
    ("/learn/intro", "a.md", "/sdk/v0.50/learn/intro"),
    ("/sdk/learn", "a.md", "/sdk/v0.50/learn"),
    ("../../x.md", "a.md", "/sdk/v0.50/x"),
])
def test_internal_links_rewritten(url, source, expected):
    assert fix_link_url(url, "v0.50", "sdk", source) == expected


@pytest.mark.parametrize("url", [
    "https://example.com/page.md",
    "#anchor",
    "mailto:someone@example.com",
    "//cdn.example.com/x",
    "/sdk/v0.47/learn",
    "/sdk/next/learn",
])
def test_links_left_alone(url):
    assert fix_link_url(url, "v0.50", "sdk", "learn/a.md") == url


def test_fix_markdown_links_skips_images_and_code():
    content = "See [intro](./intro.md) and ![img](./img.png) and `[code](./x.md)`."
    result = fix_markdown_links(content, "next", "sdk", "learn/a.md")
    assert "[intro](/sdk/next/learn/intro)" in result
    assert "![img](./img.png)" in result
    assert "`[code](./x.md)`" in result


def test_link_title_is_kept():
    result = fix_markdown_links('[a](./b.md "Title")', "next", "sdk", "")
    assert result == '[a](/sdk/next/b "Title")'


def test_fix_markdown_links_is_idempotent():
    content = "[a](./01-x/02-y.md) [b](../z.md#h) [c](https://e.com)"
    once = fix_markdown_links(content, "v1.0", "ibc", "docs/page.md")
    assert fix_markdown_links(once, "v1.0", "ibc", "docs/page.md") == once


def test_relative_links_can_be_left_for_later():
    content = "[a](./guide.md) [b](/concepts)"
    deferred = fix_markdown_links(content, "v1.0", "ibc", resolve_relative=False)
    assert deferred == "[a](./guide.md) [b](/ibc/v1.0/concepts)"
    assert fix_markdown_links(deferred, "v1.0", "ibc", "learn/page.md") == "[a](/ibc/v1.0/learn/guide) [b](/ibc/v1.0/concepts)"


def test_fix_internal_links():
    assert fix_internal_links("## Setup {#setup}\n") == "## Setup\n"
    assert fix_internal_links('Title[\u200b](#setup "Direct link to Setup")') == "Title"


def test_relative_image_paths():
    result = update_image_paths("![diagram](./images/flow.png)", "learn/01-basics/intro.md")
    assert result == "![diagram](../../../images/learn/basics/images/flow.png)"


def test_html_image_paths():
    result = update_image_paths('<img src="./a.png" />', "learn/x.md")
    assert result == '<img src="../../images/learn/a.png" />'


def test_static_image_paths():
    assert update_image_paths("![logo](/img/logo.png)", "intro.md") == "![logo](../images/static/img/logo.png)"
    assert update_image_paths("![a](/static/img/a.png)", "intro.md") == "![a](../images/static/img/a.png)"


def test_apply_path_mappings():
    mappings = {"01-learn/02-intro": "learn/intro"}
    assert apply_path_mappings("/sdk/next/01-learn/02-intro#x", mappings) == ("/sdk/next/learn/intro#x", 1)
    assert apply_path_mappings("https://e.com/01-learn/02-intro", mappings) == ("https://e.com/01-learn/02-intro", 0)


def test_fix_numbered_prefix_links(tmp_path):
    page = tmp_path / "next" / "a.mdx"
    page.parent.mkdir()
    page.write_text(
        '---\ntitle: A\n---\nSee [x](/sdk/next/01-learn/02-intro) and <a href="02-intro">y</a>\n',
        encoding="utf-8",
    )
    mappings = {"01-learn/02-intro": "learn/intro", "02-intro": "intro"}

    assert fix_numbered_prefix_links(str(tmp_path), mappings) == (1, 2)
    assert page.read_text(encoding="utf-8") == (
        '---\ntitle: A\n---\n\nSee [x](/sdk/next/learn/intro) and <a href="intro">y</a>\n'
    )
