# tests/test_navigation.py
"""Tests for sidebar ordering and docs.json navigation."""

import json
import pytest

from mintport.navigation.docs_json import (
    build_product_dropdown,
    build_version_navigation,
    freeze_navigation,
    get_product_icon,
    group_name,
    replace_path_prefix,
    update_docs_json,
    write_navigation_snippet,
)
from mintport.navigation.sidebar import resolve_sidebar_position_conflicts
from mintport.schemas.migration import ConvertedFile


def _file(path, position=1):
    return ConvertedFile(path=path, title=path, sidebar_position=position)


def _version_entry(product, version):
    return {
        "version": version,
        "tabs": [{"tab": "Documentation", "groups": [{"group": product.upper(), "pages": [f"{product}/{version}/intro"]}]}],
    }


def test_sidebar_conflicts_resolved():
    files = [_file("b", 1), _file("a", 1), _file("c", 5), _file("learn/x", 2), _file("learn/y", 1)]
    resolved = resolve_sidebar_position_conflicts(files)

    assert [f.path for f in resolved] == ["a", "b", "c", "learn/y", "learn/x"]
    assert [f.resolved_position for f in resolved] == [1, 2, 5, 1, 2]
    # Inputs are left untouched
    assert files[0].resolved_position is None


def test_group_name_and_icon():
    assert group_name("02-advanced-topics") == "Advanced Topics"
    assert get_product_icon("SDK") == "gear"
    assert get_product_icon("unknown") == "book"


def test_build_version_navigation():
    files = [_file("intro"), _file("learn/guide"), _file("02-advanced-topics/page")]
    entry = build_version_navigation("sdk", "next", files)

    assert entry["version"] == "next"
    groups = entry["tabs"][0]["groups"]
    assert [g["group"] for g in groups] == ["SDK", "Advanced Topics", "Learn"]
    assert groups[0]["pages"] == ["sdk/next/intro"]
    assert groups[1]["pages"] == ["sdk/next/advanced-topics/page"]


def test_product_dropdown_sorts_versions():
    data = {"next": [_file("intro")], "v0.47": [_file("intro")], "v0.50": [_file("intro")]}
    dropdown = build_product_dropdown(data, "sdk")
    assert dropdown["dropdown"] == "SDK"
    assert dropdown["icon"] == "gear"
    assert [v["version"] for v in dropdown["versions"]] == ["v0.50", "v0.47", "next"]


def test_update_docs_json(tmp_path):
    docs_json = {"navigation": {"dropdowns": [
        {"dropdown": "Sdk", "versions": []},
        {"dropdown": "EVM", "versions": [_version_entry("evm", "next")]},
    ]}}
    (tmp_path / "docs.json").write_text(json.dumps(docs_json), encoding="utf-8")

    update_docs_json(str(tmp_path), {"next": [_file("intro")], "v0.50": [_file("intro")]}, "sdk")

    saved = json.loads((tmp_path / "docs.json").read_text(encoding="utf-8"))
    sdk, evm = saved["navigation"]["dropdowns"]
    assert [v["version"] for v in sdk["versions"]] == ["v0.50", "next"]
    assert evm["versions"] == [_version_entry("evm", "next")]

    registry = json.loads((tmp_path / "versions.json").read_text(encoding="utf-8"))
    assert registry["products"]["sdk"]["versions"] == ["v0.50", "next"]
    assert registry["products"]["sdk"]["defaultVersion"] == "v0.50"


def test_update_docs_json_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        update_docs_json(str(tmp_path), {"next": []}, "sdk")


def test_update_docs_json_invalid_file(tmp_path):
    (tmp_path / "docs.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        update_docs_json(str(tmp_path), {"next": []}, "sdk")


def test_navigation_snippet(tmp_path):
    path = write_navigation_snippet({"next": [_file("intro")]}, "ibc", str(tmp_path / "staging"))
    with open(path, "r", encoding="utf-8") as f:
        snippet = json.load(f)
    assert snippet["dropdown"] == "IBC"
    assert snippet["versions"][0]["version"] == "next"


def test_replace_path_prefix():
    node = {"pages": ["a/b/c", "x", {"group": "G", "pages": ["a/b/d"]}]}
    assert replace_path_prefix(node, "a/b/", "a/z/") == {"pages": ["a/z/c", "x", {"group": "G", "pages": ["a/z/d"]}]}


def test_freeze_navigation_copies_next():
    docs_json = {"navigation": {"dropdowns": [
        {"dropdown": "EVM", "versions": [_version_entry("evm", "v0.4.x"), _version_entry("evm", "next")]},
    ]}}
    dropdown = freeze_navigation(docs_json, "evm", "v0.5.0")

    assert [v["version"] for v in dropdown["versions"]] == ["v0.5.0", "v0.4.x", "next"]
    assert dropdown["versions"][0]["tabs"][0]["groups"][0]["pages"] == ["evm/v0.5.0/intro"]
    assert dropdown["versions"][2]["tabs"][0]["groups"][0]["pages"] == ["evm/next/intro"]


def test_freeze_navigation_without_next():
    docs_json = {"navigation": {"dropdowns": [
        {"dropdown": "EVM", "versions": [_version_entry("evm", "v0.4.x")]},
    ]}}
    dropdown = freeze_navigation(docs_json, "evm", "v0.5.0")

    assert [v["version"] for v in dropdown["versions"]] == ["v0.5.0", "v0.4.x", "next"]
    assert dropdown["versions"][0]["tabs"][0]["groups"][0]["pages"] == ["evm/v0.5.0/intro"]
    assert dropdown["versions"][2]["tabs"][0]["groups"][0]["pages"] == ["evm/next/intro"]


def test_freeze_navigation_twice_keeps_one_entry():
    docs_json = {"navigation": {"dropdowns": [
        {"dropdown": "EVM", "versions": [_version_entry("evm", "next")]},
    ]}}
    freeze_navigation(docs_json, "evm", "v0.5.0")
    dropdown = freeze_navigation(docs_json, "evm", "v0.5.0")
    assert [v["version"] for v in dropdown["versions"]] == ["v0.5.0", "next"]


def test_freeze_navigation_without_versions():
    with pytest.raises(ValueError):
        freeze_navigation({"navigation": {}}, "evm", "v0.5.0")
