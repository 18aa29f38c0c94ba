"""
Mintlify navigation in docs.json: product dropdowns, their versions and groups.
"""

import os
import re
import copy
import json
import logging
from typing import Any, Dict, List, Optional

from mintport.core.settings import DEFAULT_PRODUCT_ICON, PRODUCT_ICONS
from mintport.navigation.sidebar import resolve_sidebar_position_conflicts
from mintport.schemas.migration import ConvertedFile
from mintport.versioning.versions import NEXT, sort_versions, update_registry_for_migration

logger = logging.getLogger(__name__)

DOCS_JSON_FILE = "docs.json"
SNIPPET_FILE = "navigation-snippet.json"
DOCUMENTATION_TAB = "Documentation"

VersionData = Dict[str, List[ConvertedFile]]


def get_product_icon(product: str) -> str:
    return PRODUCT_ICONS.get(product.lower(), DEFAULT_PRODUCT_ICON)


def group_name(directory: str) -> str:
    """02-advanced-topics -> Advanced Topics"""
    name = re.sub(r"^\d+-", "", directory).replace("-", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name)


def _clean_page_path(path: str) -> str:
    path = re.sub(r"/\d+-", "/", path)
    path = re.sub(r"^\d+-", "", path)
    return re.sub(r"\.mdx?$", "", path)


def build_version_navigation(product: str, version: str, files: List[ConvertedFile]) -> Dict[str, Any]:
    """One version entry: a Documentation tab whose first group holds root pages."""
    label = product.upper()
    root_pages: List[str] = []
    grouped: Dict[str, List[str]] = {}

    for file in resolve_sidebar_position_conflicts(files):
        relative = _clean_page_path(file.path)
        page = f"{product}/{version}/{relative}"
        parts = relative.split("/")
        if len(parts) == 1:
            root_pages.append(page)
        else:
            grouped.setdefault(group_name(parts[0]), []).append(page)

    groups = [{"group": label, "pages": root_pages}]
    groups.extend({"group": name, "pages": pages} for name, pages in grouped.items())
    return {"version": version, "tabs": [{"tab": DOCUMENTATION_TAB, "groups": groups}]}


def build_product_dropdown(all_version_data: VersionData, product: str) -> Dict[str, Any]:
    """
    Build a product dropdown with one entry per version, newest first and
    "next" last.
    """
    return {
        "dropdown": product.upper(),
        "icon": get_product_icon(product),
        "versions": [
            build_version_navigation(product, version, all_version_data[version])
            for version in sort_versions(list(all_version_data))
        ],
    }


def load_docs_json(docs_root: str) -> Dict[str, Any]:
    with open(os.path.join(docs_root, DOCS_JSON_FILE), "r", encoding="utf-8") as f:
        return json.load(f)


def save_docs_json(docs_root: str, docs_json: Dict[str, Any]):
    with open(os.path.join(docs_root, DOCS_JSON_FILE), "w", encoding="utf-8") as f:
        json.dump(docs_json, f, indent=2, ensure_ascii=False)
        f.write("\n")


def find_dropdown(docs_json: Dict[str, Any], product: str, create: bool = True) -> Optional[Dict[str, Any]]:
    """Find a product's dropdown by label, case-insensitively; optionally create it."""
    navigation = docs_json.setdefault("navigation", {})
    dropdowns = navigation.get("dropdowns")
    if not isinstance(dropdowns, list):
        dropdowns = navigation["dropdowns"] = []

    for dropdown in dropdowns:
        if str(dropdown.get("dropdown", "")).lower() == product.lower():
            if not isinstance(dropdown.get("versions"), list):
                dropdown["versions"] = []
            return dropdown

    if not create:
        return None
    dropdown = {"dropdown": product.upper(), "icon": get_product_icon(product), "versions": []}
    dropdowns.append(dropdown)
    return dropdown


def update_docs_json(docs_root: str, all_version_data: VersionData, product: str) -> Dict[str, Any]:
    """
    Replace a product's versions in docs.json and record them in versions.json.

    Args:
        docs_root: Directory holding docs.json and versions.json
        all_version_data: Version -> converted files
        product: Product folder name

    Returns:
        The updated dropdown

    Raises:
        FileNotFoundError: When docs.json does not exist
        ValueError: When docs.json is not valid JSON
    """
    docs_json = load_docs_json(docs_root)
    dropdown = find_dropdown(docs_json, product)
    dropdown["versions"] = build_product_dropdown(all_version_data, product)["versions"]
    save_docs_json(docs_root, docs_json)

    update_registry_for_migration(docs_root, product, list(all_version_data))
    logger.info("Updated docs.json and versions.json")
    return dropdown


def write_navigation_snippet(all_version_data: VersionData, product: str, staging_dir: str) -> str:
    """Write the dropdown to <staging_dir>/navigation-snippet.json instead of docs.json."""
    os.makedirs(staging_dir, exist_ok=True)
    snippet_path = os.path.join(staging_dir, SNIPPET_FILE)
    with open(snippet_path, "w", encoding="utf-8") as f:
        json.dump(build_product_dropdown(all_version_data, product), f, indent=2, ensure_ascii=False)
    logger.info(f"Navigation snippet written to: {snippet_path}")
    return snippet_path


def replace_path_prefix(node: Any, from_prefix: str, to_prefix: str) -> Any:
    """Copy a navigation tree, rewriting every string that starts with from_prefix."""
    if isinstance(node, str):
        return to_prefix + node[len(from_prefix):] if node.startswith(from_prefix) else node
    if isinstance(node, list):
        return [replace_path_prefix(item, from_prefix, to_prefix) for item in node]
    if isinstance(node, dict):
        return {key: replace_path_prefix(value, from_prefix, to_prefix) for key, value in node.items()}
    return node


def freeze_navigation(docs_json: Dict[str, Any], product: str, version: str) -> Dict[str, Any]:
    """
    Add a frozen version to a product dropdown, in place.

    The new entry is a copy of "next" (or of the first listed version, from
    which a "next" entry is also synthesised) with page paths moved to the
    frozen folder. It goes first; "next" stays last.

    Raises:
        ValueError: When the dropdown has no versions to copy
    """
    label = product.upper()
    dropdown = find_dropdown(docs_json, product)
    versions = dropdown["versions"]

    template = next((v for v in versions if v.get("version") == NEXT), None)
    next_entry = template
    if template is None:
        if not versions:
            raise ValueError(
                f"No versions found in navigation for dropdown {label}. "
                f"Add at least one version entry to docs.json before freezing, e.g. "
                f'{{"dropdown": "{label}", "versions": [{{"version": "next", "tabs": []}}]}}'
            )
        template = versions[0]
        logger.warning(
            f"No 'next' version found. Using '{template['version']}' as template "
            f"for creating frozen version '{version}'."
        )
        next_entry = replace_path_prefix(template, f"{product}/{template['version']}/", f"{product}/{NEXT}/")
        next_entry["version"] = NEXT

    frozen = replace_path_prefix(copy.deepcopy(template), f"{product}/{template['version']}/", f"{product}/{version}/")
    frozen["version"] = version

    others = [v for v in versions if v.get("version") not in (version, NEXT)]
    existing_next = next((v for v in versions if v.get("version") == NEXT), None)
    dropdown["versions"] = [frozen] + others + [existing_next or next_entry]
    logger.info(f"Navigation updated for version {version}")
    return dropdown
