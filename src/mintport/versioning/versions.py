"""
Version strings and the versions.json registry.

Version folders are named vMAJOR.MINOR, vMAJOR.MINOR.PATCH or vMAJOR.MINOR.x
(a whole release line), plus "next" for the development docs.
"""

import os
import re
import json
import logging
from functools import cmp_to_key
from typing import List, Optional, Tuple

from mintport.core.settings import DEFAULT_CHANGELOG_PATH, NON_PRODUCT_DIRS
from mintport.schemas.registry import ProductConfig, VersionsRegistry

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"^v(\d+)\.(\d+)(?:\.(\d+|x))?$")
VERSIONS_FILE = "versions.json"
NEXT = "next"


def validate_version_format(version: Optional[str]) -> bool:
    return bool(version) and bool(VERSION_RE.match(version))


def parse_version_tuple(version: str) -> Optional[Tuple[int, int, float, bool]]:
    """
    Parse a version folder name.

    Returns:
        (major, minor, patch, is_x) where an "x" patch sorts above every
        number, or None when the name is not a version
    """
    match = VERSION_RE.match(version or "")
    if not match:
        return None
    patch_text = match.group(3)
    if patch_text is None:
        patch = 0
    elif patch_text == "x":
        patch = float("inf")
    else:
        patch = int(patch_text)
    return int(match.group(1)), int(match.group(2)), patch, patch_text == "x"


def compare_versions_desc(a: str, b: str) -> int:
    """Comparator putting newer versions first; v1.2.3 comes before v1.2.x."""
    at = parse_version_tuple(a) or (0, 0, -1, False)
    bt = parse_version_tuple(b) or (0, 0, -1, False)
    for i in range(3):
        if at[i] != bt[i]:
            return -1 if at[i] > bt[i] else 1
    if at[3] != bt[3]:
        return 1 if at[3] else -1
    return 0


def _lenient_parts(version: str) -> List[int]:
    parts = []
    for part in version.lstrip("vV").split("."):
        digits = re.match(r"\d+", part)
        parts.append(int(digits.group(0)) if digits else 0)
    return parts


def sort_versions(versions: List[str]) -> List[str]:
    """
    Newest first with "next" last. Accepts loose names such as v0.50 or v2.
    """
    def _compare(a: str, b: str) -> int:
        if a == NEXT:
            return 1
        if b == NEXT:
            return -1
        a_parts, b_parts = _lenient_parts(a), _lenient_parts(b)
        length = max(len(a_parts), len(b_parts))
        a_parts += [0] * (length - len(a_parts))
        b_parts += [0] * (length - len(b_parts))
        if a_parts == b_parts:
            return 0
        return -1 if a_parts > b_parts else 1

    return sorted(versions, key=cmp_to_key(_compare))


def list_product_dirs(docs_root: str) -> List[str]:
    """Root directories that hold a next/ or vN.../ folder."""
    if not os.path.isdir(docs_root):
        return []
    products = []
    for name in sorted(os.listdir(docs_root)):
        path = os.path.join(docs_root, name)
        if not os.path.isdir(path) or name.startswith(".") or name in NON_PRODUCT_DIRS:
            continue
        children = [c for c in os.listdir(path) if os.path.isdir(os.path.join(path, c))]
        if any(c == NEXT or re.match(r"^v\d+", c) for c in children):
            products.append(name)
    return products


def _discover_versions(product_dir: str) -> List[str]:
    entries = sorted(e for e in os.listdir(product_dir) if os.path.isdir(os.path.join(product_dir, e)))
    found = [NEXT] if NEXT in entries else []
    found.extend(e for e in entries if VERSION_RE.match(e))
    return found


def _order_with_next_first(versions: List[str]) -> List[str]:
    unique = list(dict.fromkeys(versions))
    others = sorted((v for v in unique if v != NEXT), key=cmp_to_key(compare_versions_desc))
    return ([NEXT] if NEXT in unique else []) + others


def load_versions_registry(docs_root: str, discover: bool = True) -> VersionsRegistry:
    """
    Read versions.json and merge in products found on disk.

    Args:
        docs_root: Repository root
        discover: Add versions and products found as folders

    Returns:
        The merged registry; an empty one when the file is missing or invalid
    """
    path = os.path.join(docs_root, VERSIONS_FILE)
    registry = VersionsRegistry()
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                registry = VersionsRegistry.model_validate(json.load(f))
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable {path}: {e}")
            registry = VersionsRegistry()

    if not discover:
        return registry

    for product in list_product_dirs(docs_root):
        discovered = _discover_versions(os.path.join(docs_root, product))
        config = registry.products.get(product)
        if config is None:
            registry.products[product] = ProductConfig(
                versions=_order_with_next_first(discovered),
                default_version=NEXT if NEXT in discovered else (discovered[0] if discovered else NEXT),
                repository=f"cosmos/{product}",
                changelog_path=DEFAULT_CHANGELOG_PATH,
            )
            continue
        config.versions = _order_with_next_first(discovered + config.versions)
        if not config.default_version:
            others = [v for v in config.versions if v != NEXT]
            config.default_version = NEXT if NEXT in config.versions else (others[0] if others else NEXT)
        if not config.repository:
            config.repository = f"cosmos/{product}"
        if not config.changelog_path:
            config.changelog_path = DEFAULT_CHANGELOG_PATH

    return registry


def save_versions_registry(docs_root: str, registry: VersionsRegistry):
    path = os.path.join(docs_root, VERSIONS_FILE)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(registry.to_json_dict(), f, indent=2)
        f.write("\n")


def update_registry_for_freeze(docs_root: str, product: str, freeze_version: str,
                               new_version: Optional[str] = None) -> ProductConfig:
    """
    Record a frozen version and the upcoming development version.

    Versions are stored as "next" (and any non-standard names) first, then
    frozen versions newest first.
    """
    registry = load_versions_registry(docs_root)
    config = registry.products.setdefault(product, ProductConfig(versions=[], default_version=NEXT))

    if os.path.isdir(os.path.join(docs_root, product, NEXT)) and NEXT not in config.versions:
        config.versions.append(NEXT)
    if freeze_version and freeze_version not in config.versions:
        config.versions.append(freeze_version)

    stable = sorted(
        (v for v in config.versions if v != NEXT and validate_version_format(v)),
        key=cmp_to_key(compare_versions_desc),
    )
    rest = [v for v in config.versions if v == NEXT or not validate_version_format(v)]
    config.versions = rest + stable

    if new_version and validate_version_format(new_version):
        setattr(config, "nextDev", new_version)

    save_versions_registry(docs_root, registry)
    logger.info(f"Versions registry updated for {product}")
    return config


def update_registry_for_migration(docs_root: str, product: str, versions: List[str]) -> ProductConfig:
    """Replace a product's version list after a migration."""
    registry = load_versions_registry(docs_root, discover=False)
    ordered = sort_versions(versions)
    default = next((v for v in ordered if v != NEXT), NEXT)
    config = registry.products.get(product) or ProductConfig()
    config.versions = ordered
    config.default_version = default
    registry.products[product] = config
    save_versions_registry(docs_root, registry)
    return config
