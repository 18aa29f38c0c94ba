# src/mintport/core/settings.py
"""
Static tables shared by the migration and maintenance tools.
"""

from typing import Dict, List

# Docusaurus admonition type -> Mintlify callout component
ADMONITION_MAP: Dict[str, str] = {
    "note": "Note",
    "tip": "Tip",
    "info": "Info",
    "warning": "Warning",
    "danger": "Warning",
    "caution": "Warning",
    "important": "Info",
    "success": "Check",
    "details": "Accordion",
}
DEFAULT_ADMONITION = "Note"

# Mintlify components whose open/close balance is tracked
CALLOUT_COMPONENTS: List[str] = ["Info", "Warning", "Note", "Tip", "Check"]
BALANCED_COMPONENTS: List[str] = CALLOUT_COMPONENTS + ["Accordion", "Expandable"]

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")
DOC_EXTENSIONS = (".md", ".mdx")

# Code blocks longer than this many lines become expandable
EXPANDABLE_LINE_THRESHOLD = 10

# HTML comments longer than this many lines are dropped instead of converted
MAX_COMMENT_LINES = 10

DEFAULT_SIDEBAR_POSITION = 999

# Frontmatter keys Mintlify understands
FRONTMATTER_KEYS = ("title", "description", "icon")
MAX_FRONTMATTER_VALUE_LENGTH = 250

# Command placeholders written as tags in Cosmos docs, e.g. <appd>
COMMAND_PLACEHOLDERS = ("appd", "simd", "gaiad", "osmosisd", "junod", "yourapp")

# Generic placeholders written as tags, e.g. <host>
COMMON_PLACEHOLDERS = (
    "host", "port", "path", "user", "pass", "module",
    "version", "namespace", "service",
)

PRODUCT_ICONS: Dict[str, str] = {
    "sdk": "gear",
    "ibc": "link",
    "cometbft": "star",
    "evm": "code",
    "wasmd": "cube",
    "hermes": "rocket",
}
DEFAULT_PRODUCT_ICON = "book"

# Source repositories for products not listed in versions.json
DEFAULT_PRODUCT_REPOS: Dict[str, str] = {
    "evm": "cosmos/evm",
    "sdk": "cosmos/cosmos-sdk",
    "ibc": "cosmos/ibc-go",
    "hub": "cosmos/gaia",
}

DEFAULT_CHANGELOG_PATH = "CHANGELOG.md"
CHANGELOG_FALLBACK_PATHS: List[str] = [
    "CHANGELOG.md",
    "RELEASE_NOTES.md",
    "RELEASES.md",
    "CHANGELOG/CHANGELOG.md",
    "docs/CHANGELOG.md",
]

# Root directories never treated as products
NON_PRODUCT_DIRS = ("node_modules", "scripts", "snippets", "assets")

# Security repository pages
SECURITY_PAGES = {
    "POLICY.md": ("security-policy.mdx", "Security Policy"),
    "SECURITY.md": ("bug-bounty.mdx", "Bug Bounty Program"),
}
SECURITY_COMPONENT_NAMES: Dict[str, str] = {
    "sdk": "Cosmos SDK",
    "evm": "Cosmos EVM",
    "gaia": "Cosmos Hub (Gaia)",
    "ics": "Interchain Security (ICS)",
    "ledger": "Ledger",
}
AUDIT_EXTENSIONS = (".pdf", ".md", ".markdown")
