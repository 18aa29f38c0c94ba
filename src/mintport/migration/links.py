"""
Link and image path rewriting for the product/version layout.

Docusaurus links are relative to the source file and point at numbered
files (01-learn/02-intro.md). Mintlify pages live at /<product>/<version>/<path>
without numbering or extensions.
"""

import os
import re
import logging
import posixpath
from typing import Dict, Tuple

from mintport.migration.safe_content import safe_process_content

logger = logging.getLogger(__name__)

# [text](url "title"), not preceded by ! (images), one level of nested brackets in text
MARKDOWN_LINK_RE = re.compile(
    r'(?<!!)\[((?:[^\[\]]|\[[^\]]*\])*)\]\(([^)\s]+)((?:\s+"[^"]*")?)\)'
)
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
VERSION_SEGMENT_RE = re.compile(r"^(next|v\d[\w.]*)$")
IMAGE_EXT = r"(?:png|jpg|jpeg|gif|svg|webp)"


def strip_numbered_prefixes(path: str) -> str:
    """01-learn/02-advanced/03-intro.md -> learn/advanced/intro.md"""
    path = re.sub(r"/(\d+-)", "/", path)
    return re.sub(r"^(\d+-)", "", path)


def _is_external(url: str) -> bool:
    return bool(SCHEME_RE.match(url)) or url.startswith("//")


def fix_link_url(url: str, version: str, product: str, source_path: str = "",
                 resolve_relative: bool = True) -> str:
    """
    Rewrite one link target to its Mintlify location.

    Args:
        url: Link target as written in the source
        version: Version folder the page is written to
        product: Product folder name
        source_path: Source file path relative to the docs root
        resolve_relative: When False, relative targets are left for a later
                          pass that knows the source path

    Returns:
        The rewritten target; external links and anchors are returned unchanged
    """
    if not url or url.startswith("#") or _is_external(url):
        return url
    if not resolve_relative and not url.startswith("/"):
        return url

    source_dir = posixpath.dirname(source_path.replace("\\", "/"))
    if url.startswith("/"):
        resolved = url
    else:
        resolved = posixpath.normpath(posixpath.join(source_dir, url))
        if resolved == ".":
            resolved = ""
        # Links climbing above the docs root stay at the root
        while resolved.startswith("../"):
            resolved = resolved[3:]
        resolved = "/" + resolved.lstrip("/")
        # normpath drops trailing slashes
        if url.endswith("/") and not resolved.endswith("/"):
            resolved += "/"

    resolved = resolved.replace("\\", "/")
    resolved = strip_numbered_prefixes(resolved)
    resolved = re.sub(r"\.mdx?(?=#|$)", "", resolved)

    product_prefix = f"/{product}/"
    if not resolved.startswith(product_prefix):
        return f"/{product}/{version}{resolved}"

    rest = resolved[len(product_prefix):]
    segment = re.split(r"[/#]", rest, maxsplit=1)[0]
    if segment == version or VERSION_SEGMENT_RE.match(segment):
        return resolved
    return f"{product_prefix}{version}/{rest}"


def fix_markdown_links(content: str, version: str, product: str, source_path: str = "",
                       resolve_relative: bool = True) -> str:
    """
    Rewrite every internal markdown link outside code.

    Running it again on its own output changes nothing.
    """
    def _fix(match):
        text, url, title = match.group(1), match.group(2), match.group(3)
        fixed = fix_link_url(url, version, product, source_path, resolve_relative)
        return f"[{text}]({fixed}{title})"

    return safe_process_content(content, lambda text: MARKDOWN_LINK_RE.sub(_fix, text))


def fix_internal_links(content: str) -> str:
    """Drop Docusaurus heading anchors: "Direct link" links and {#id} suffixes."""
    def _clean(text: str) -> str:
        text = re.sub(r'\[\u200b?\]\(#[^)]+\s+"Direct link to[^"]+"\)', "", text)
        return re.sub(r"^(#+\s+.+?)\s*\{#[^}]+\}\s*$", r"\1", text, flags=re.MULTILINE)

    return safe_process_content(content, _clean)


def _image_target(image_path: str, clean_source_dir: str) -> str:
    joined = posixpath.normpath(posixpath.join(clean_source_dir, image_path))
    joined = strip_numbered_prefixes(joined)
    while joined.startswith("../"):
        joined = joined[3:]
    return joined


def update_image_paths(content: str, source_relative_path: str) -> str:
    """
    Point image references at the shared images folder beside the version folders.

    A page at <product>/<version>/a/b.mdx reaches images through ../../images/.
    Docusaurus /img/ and /static/ references go to images/static/.
    """
    depth = source_relative_path.replace("\\", "/").count("/")
    path_to_images = "../" * depth + "../images/"
    clean_source_dir = strip_numbered_prefixes(posixpath.dirname(source_relative_path.replace("\\", "/")))

    def _relative(match):
        return f"{match.group(1)}{path_to_images}{_image_target(match.group(2), clean_source_dir)}"

    def _static(match):
        image_path = match.group(2).lstrip("/")
        image_path = re.sub(r"^static/", "", image_path)
        return f"{match.group(1)}{path_to_images}static/{image_path}"

    result = re.sub(
        rf"(!\[[^\]]*\]\()((?:\.\.?/)[^)\s]+\.{IMAGE_EXT})", _relative, content, flags=re.IGNORECASE
    )
    result = re.sub(
        rf'(<img[^>]+src=")((?:\.\.?/)[^"]+\.{IMAGE_EXT})', _relative, result, flags=re.IGNORECASE
    )
    result = re.sub(
        rf"(!\[[^\]]*\]\()(/(?:img|static)/[^)\s]+\.{IMAGE_EXT})", _static, result, flags=re.IGNORECASE
    )
    result = re.sub(
        rf'(<img[^>]+src=")(/(?:img|static)/[^"]+\.{IMAGE_EXT})', _static, result, flags=re.IGNORECASE
    )
    return result


def apply_path_mappings(url: str, mappings: Dict[str, str]) -> Tuple[str, int]:
    """Replace old numbered paths inside url. Returns (url, replacements made)."""
    if url.startswith("#") or _is_external(url):
        return url, 0
    count = 0
    for old_path, new_path in mappings.items():
        if old_path == new_path:
            continue
        pattern = re.compile(rf"(^|/){re.escape(old_path)}(/|#|$)")
        url, replaced = pattern.subn(rf"\g<1>{new_path}\g<2>", url)
        count += replaced
    return url, count


def fix_numbered_prefix_links(target_base: str, mappings: Dict[str, str]) -> Tuple[int, int]:
    """
    Rewrite leftover numbered paths in every written .mdx file.

    Args:
        target_base: Directory holding the version folders
        mappings: Old path (with numbering, no extension) -> clean path

    Returns:
        (files modified, link replacements made)
    """
    files_modified = 0
    total_replacements = 0

    for root, _, filenames in os.walk(target_base):
        for filename in filenames:
            if not filename.endswith(".mdx"):
                continue
            full_path = os.path.join(root, filename)
            with open(full_path, "r", encoding="utf-8") as f:
                content = f.read()
            original = content
            replacements = 0

            frontmatter = re.match(r"^---\n[\s\S]*?\n---\n", content)
            if frontmatter and not content[frontmatter.end():].startswith("\n"):
                content = frontmatter.group(0) + "\n" + content[frontmatter.end():]

            def _markdown(match):
                nonlocal replacements
                url, count = apply_path_mappings(match.group(2), mappings)
                replacements += count
                return f"[{match.group(1)}]({url}{match.group(3)})"

            def _anchor(match):
                nonlocal replacements
                url, count = apply_path_mappings(match.group(2), mappings)
                replacements += count
                return f'<a {match.group(1) or ""}href="{url}"{match.group(3)}>'

            content = MARKDOWN_LINK_RE.sub(_markdown, content)
            content = re.sub(r'<a\s+([^>]*\s)?href="([^"]+)"([^>]*)>', _anchor, content)

            if content != original:
                with open(full_path, "w", encoding="utf-8") as f:
                    f.write(content)
                files_modified += 1
                total_replacements += replacements

    logger.info(f"Fixed {total_replacements} numbered-prefix links in {files_modified} files")
    return files_modified, total_replacements
