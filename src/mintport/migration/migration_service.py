"""
Migration Service for mintport

Converts whole Docusaurus documentation trees (every version) into the
<product>/<version>/ layout used by the Mintlify site.
"""
import os
import re
import shutil
import logging
from typing import Callable, Dict, List, Optional
from tqdm import tqdm

from mintport.core.settings import DOC_EXTENSIONS, IMAGE_EXTENSIONS
from mintport.migration.cache import MigrationCache, content_checksum
from mintport.migration.converter import apply_source_path, convert_docusaurus_to_mintlify
from mintport.migration.links import fix_numbered_prefix_links, strip_numbered_prefixes, update_image_paths
from mintport.migration.report import MigrationReport
from mintport.schemas.migration import ConversionResult, ConvertedFile, DirectoryResult

logger = logging.getLogger(__name__)

# Stands in for the version while converting, so one cached conversion
# serves every version folder holding the same page
VERSION_TOKEN = "\ue020"

VERSIONED_DOCS_DIR = "versioned_docs"
CURRENT_DOCS_DIR = "docs"
STATIC_DIR = "static"


def _is_image(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)


def copy_static_assets(static_path: str, images_dir: str) -> int:
    """
    Copy every image under a Docusaurus static/ folder to <images_dir>/static/.

    Returns:
        Number of images copied
    """
    copied = 0
    for root, _, files in os.walk(static_path):
        for name in sorted(files):
            if not _is_image(name):
                continue
            relative = os.path.relpath(os.path.join(root, name), static_path)
            target = os.path.join(images_dir, "static", relative)
            os.makedirs(os.path.dirname(target), exist_ok=True)
            shutil.copyfile(os.path.join(root, name), target)
            logger.debug(f"Copied: static/{relative}")
            copied += 1
    logger.info(f"Copied {copied} static images to {images_dir}")
    return copied


def version_folder_name(docusaurus_version: str) -> str:
    """version-0.50 folder suffix -> v0.50"""
    return docusaurus_version if docusaurus_version.startswith("v") else f"v{docusaurus_version}"


class MigrationService:
    """
    Service to migrate Docusaurus docs into the Mintlify product/version layout.
    """

    def __init__(self, product: str = "generic", report: Optional[MigrationReport] = None,
                 cache: Optional[MigrationCache] = None,
                 fetcher: Optional[Callable[[str], str]] = None,
                 format_code: bool = False, dry_run: bool = False):
        """
        Initialize the migration service.

        Args:
            product: Product folder name used for links and navigation
            report: Collects issues across the whole run
            cache: Conversion cache shared across versions
            fetcher: Resolves GitHub reference code blocks; None keeps comments
            format_code: Run the code formatters over fenced blocks
            dry_run: Convert and report without writing anything
        """
        self.product = product
        self.report = report if report is not None else MigrationReport()
        self.cache = cache if cache is not None else MigrationCache()
        self.fetcher = fetcher
        self.format_code = format_code
        self.dry_run = dry_run

    def _find_files(self, source_dir: str):
        docs, images = [], []
        for root, dirs, files in os.walk(source_dir):
            dirs.sort()
            for name in sorted(files):
                relative = os.path.relpath(os.path.join(root, name), source_dir).replace(os.sep, "/")
                if name.endswith(DOC_EXTENSIONS):
                    docs.append(relative)
                elif _is_image(name):
                    images.append(relative)
        return docs, images

    def _copy_images(self, source_dir: str, images: List[str], images_dir: str) -> int:
        if self.dry_run:
            logger.info(f"[DRY RUN] Would copy {len(images)} images")
            return 0
        for relative in images:
            target = os.path.join(images_dir, strip_numbered_prefixes(relative))
            os.makedirs(os.path.dirname(target), exist_ok=True)
            shutil.copyfile(os.path.join(source_dir, relative), target)
        logger.info(f"Copied {len(images)} images to {images_dir}")
        return len(images)

    def _convert_cached(self, content: str, relative: str, version: str):
        """
        Convert through the cache.

        The conversion depends on the content only: the version and the
        source path are filled in per file by _convert, so identical pages
        anywhere in any version are converted once.

        Returns:
            (result, served from cache)
        """
        checksum = content_checksum(content)
        self.cache.track_file(f"{version}/{relative}", checksum)

        cached = self.cache.get_cached_result(checksum)
        if cached is not None:
            self.report.replay(self.cache.get_validation_errors(checksum), relative)
            return cached, True

        self.report.set_current_file(relative)
        mark = self.report.mark()
        result = convert_docusaurus_to_mintlify(
            content,
            version=VERSION_TOKEN,
            product=self.product,
            filepath=relative,
            report=self.report,
            fetcher=self.fetcher,
            format_code=self.format_code,
            defer_source_path=True,
        )
        self.cache.set_cached_result(checksum, result)
        self.cache.set_validation_errors(checksum, self.report.issues_since(mark))
        return result, False

    def _convert(self, content: str, relative: str, version: str):
        result, from_cache = self._convert_cached(content, relative, version)
        text = result.content.replace(VERSION_TOKEN, version)
        versioned = ConversionResult(content=text, metadata=result.metadata)
        return apply_source_path(versioned, relative, version, self.product), from_cache

    def process_directory(self, source_dir: str, target_dir: str, version: str) -> DirectoryResult:
        """
        Convert one Docusaurus docs folder into one version folder.

        Args:
            source_dir: docs/ or versioned_docs/version-X
            target_dir: <product>/<version> output folder
            version: Version folder name written into links

        Returns:
            DirectoryResult with converted files, filename mappings and counts
        """
        docs, images = self._find_files(source_dir)
        logger.info(f"Found {len(docs)} files to convert and {len(images)} images in {source_dir}")
        if self.dry_run:
            logger.info("DRY RUN MODE - No files will be written")

        result = DirectoryResult(version=version, total_files=len(docs))
        if images:
            images_dir = os.path.join(os.path.dirname(os.path.normpath(target_dir)), "images")
            result.images_copied = self._copy_images(source_dir, images, images_dir)

        for relative in tqdm(docs, desc=f"Converting {version}"):
            with open(os.path.join(source_dir, relative), "r", encoding="utf-8") as f:
                content = f.read()

            converted, from_cache = self._convert(content, relative, version)
            if from_cache:
                result.cache_hits += 1
            else:
                result.unique_processed += 1

            clean_relative = strip_numbered_prefixes(relative)
            original_stem = re.sub(r"\.mdx?$", "", relative)
            clean_stem = re.sub(r"\.mdx?$", "", clean_relative)
            result.filename_mappings[original_stem] = clean_stem
            if os.path.basename(original_stem) != os.path.basename(clean_stem):
                result.filename_mappings[os.path.basename(original_stem)] = os.path.basename(clean_stem)

            text = update_image_paths(converted.content, relative)
            if not self.dry_run:
                target_path = os.path.join(target_dir, clean_stem + ".mdx")
                os.makedirs(os.path.dirname(target_path), exist_ok=True)
                with open(target_path, "w", encoding="utf-8") as f:
                    f.write(text)

            result.files.append(ConvertedFile(
                path=clean_stem,
                title=converted.metadata.title,
                sidebar_position=converted.metadata.sidebar_position,
                from_cache=from_cache,
            ))

        logger.info(
            f"Conversion stats for {version}: {result.total_files} files, "
            f"{result.unique_processed} unique, {result.cache_hits} cache hits"
        )
        return result

    def migrate_all_versions(self, repository: str, target: str) -> Dict[str, DirectoryResult]:
        """
        Migrate docs/ and every versioned_docs/version-X of a Docusaurus repository.

        versioned_docs/version-0.50 becomes <target>/v0.50 and docs/ becomes
        <target>/next. Static images go to <target>/images/static, where
        rewritten /img/ references point.

        Args:
            repository: Docusaurus repository root
            target: Product output folder

        Returns:
            Version folder -> DirectoryResult

        Raises:
            ValueError: When target is empty
            FileNotFoundError: When the repository has neither docs/ nor versioned_docs/
        """
        if not target:
            raise ValueError("Target directory is required")
        repository = os.path.expanduser(repository)
        target = os.path.expanduser(target)

        versioned_base = os.path.join(repository, VERSIONED_DOCS_DIR)
        current_docs = os.path.join(repository, CURRENT_DOCS_DIR)
        static_path = os.path.join(repository, STATIC_DIR)
        if not os.path.isdir(versioned_base) and not os.path.isdir(current_docs):
            raise FileNotFoundError(f"No docs/ or versioned_docs/ found in {repository}")

        self.report.reset()
        self.cache.clear()

        if os.path.isdir(static_path) and not self.dry_run:
            copy_static_assets(static_path, os.path.join(target, "images"))

        results: Dict[str, DirectoryResult] = {}
        if os.path.isdir(versioned_base):
            folders = sorted(d for d in os.listdir(versioned_base) if d.startswith("version-"))
            logger.info(f"Found versions: {', '.join(folders)}")
            for folder in folders:
                version = version_folder_name(folder[len("version-"):])
                results[version] = self.process_directory(
                    os.path.join(versioned_base, folder), os.path.join(target, version), version
                )

        if os.path.isdir(current_docs):
            results["next"] = self.process_directory(current_docs, os.path.join(target, "next"), "next")

        mappings: Dict[str, str] = {}
        for result in results.values():
            mappings.update(result.filename_mappings)
        if mappings and not self.dry_run:
            fix_numbered_prefix_links(target, mappings)

        stats = self.cache.stats()
        logger.info(
            f"Cache: {stats['unique_content']} unique of {stats['total_files']} files "
            f"({self.cache.duplicate_percentage()}% duplicates)"
        )
        return results

    def migrate_single_version(self, source_dir: str, target: str, version: str) -> DirectoryResult:
        """Migrate one docs folder into <target>/<version>."""
        source_dir = os.path.expanduser(source_dir)
        if not os.path.isdir(source_dir):
            raise FileNotFoundError(f"Source directory does not exist: {source_dir}")
        self.report.reset()
        self.cache.clear()
        result = self.process_directory(source_dir, os.path.join(os.path.expanduser(target), version), version)
        if result.filename_mappings and not self.dry_run:
            fix_numbered_prefix_links(os.path.join(target, version), result.filename_mappings)
        return result

    def convert_file(self, input_path: str, output_path: str, version: str = "next") -> ConversionResult:
        """
        Convert a single file, outside any directory run.

        The title stays in the body when it comes from frontmatter.
        """
        with open(input_path, "r", encoding="utf-8") as f:
            content = f.read()
        self.report.set_current_file(input_path)
        result = convert_docusaurus_to_mintlify(
            content,
            version=version,
            product=self.product,
            filepath=os.path.basename(input_path),
            keep_title=True,
            report=self.report,
            fetcher=self.fetcher,
            format_code=self.format_code,
        )
        if not self.dry_run:
            parent = os.path.dirname(output_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(result.content)
            logger.info(f"Converted {input_path} -> {output_path}")
        return result
