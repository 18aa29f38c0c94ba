"""
Freezing the "next" docs of a product into a numbered version folder.
"""

import os
import shutil
import logging
from datetime import datetime, timezone
from typing import Optional

from mintport.navigation.docs_json import freeze_navigation, load_docs_json, save_docs_json
from mintport.remote.github_client import FetchError
from mintport.schemas.registry import VersionMetadata
from mintport.versioning.changelog import (
    ChangelogService,
    includes_version_in_release_notes,
    release_notes_path,
)
from mintport.versioning.versions import NEXT, update_registry_for_freeze, validate_version_format

logger = logging.getLogger(__name__)

METADATA_FILE = ".version-metadata.json"
FROZEN_MARKER_FILE = ".version-frozen"


class VersionFreezer:
    """Copies <product>/next to <product>/<version> and updates navigation and registry."""

    def __init__(self, docs_root: str, product: str,
                 changelog_service: Optional[ChangelogService] = None):
        self.docs_root = docs_root
        self.product = product
        self.changelog_service = changelog_service

    @property
    def next_dir(self) -> str:
        return os.path.join(self.docs_root, self.product, NEXT)

    def version_dir(self, version: str) -> str:
        return os.path.join(self.docs_root, self.product, version)

    def check_release_notes(self, version: str) -> bool:
        """True when next/changelog/release-notes.mdx already lists the version."""
        path = release_notes_path(self.docs_root, self.product, NEXT)
        if not os.path.exists(path):
            return False
        with open(path, "r", encoding="utf-8") as f:
            return includes_version_in_release_notes(f.read(), version)

    def copy_docs(self, version: str) -> int:
        """
        Snapshot next into the version folder and point its links at itself.

        Only the copy is rewritten; next stays untouched.

        Returns:
            Number of .mdx files whose links were rewritten

        Raises:
            FileNotFoundError: When the next folder does not exist
        """
        if not os.path.isdir(self.next_dir):
            raise FileNotFoundError(
                f"Source directory does not exist: {self.next_dir}. "
                f"The 'next' directory must exist before freezing a version."
            )
        target = self.version_dir(version)
        if os.path.exists(target):
            shutil.rmtree(target)
        shutil.copytree(self.next_dir, target)

        replacements = (
            (f"/{self.product}/{NEXT}/", f"/{self.product}/{version}/"),
            ('href="/documentation/', f'href="/{self.product}/{version}/documentation/'),
        )
        rewritten = 0
        for root, _, files in os.walk(target):
            for name in files:
                if not name.endswith(".mdx"):
                    continue
                path = os.path.join(root, name)
                with open(path, "r", encoding="utf-8") as f:
                    content = f.read()
                updated = content
                for old, new in replacements:
                    updated = updated.replace(old, new)
                if updated != content:
                    with open(path, "w", encoding="utf-8") as f:
                        f.write(updated)
                    rewritten += 1

        logger.info(f"Documentation copied from '{NEXT}' to '{version}', links updated in {rewritten} file(s)")
        return rewritten

    def write_metadata(self, version: str, new_version: str,
                       now: Optional[datetime] = None) -> VersionMetadata:
        now = now or datetime.now(timezone.utc)
        metadata = VersionMetadata(
            version=version,
            frozen_date=now.strftime("%Y-%m-%d"),
            frozen_timestamp=now.isoformat(),
            next_version=new_version,
        )
        target = self.version_dir(version)
        with open(os.path.join(target, METADATA_FILE), "w", encoding="utf-8") as f:
            f.write(metadata.model_dump_json(by_alias=True, indent=2))
        with open(os.path.join(target, FROZEN_MARKER_FILE), "w", encoding="utf-8") as f:
            f.write(f"{version} - Frozen on {metadata.frozen_date}")
        logger.info("Version metadata created")
        return metadata

    def update_navigation(self, version: str):
        docs_json = load_docs_json(self.docs_root)
        freeze_navigation(docs_json, self.product, version)
        save_docs_json(self.docs_root, docs_json)

    def _generate_changelog(self, target: str) -> bool:
        if self.changelog_service is None:
            return False
        try:
            return self.changelog_service.generate(self.product, target) is not None
        except FetchError as e:
            logger.warning(f"Failed to generate release notes for {self.product}/{target}: {e}")
            return False

    def freeze(self, version: str, new_version: str, fetch_release_notes: bool = True) -> VersionMetadata:
        """
        Run the whole freeze.

        1. Make sure next's release notes mention the version, fetching them if allowed
        2. Copy next to the version folder
        3. Generate the version's own release notes
        4. Add the version to docs.json
        5. Record it in versions.json
        6. Write the frozen metadata files

        Raises:
            ValueError: On a malformed version or a dropdown with no versions
            FileNotFoundError: When next or docs.json is missing
        """
        if not validate_version_format(version):
            raise ValueError(f"Invalid freeze version format: {version}")
        if not validate_version_format(new_version):
            raise ValueError(f"Invalid new development version format: {new_version}")

        logger.info(f"Freezing {self.product}/{NEXT} as {version}, next development version {new_version}")

        if not self.check_release_notes(version):
            if fetch_release_notes and self.changelog_service is not None:
                logger.info(f"Release notes missing for {version} in {self.product}. Fetching from GitHub...")
                self._generate_changelog(NEXT)
                if self.check_release_notes(version):
                    logger.info("Release notes updated.")
                else:
                    logger.warning(f"{version} still not found in release notes after fetch.")
            else:
                logger.warning("Skipping automatic release notes fetch.")

        self.copy_docs(version)

        if self.changelog_service is not None and not self._generate_changelog(version):
            logger.warning("Failed to generate version-specific changelog. Proceeding.")

        self.update_navigation(version)
        update_registry_for_freeze(self.docs_root, self.product, version, new_version)
        return self.write_metadata(version, new_version)
