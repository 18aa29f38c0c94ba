"""
Content-addressed conversion cache.

Versioned documentation repeats the same pages across many versions. Results
are keyed by the SHA-256 of the source text alone, so identical pages are
converted once per run wherever they sit.
"""

import hashlib
import logging
from typing import Dict, List, Optional

from mintport.schemas.migration import ConversionResult, MigrationIssue

logger = logging.getLogger(__name__)


def content_checksum(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class MigrationCache:
    def __init__(self):
        self.content_cache: Dict[str, ConversionResult] = {}
        self.validation_cache: Dict[str, List[MigrationIssue]] = {}
        self.file_checksums: Dict[str, str] = {}

    def get_cached_result(self, checksum: str) -> Optional[ConversionResult]:
        return self.content_cache.get(checksum)

    def set_cached_result(self, checksum: str, result: ConversionResult):
        self.content_cache[checksum] = result

    def get_validation_errors(self, checksum: str) -> List[MigrationIssue]:
        return self.validation_cache.get(checksum, [])

    def set_validation_errors(self, checksum: str, errors: List[MigrationIssue]):
        self.validation_cache[checksum] = list(errors)

    def track_file(self, filepath: str, checksum: str):
        self.file_checksums[filepath] = checksum

    def stats(self) -> Dict[str, int]:
        """
        Summarise cache usage.

        Returns:
            Dictionary with unique_content, total_files and duplicates
        """
        unique = len(self.content_cache)
        total = len(self.file_checksums)
        return {
            "unique_content": unique,
            "total_files": total,
            "duplicates": total - unique,
        }

    def duplicate_percentage(self) -> float:
        stats = self.stats()
        if stats["total_files"] == 0:
            return 0.0
        return round(stats["duplicates"] / stats["total_files"] * 100, 1)

    def clear(self):
        self.content_cache.clear()
        self.validation_cache.clear()
        self.file_checksums.clear()
        logger.debug("Migration cache cleared")
