"""
Schemas for the Docusaurus to Mintlify migration pipeline.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List, Dict


class IssueKind(str, Enum):
    """Categories collected in the migration report."""
    ERROR = "error"         # Needs a human to look at it
    WARNING = "warning"     # Auto-repaired, worth a second look
    REMOVAL = "removal"     # Content dropped from the output


class MigrationIssue(BaseModel):
    """A single problem found while converting one file."""
    kind: IssueKind = IssueKind.ERROR
    file: str = "unknown"
    line: Optional[int] = None
    issue: str
    suggestion: Optional[str] = None
    original: Optional[str] = None  # Offending text, or the removed content
    fixed: Optional[str] = None     # Replacement applied by an auto-fix


class ConversionMetadata(BaseModel):
    title: str
    sidebar_position: float = 999


class ConversionResult(BaseModel):
    """Output of converting one Docusaurus document."""
    content: str
    metadata: ConversionMetadata


class ConvertedFile(BaseModel):
    """A document written (or planned) by a directory migration."""
    path: str                        # Path relative to the version folder, without extension
    title: str
    sidebar_position: float = 999
    resolved_position: Optional[float] = None
    from_cache: bool = False


class DirectoryResult(BaseModel):
    """Outcome of migrating one source directory into one version folder."""
    version: str
    files: List[ConvertedFile] = Field(default_factory=list)
    filename_mappings: Dict[str, str] = Field(default_factory=dict)
    total_files: int = 0
    unique_processed: int = 0
    cache_hits: int = 0
    images_copied: int = 0
