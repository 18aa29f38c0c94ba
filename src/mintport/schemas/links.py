"""
Schemas for the documentation link checker.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List


class LinkType(str, Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    CARD = "card"


class DocLink(BaseModel):
    url: str
    text: str = ""
    line: int
    type: LinkType = LinkType.MARKDOWN


class LinkCheckResult(BaseModel):
    file: str
    link: DocLink
    resolved: str
    external: bool = False
    ok: bool = True
    status: Optional[int] = None
    error: Optional[str] = None


class LinkCheckSummary(BaseModel):
    files_checked: int = 0
    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    skipped_links: int = 0
    broken: List[LinkCheckResult] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.broken
