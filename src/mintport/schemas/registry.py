"""
Schemas for versions.json and frozen version metadata.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict


class ProductConfig(BaseModel):
    """Versions and source repository of one documented product."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    versions: List[str] = Field(default_factory=list)
    default_version: Optional[str] = Field(default=None, alias="defaultVersion")
    repository: Optional[str] = None
    changelog_path: Optional[str] = Field(default=None, alias="changelogPath")


class VersionsRegistry(BaseModel):
    """Top-level shape of versions.json."""
    model_config = ConfigDict(extra="allow")

    products: Dict[str, ProductConfig] = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class VersionMetadata(BaseModel):
    """Contents of .version-metadata.json written next to a frozen version."""
    model_config = ConfigDict(populate_by_name=True)

    version: str
    frozen_date: str = Field(alias="frozenDate")
    frozen_timestamp: str = Field(alias="frozenTimestamp")  # ISO 8601, UTC
    next_version: str = Field(alias="nextVersion")
