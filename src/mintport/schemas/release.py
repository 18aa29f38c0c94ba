"""
Schemas for parsed changelog releases.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, List


class ReleaseUpdate(BaseModel):
    """One release parsed out of a changelog."""
    version: str
    date: Optional[str] = None
    # Section heading -> bullet items, in changelog order
    sections: Dict[str, List[str]] = Field(default_factory=dict)
    raw: bool = False  # Fallback entry built from unparsed changelog text
