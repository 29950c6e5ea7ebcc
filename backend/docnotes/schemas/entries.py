# docnotes/schemas/entries.py
"""
Pydantic schemas for entry endpoints.
Defines the identifier payload sent by documentation browsers and the entry
requests built on top of it.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from docnotes.services.records import IdentifierRecord


class IdentifierIn(BaseModel):
    """
    A location inside a documentation set, as reported by the client.

    Only docset_filename and page_path (or httrack_source for Mono pages)
    take part in lookups; the remaining fields are stored on first sight.
    """
    docset_name: str = ""
    docset_filename: str = ""
    docset_platform: str = ""
    docset_bundle: str = ""
    docset_version: str = ""
    page_path: str = ""
    page_title: str = ""
    httrack_source: str = ""

    def to_record(self) -> IdentifierRecord:
        return IdentifierRecord(**self.model_dump())


class EntryListIn(BaseModel):
    identifier: IdentifierIn = Field(default_factory=IdentifierIn)


class EntrySaveIn(BaseModel):
    """
    Create (entry_id missing or 0) or update an entry.

    Unknown fields such as the `license` some clients still send are ignored.
    """
    title: str = ""
    body: str = ""
    public: bool = False
    type: str = ""
    teams: List[str] = Field(default_factory=list)  # Team names to share with
    identifier: IdentifierIn = Field(default_factory=IdentifierIn)
    anchor: str = ""
    entry_id: Optional[int] = None


class EntryIdIn(BaseModel):
    entry_id: int = 0


class VoteIn(EntryIdIn):
    vote_type: int = 0  # 1 (up) or -1 (down)
