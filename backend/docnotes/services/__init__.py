"""
Services Module

Core annotation rules, independent of the database layer:
- Team policy: roles, access keys, ownership checks
- Visibility: which entries an actor may see, update or moderate
- Identifiers: normalization and natural keys of documentation locations
- Votes: score aggregation
- Rendering: markdown to HTML
"""

from .records import (
    Actor,
    CascadeResult,
    EntryDraft,
    EntryPartitions,
    EntryRecord,
    IdentifierRecord,
    MemberRecord,
    MembershipRecord,
    ShareRecord,
    VoteRecord,
)
from .rendering import render_markdown

__all__ = [
    # Records
    "Actor",
    "CascadeResult",
    "EntryDraft",
    "EntryPartitions",
    "EntryRecord",
    "IdentifierRecord",
    "MemberRecord",
    "MembershipRecord",
    "ShareRecord",
    "VoteRecord",
    # Rendering
    "render_markdown",
]
