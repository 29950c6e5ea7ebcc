# docnotes/services/records.py
"""
Plain data records exchanged between stores and the core services.

Stores translate ORM rows into these records so that visibility resolution,
team policy and vote aggregation never depend on the database layer.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class MembershipRecord:
    """One team membership of a user, as seen from that user."""
    team_id: int
    team_name: str
    role: str  # "owner" | "moderator" | "member"


@dataclass
class Actor:
    """
    The authenticated caller of an operation.

    Anonymous callers are represented by `None` wherever an Actor is
    expected, never by an Actor with an empty id.
    """
    user_id: int
    username: str
    moderator: bool = False  # Global moderator override
    memberships: List[MembershipRecord] = field(default_factory=list)

    @property
    def team_ids(self) -> set:
        return {m.team_id for m in self.memberships}

    def role_in(self, team_id: int) -> Optional[str]:
        for membership in self.memberships:
            if membership.team_id == team_id:
                return membership.role
        return None


@dataclass
class ShareRecord:
    """An entry's share with one team."""
    team_id: int
    team_name: str
    removed_from_team: bool = False


@dataclass
class EntryRecord:
    id: int
    author_id: int
    public: bool = False
    removed_from_public: bool = False
    score: int = 0
    shares: List[ShareRecord] = field(default_factory=list)
    title: str = ""
    body: str = ""
    body_rendered: str = ""
    type: str = ""
    anchor: str = ""
    author_username: str = ""
    identifier_id: Optional[int] = None

    @property
    def team_names(self) -> List[str]:
        return [share.team_name for share in self.shares]

    def to_dict(self) -> dict:
        """Serialize for API responses (body is only exposed by entry get)."""
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "anchor": self.anchor,
            "public": self.public,
            "score": self.score,
            "teams": self.team_names,
            "author": self.author_username,
        }


@dataclass
class IdentifierRecord:
    """
    A location inside a documentation set.

    `id` is None for a payload that has not been upserted yet.
    """
    docset_filename: str
    page_path: str = ""
    docset_name: str = ""
    docset_platform: str = ""
    docset_bundle: str = ""
    docset_version: str = ""
    page_title: str = ""
    httrack_source: str = ""
    banned_from_public: bool = False
    id: Optional[int] = None

    def is_empty(self) -> bool:
        return not any((
            self.docset_name,
            self.docset_filename,
            self.docset_platform,
            self.docset_bundle,
            self.docset_version,
        ))


@dataclass
class EntryDraft:
    """Input to the entry save operation; entry_id None creates a new entry."""
    title: str
    body: str
    anchor: str
    identifier: IdentifierRecord
    type: str = ""
    public: bool = False
    teams: List[str] = field(default_factory=list)
    entry_id: Optional[int] = None


@dataclass
class VoteRecord:
    entry_id: int
    user_id: int
    type: int
    id: Optional[int] = None


@dataclass
class MemberRecord:
    """A member of a team, as seen from the team."""
    username: str
    role: str


@dataclass
class CascadeResult:
    """Summary of a membership removal cascade."""
    team_id: int
    user_id: int
    deleted_entry_ids: List[int] = field(default_factory=list)
    team_deleted: bool = False


@dataclass
class EntryPartitions:
    """The three visibility partitions for one identifier."""
    public: List[EntryRecord] = field(default_factory=list)
    own: List[EntryRecord] = field(default_factory=list)
    team: List[EntryRecord] = field(default_factory=list)
