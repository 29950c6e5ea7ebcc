# docnotes/stores/base.py
"""
Store Abstract Interfaces

One interface per aggregate (Identity, Team, Identifier, Entry, Vote). The
HTTP layer and the core services depend on these interfaces only; the
Tortoise ORM implementations live next to this module and tests may swap in
in-memory fakes.
"""
from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional

from docnotes.services.records import (
    Actor,
    CascadeResult,
    EntryDraft,
    EntryPartitions,
    EntryRecord,
    IdentifierRecord,
    MemberRecord,
    MembershipRecord,
    VoteRecord,
)


class UserStore(ABC):
    """Identity store. Lookups raise NotFoundError when nothing matches."""

    @abstractmethod
    async def find_by_id(self, user_id: int):
        pass

    @abstractmethod
    async def find_by_username(self, username: str):
        pass

    @abstractmethod
    async def find_by_email(self, email: str):
        pass

    @abstractmethod
    async def find_by_remember_token(self, token: str):
        pass

    @abstractmethod
    async def store(self, username: str, password_hash: str, email: Optional[str] = None):
        """Create a user; raises ConflictError if username or email is taken."""
        pass

    @abstractmethod
    async def update(self, user):
        """Persist changes to an existing user; raises ConflictError on a taken email."""
        pass


class TeamStore(ABC):

    @abstractmethod
    async def find_team_by_name(self, name: str):
        pass

    @abstractmethod
    async def store(self, name: str, owner_id: int):
        """Create a team and the owner's membership in one transaction."""
        pass

    @abstractmethod
    async def update_access_key(self, team, access_key_hash: str) -> None:
        pass

    @abstractmethod
    async def add_membership(self, team_id: int, user_id: int, role: str) -> None:
        """Raises ConflictError when the user already belongs to the team."""
        pass

    @abstractmethod
    async def remove_membership(self, team_id: int, user_id: int) -> CascadeResult:
        """
        Remove a membership and everything scoped to it, atomically.

        Deletes the membership, the user's entries shared with the team along
        with all their votes and shares, and the team itself once it has no
        memberships left.
        """
        pass

    @abstractmethod
    async def update_membership(self, team_id: int, user_id: int, role: str) -> None:
        """Raises NotFoundError when the user is not a member of the team."""
        pass

    @abstractmethod
    async def find_membership(self, team_id: int, user_id: int) -> Optional[str]:
        """Role of the user in the team, or None."""
        pass

    @abstractmethod
    async def find_memberships_for_user(self, user_id: int) -> List[MembershipRecord]:
        pass

    @abstractmethod
    async def find_memberships_for_team(self, team_id: int) -> List[MemberRecord]:
        pass


class IdentifierStore(ABC):

    @abstractmethod
    async def upsert(self, identifier: IdentifierRecord, using_db=None) -> IdentifierRecord:
        """Normalize, look up by natural key and create if absent; never duplicates."""
        pass


class EntryStore(ABC):

    @abstractmethod
    async def store(self, draft: EntryDraft, actor: Actor) -> EntryRecord:
        """
        Create or update an entry.

        Validates the draft, upserts its identifier, enforces the publish and
        update authorization rules and synchronizes team shares.
        """
        pass

    @abstractmethod
    async def delete(self, entry_id: int) -> None:
        pass

    @abstractmethod
    async def find_by_id(self, entry_id: int) -> EntryRecord:
        pass

    @abstractmethod
    async def list_for_identifier(self, identifier: IdentifierRecord, actor: Optional[Actor]) -> EntryPartitions:
        pass

    @abstractmethod
    async def find_public_by_identifier(self, identifier: IdentifierRecord, actor: Optional[Actor]) -> List[EntryRecord]:
        pass

    @abstractmethod
    async def find_own_by_identifier(self, identifier: IdentifierRecord, actor: Optional[Actor]) -> List[EntryRecord]:
        pass

    @abstractmethod
    async def find_by_team_and_identifier(self, identifier: IdentifierRecord, actor: Actor) -> List[EntryRecord]:
        pass

    @abstractmethod
    async def update_score(self, entry_id: int, score: int, using_db=None) -> None:
        pass

    @abstractmethod
    async def remove_from_public(self, entry_id: int) -> None:
        pass

    @abstractmethod
    async def remove_from_teams(self, entry: EntryRecord, actor: Actor) -> List[int]:
        """Hide the entry from the shared teams the actor moderates; returns their ids."""
        pass


class VoteStore(ABC):

    @abstractmethod
    def locked_entry(self, entry_id: int) -> AsyncContextManager:
        """
        Open a transaction holding the entry row lock and yield its connection.

        Vote writes and the score recompute run inside it, so concurrent
        voters on one entry are serialized and a failure rolls back both.
        """
        pass

    @abstractmethod
    async def upsert(self, vote: VoteRecord, using_db=None) -> VoteRecord:
        """Insert the vote or overwrite the type of the existing (entry, user) vote."""
        pass

    @abstractmethod
    async def find_by_entry_and_user(self, entry_id: int, user_id: int) -> Optional[VoteRecord]:
        pass

    @abstractmethod
    async def types_for_entry(self, entry_id: int, using_db=None) -> List[int]:
        pass
