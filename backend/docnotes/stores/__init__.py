"""
Persistence layer.

`Stores` bundles one implementation of each store interface; the HTTP layer
receives it through a dependency so tests can substitute their own.
"""
from dataclasses import dataclass, field

from docnotes.stores.base import EntryStore, IdentifierStore, TeamStore, UserStore, VoteStore
from docnotes.stores.entries import TortoiseEntryStore
from docnotes.stores.identifiers import TortoiseIdentifierStore
from docnotes.stores.teams import TortoiseTeamStore
from docnotes.stores.users import TortoiseUserStore
from docnotes.stores.votes import TortoiseVoteStore


@dataclass
class Stores:
    users: UserStore = field(default_factory=TortoiseUserStore)
    teams: TeamStore = field(default_factory=TortoiseTeamStore)
    identifiers: IdentifierStore = field(default_factory=TortoiseIdentifierStore)
    entries: EntryStore = field(default_factory=TortoiseEntryStore)
    votes: VoteStore = field(default_factory=TortoiseVoteStore)


__all__ = [
    "Stores",
    "UserStore",
    "TeamStore",
    "IdentifierStore",
    "EntryStore",
    "VoteStore",
    "TortoiseUserStore",
    "TortoiseTeamStore",
    "TortoiseIdentifierStore",
    "TortoiseEntryStore",
    "TortoiseVoteStore",
]
