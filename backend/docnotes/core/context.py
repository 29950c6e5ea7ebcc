# docnotes/core/context.py
from dataclasses import dataclass
from typing import Optional

from docnotes.services.records import Actor
from docnotes.stores import Stores


@dataclass
class RequestContext:
    """
    Everything an operation needs, built once per request.

    actor is None for anonymous callers. Handlers pass the context down
    explicitly instead of reaching for module-level state.
    """
    stores: Stores
    actor: Optional[Actor] = None
    user: Optional[object] = None  # The authenticated User row, when any

    @property
    def users(self):
        return self.stores.users

    @property
    def teams(self):
        return self.stores.teams

    @property
    def identifiers(self):
        return self.stores.identifiers

    @property
    def entries(self):
        return self.stores.entries

    @property
    def votes(self):
        return self.stores.votes
