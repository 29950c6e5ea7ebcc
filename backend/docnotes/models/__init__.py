"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: Account, credentials, session handle and moderator flag
- Team / TeamMembership: Teams and role-based memberships
- Identifier: Pointer into a documentation set
- Entry / EntryTeamShare: Annotations and their per-team shares
- Vote: Per-user up/down votes on entries
"""
from .user import User
from .team import Team, TeamMembership
from .identifier import Identifier
from .entry import Entry, EntryTeamShare
from .vote import Vote, VOTE_UP, VOTE_DOWN
