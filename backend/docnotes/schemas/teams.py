# docnotes/schemas/teams.py
"""
Pydantic schemas for team endpoints.
Every team operation addresses its team by unique name.
"""
from pydantic import BaseModel


class TeamNameIn(BaseModel):
    name: str = ""  # Team name


class JoinIn(TeamNameIn):
    access_key: str = ""  # Plain access key; ignored when the team has none


class SetRoleIn(TeamNameIn):
    username: str = ""  # Member whose role changes
    role: str = ""  # "member" or "moderator"


class MemberIn(TeamNameIn):
    username: str = ""  # Member to remove


class AccessKeyIn(TeamNameIn):
    access_key: str = ""  # New plain access key; empty clears it
