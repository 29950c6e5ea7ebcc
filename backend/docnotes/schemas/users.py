# docnotes/schemas/users.py
"""
Pydantic schemas for user endpoints.
Defines request models for registration, login and account changes.
"""
from typing import Optional

from pydantic import BaseModel


class RegisterIn(BaseModel):
    """Request model for account registration."""
    username: str = ""
    email: Optional[str] = None  # Optional, must be unique if provided
    password: str = ""


class LoginIn(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    username: str = ""  # User login name
    password: str = ""  # User password (plain text, verified against the stored hash)


class PasswordIn(BaseModel):
    password: str = ""  # New password


class EmailIn(BaseModel):
    email: str = ""  # New email address
