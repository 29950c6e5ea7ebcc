# docnotes/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Default global moderator creation on startup
- context: Per-request context (actor and store handles)
- db: Database configuration and connection management
- errors: Error kinds shared by every layer
- security: Password hashing and session tokens
"""
