"""
Repository layer for the section library service.

All filesystem access to the library lives here. Credential lookups go
through the CredentialStore interface.
"""

from backend.repos.credential_repo import CredentialStore, MemoryCredentialStore
from backend.repos.section_repo import SectionRepo

__all__ = [
    "SectionRepo",
    "CredentialStore",
    "MemoryCredentialStore",
]
