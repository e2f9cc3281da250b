"""
Exceptions raised by the admin user service.

Not-found is never an exception here: lookups and soft mutators
return None / False for a missing id.
"""
from typing import Optional


class AdminUserServiceError(Exception):
    """Base class for all admin user service failures."""


class ConfigurationMissingError(AdminUserServiceError, RuntimeError):
    """A required collaborator was invoked but never configured."""

    def __init__(self, dependency: str, message: Optional[str] = None):
        self.dependency = dependency
        super().__init__(message or f"TOTP not configured: {dependency} is required")


class DuplicateUsernameError(AdminUserServiceError, ValueError):
    """Username already taken by another record."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class PersistenceError(AdminUserServiceError):
    """
    Writing the users file failed.

    The in-memory mapping already holds the mutation when this is raised,
    so the durable copy is behind the store until the next successful write.
    """

    def __init__(self, path: str, message: str = "Failed to persist user changes"):
        self.path = path
        super().__init__(message)
