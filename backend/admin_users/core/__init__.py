"""
Core module - Password hashing and service exceptions.
"""
from admin_users.core.exceptions import (
    AdminUserServiceError,
    ConfigurationMissingError,
    DuplicateUsernameError,
    PersistenceError,
)
from admin_users.core.security import hash_password, verify_password

__all__ = [
    "AdminUserServiceError",
    "ConfigurationMissingError",
    "DuplicateUsernameError",
    "PersistenceError",
    "hash_password",
    "verify_password",
]
