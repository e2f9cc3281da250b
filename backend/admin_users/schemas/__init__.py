"""
Request and response schemas for service operations.
"""
from admin_users.schemas.user import CreateUserData, CreateUserResult

__all__ = [
    "CreateUserData",
    "CreateUserResult",
]
