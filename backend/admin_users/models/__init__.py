"""
Pydantic models for stored user documents.
"""
from admin_users.models.user import AdminUser, SECRET_KEYS

__all__ = [
    "AdminUser",
    "SECRET_KEYS",
]
