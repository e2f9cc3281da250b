"""
Service layer for business logic.
"""
from admin_users.services.admin_user_service import (
    AdminUserService,
    get_admin_user_service,
)

__all__ = [
    "AdminUserService",
    "get_admin_user_service",
]
