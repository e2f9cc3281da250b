"""
Admin user service - flat-file admin credential store.

Maintains admin user records (role, bcrypt password hash, TOTP enrollment,
activity flags) in a JSON file and exposes CRUD plus password verification.
"""
from admin_users.config import (
    AdminUserServiceConfig,
    ServiceConfig,
    Settings,
    get_settings,
)
from admin_users.core.exceptions import (
    AdminUserServiceError,
    ConfigurationMissingError,
    DuplicateUsernameError,
    PersistenceError,
)
from admin_users.models.user import AdminUser
from admin_users.schemas.user import CreateUserData, CreateUserResult
from admin_users.services.admin_user_service import (
    AdminUserService,
    get_admin_user_service,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "AdminUserServiceConfig",
    "ServiceConfig",
    "Settings",
    "get_settings",
    # Errors
    "AdminUserServiceError",
    "ConfigurationMissingError",
    "DuplicateUsernameError",
    "PersistenceError",
    # Types
    "AdminUser",
    "CreateUserData",
    "CreateUserResult",
    # Service
    "AdminUserService",
    "get_admin_user_service",
]
