"""
Service configuration.

Process defaults come from environment variables (``Settings``); the
collaborators the embedding application injects live on a ``ServiceConfig``
object that is handed to each ``AdminUserService``.
"""
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from admin_users.core.exceptions import ConfigurationMissingError
from admin_users.core.security import hash_password, verify_password
from admin_users.database.connections import read_users_file, write_users_file

DEFAULT_USERS_FILE = Path("content") / "auth" / "admin-users.json"

ReadFile = Callable[[str], Awaitable[str]]
WriteFile = Callable[[str, str], Awaitable[None]]
HashPassword = Callable[[str, int], str]
VerifyPassword = Callable[[str, str], bool]


class Settings(BaseSettings):
    """Service defaults from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_USERS_",
        env_file=".env",
        extra="ignore",
    )

    # Users file (None -> <cwd>/content/auth/admin-users.json)
    users_file_path: Optional[Path] = None

    # bcrypt cost factor
    salt_rounds: int = Field(default=10, ge=4, le=31)

    # Issuer label in TOTP enrollment URIs
    totp_issuer: str = "Tinyland.dev"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class AdminUserServiceConfig(BaseModel):
    """
    Configuration options for AdminUserService.

    All fields are optional. Defaults are used for anything left unset,
    except the TOTP and temporary password generators.
    """
    model_config = ConfigDict(extra="forbid")

    users_file_path: Optional[Path] = None
    salt_rounds: Optional[int] = Field(None, ge=4, le=31)
    read_file: Optional[ReadFile] = None
    write_file: Optional[WriteFile] = None
    hash_password: Optional[HashPassword] = None
    verify_password: Optional[VerifyPassword] = None
    generate_id: Optional[Callable[[], str]] = None
    generate_totp_secret: Optional[Callable[[], str]] = None
    generate_totp_uri: Optional[Callable[[str, str, str], str]] = None
    # May return the artifact or an awaitable of it
    generate_totp_qr_code: Optional[Callable[[str], Union[str, Awaitable[str]]]] = None
    generate_temp_password: Optional[Callable[[int], str]] = None


def _generate_uuid() -> str:
    return str(uuid.uuid4())


class ServiceConfig:
    """
    Injected collaborators and settings for one service instance.

    Usage:
        config = ServiceConfig(users_file_path="/srv/admin-users.json")
        config.configure(generate_temp_password=make_password)
        service = AdminUserService(config)
    """

    def __init__(self, settings: Optional[Settings] = None, **options: Any):
        self._settings = settings or get_settings()
        self._options = AdminUserServiceConfig(**options)

    def configure(self, **options: Any) -> None:
        """
        Merge options into the current configuration.

        Fields not named keep their previous value.

        Raises:
            pydantic.ValidationError: On unknown or invalid options
        """
        current = {
            name: getattr(self._options, name)
            for name in self._options.model_fields_set
        }
        self._options = AdminUserServiceConfig(**{**current, **options})

    def get_config(self) -> AdminUserServiceConfig:
        """Get a copy of the configured options."""
        return self._options.model_copy()

    def reset(self) -> None:
        """Clear every configured option."""
        self._options = AdminUserServiceConfig()

    def get_users_file_path(self) -> Path:
        path = self._options.users_file_path or self._settings.users_file_path
        if path is None:
            return Path.cwd() / DEFAULT_USERS_FILE
        return path

    def get_salt_rounds(self) -> int:
        if self._options.salt_rounds is not None:
            return self._options.salt_rounds
        return self._settings.salt_rounds

    def get_totp_issuer(self) -> str:
        return self._settings.totp_issuer

    def get_read_file(self) -> ReadFile:
        return self._options.read_file or read_users_file

    def get_write_file(self) -> WriteFile:
        return self._options.write_file or write_users_file

    def get_hash_password(self) -> HashPassword:
        return self._options.hash_password or hash_password

    def get_verify_password(self) -> VerifyPassword:
        return self._options.verify_password or verify_password

    def get_generate_id(self) -> Callable[[], str]:
        return self._options.generate_id or _generate_uuid

    def get_generate_totp_secret(self) -> Callable[[], str]:
        return self._require("generate_totp_secret")

    def get_generate_totp_uri(self) -> Callable[[str, str, str], str]:
        return self._require("generate_totp_uri")

    def get_generate_totp_qr_code(self) -> Callable[[str], Union[str, Awaitable[str]]]:
        return self._require("generate_totp_qr_code")

    def get_generate_temp_password(self) -> Callable[[int], str]:
        return self._require("generate_temp_password")

    def _require(self, name: str) -> Callable[..., Any]:
        func = getattr(self._options, name)
        if func is None:
            raise ConfigurationMissingError(name)
        return func
