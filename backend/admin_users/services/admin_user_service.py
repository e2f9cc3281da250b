"""
Admin user service: flat-file user store with credential issuance and
password verification.

Every public method reloads the users file first and, when it mutates a
record, writes the whole file back before returning. There is no locking:
two overlapping mutations against the same file race and the last write
wins. Callers that need stronger guarantees must serialize operations.
"""
import asyncio
import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from admin_users.config import ServiceConfig
from admin_users.core.exceptions import DuplicateUsernameError, PersistenceError
from admin_users.database.users_file import normalize_record, parse_users, serialize_users
from admin_users.models.user import SECRET_KEYS, AdminUser
from admin_users.schemas.user import CreateUserData, CreateUserResult

logger = logging.getLogger(__name__)

TEMP_PASSWORD_LENGTH = 12

# Keys update_user never changes
PROTECTED_KEYS = ("id", "createdAt", *SECRET_KEYS)


def _utcnow() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def _resolve(value: Any) -> Any:
    """Await collaborator results that may or may not be coroutines."""
    if inspect.isawaitable(value):
        return await value
    return value


class AdminUserService:
    """Service for admin user records backed by a JSON file."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        """Initialize with an explicit configuration (fresh defaults if omitted)."""
        self.config = config or ServiceConfig()
        self._users: dict[str, AdminUser] = {}

    # =========================================================================
    # Persistence
    # =========================================================================

    async def _load_users(self) -> None:
        """
        Replace the in-memory mapping with the current file contents.

        Any read or parse failure leaves the store empty instead of failing
        the calling operation.
        """
        path = self.config.get_users_file_path()
        try:
            read_file = self.config.get_read_file()
            users = parse_users(await _resolve(read_file(str(path))))
        except Exception as e:
            logger.error(f"Failed to load admin users from {path}: {e}")
            self._users = {}
            return

        self._users = {user.id: user for user in users}

    async def _save_users(self) -> None:
        """
        Write the full mapping back to the users file.

        Raises:
            PersistenceError: If the write fails (the in-memory mapping
                keeps the mutation)
        """
        path = self.config.get_users_file_path()
        try:
            write_file = self.config.get_write_file()
            await _resolve(write_file(str(path), serialize_users(self._users.values())))
        except Exception as e:
            logger.error(f"Failed to save admin users to {path}: {e}")
            raise PersistenceError(str(path)) from e

    def _reattach(self, user: AdminUser) -> AdminUser:
        """
        Current stored version of ``user`` after an await.

        Another call may have reloaded the mapping while this one waited, so
        the record is looked up again (or put back) before it is changed.
        """
        return self._users.setdefault(user.id, user)

    def _find_by_username(self, username: str) -> Optional[AdminUser]:
        return next((u for u in self._users.values() if u.username == username), None)

    def _find_by_handle(self, handle: str) -> Optional[AdminUser]:
        return next((u for u in self._users.values() if u.handle == handle), None)

    async def _hash(self, plain_password: str) -> str:
        hash_password = self.config.get_hash_password()
        return await asyncio.to_thread(
            hash_password, plain_password, self.config.get_salt_rounds()
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    async def get_all_users(self) -> list[AdminUser]:
        """
        Get every user with password hashes removed.

        Returns:
            Users in file order
        """
        await self._load_users()
        return [user.redacted() for user in self._users.values()]

    async def get_user_by_id(self, user_id: str) -> Optional[AdminUser]:
        """
        Get a user by ID, including the password hash.

        This is the raw lookup used for credential checks; do not hand the
        result to untrusted callers.

        Args:
            user_id: User identifier

        Returns:
            Copy of the stored user or None if not found
        """
        await self._load_users()
        user = self._users.get(user_id)
        if user is None:
            return None
        return user.model_copy(deep=True)

    async def get_user_by_handle(self, handle: str) -> Optional[AdminUser]:
        """
        Get the first user whose handle equals ``handle``.

        Handles are not unique; the first match in file order wins.

        Returns:
            User without password hash or None if not found
        """
        await self._load_users()
        user = self._find_by_handle(handle)
        if user is None:
            return None
        return user.redacted()

    # =========================================================================
    # Credential operations
    # =========================================================================

    async def create_user(
        self,
        data: Union[CreateUserData, Mapping[str, Any]],
        created_by: Optional[str] = None,
    ) -> CreateUserResult:
        """
        Create a new admin user and issue its initial credentials.

        A temporary password is generated when no password is given or
        ``generate_credentials`` is set. A TOTP secret is used or generated
        when ``totp_secret`` is given or ``generate_credentials`` is set;
        its enrollment URI and QR code are returned but not stored.

        Args:
            data: Creation request
            created_by: Acting user, used for logging only

        Returns:
            Created user without password hash, plus any issued credentials

        Raises:
            DuplicateUsernameError: If the username is taken
            ConfigurationMissingError: If a needed generator is not configured
            PersistenceError: If the users file cannot be written
        """
        if not isinstance(data, CreateUserData):
            data = CreateUserData.model_validate(data)

        await self._load_users()

        if self._find_by_username(data.username) is not None:
            raise DuplicateUsernameError(data.username)

        temp_password: Optional[str] = None
        if data.generate_credentials or not data.password:
            generate_temp_password = self.config.get_generate_temp_password()
            temp_password = generate_temp_password(TEMP_PASSWORD_LENGTH)
        hashed_password = await self._hash(temp_password or data.password)

        totp_secret: Optional[str] = None
        totp_uri: Optional[str] = None
        qr_code: Optional[str] = None
        if data.totp_secret or data.generate_credentials:
            if data.totp_secret:
                totp_secret = data.totp_secret
            else:
                totp_secret = self.config.get_generate_totp_secret()()
            generate_totp_uri = self.config.get_generate_totp_uri()
            totp_uri = generate_totp_uri(
                totp_secret, self.config.get_totp_issuer(), data.username
            )
            generate_qr_code = self.config.get_generate_totp_qr_code()
            qr_code = await _resolve(generate_qr_code(totp_uri))

        if self._find_by_username(data.username) is not None:
            raise DuplicateUsernameError(data.username)

        if data.first_login is not None:
            first_login = data.first_login
        else:
            first_login = not data.password

        now = _utcnow()
        fields = {
            "id": self.config.get_generate_id()(),
            "username": data.username,
            "password": hashed_password,
            "role": data.role,
            "display_name": data.display_name or data.username,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
            "last_login": None,
            "totp_secret": totp_secret,
            "totp_enabled": totp_secret is not None,
            "first_login": first_login,
        }
        if data.handle is not None:
            fields["handle"] = data.handle
        user = AdminUser(**fields)

        self._users[user.id] = user
        await self._save_users()

        logger.info(
            f"Created admin user '{user.username}' ({user.id})"
            + (f" by {created_by}" if created_by else "")
        )

        result = user.redacted().model_dump(by_alias=True, exclude_unset=True, warnings=False)
        return CreateUserResult(
            **result,
            tempPassword=temp_password,
            qrCode=qr_code,
            totpUri=totp_uri,
        )

    async def verify_password(self, handle: str, password: str) -> Optional[AdminUser]:
        """
        Check a password for the user with the given handle.

        Unknown handle, inactive user, missing hash and wrong password all
        give the same None result.

        Args:
            handle: Login handle
            password: Plain password

        Returns:
            User without password hash (with ``last_login`` updated),
            or None if the credentials are not valid
        """
        await self._load_users()

        user = self._find_by_handle(handle)
        has_hash = user is not None and isinstance(user.password, str) and bool(user.password)
        if not has_hash or user.is_active is not True:
            logger.warning("Password verification failed")
            return None

        verify = self.config.get_verify_password()
        is_valid = await asyncio.to_thread(verify, password, user.password)
        if not is_valid:
            logger.warning("Password verification failed")
            return None

        user = self._reattach(user)
        user.last_login = _utcnow()
        await self._save_users()

        return user.redacted()

    async def update_password(self, user_id: str, new_password: str) -> bool:
        """
        Replace a user's password.

        Returns:
            True on success, False if the user does not exist

        Raises:
            PersistenceError: If the users file cannot be written
        """
        await self._load_users()

        user = self._users.get(user_id)
        if user is None:
            return False

        hashed_password = await self._hash(new_password)

        user = self._reattach(user)
        user.password = hashed_password
        user.updated_at = _utcnow()
        await self._save_users()

        return True

    async def get_totp_secret(self, user_id: str) -> Optional[str]:
        """Get a user's TOTP secret, or None if not enrolled or not found."""
        await self._load_users()
        user = self._users.get(user_id)
        if user is None:
            return None
        return user.totp_secret or None

    async def enable_totp(self, user_id: str, secret: str) -> bool:
        """
        Enroll a user in TOTP.

        Enrollment completes first-login setup, so ``first_login`` is cleared.

        Returns:
            True on success, False if the user does not exist

        Raises:
            ValueError: If the secret is empty
        """
        if not secret:
            raise ValueError("TOTP secret must not be empty")

        await self._load_users()

        user = self._users.get(user_id)
        if user is None:
            return False

        user.totp_secret = secret
        user.totp_enabled = True
        user.updated_at = _utcnow()
        if user.first_login:
            user.first_login = False

        await self._save_users()
        return True

    async def disable_totp(self, user_id: str) -> bool:
        """
        Remove a user's TOTP enrollment.

        Returns:
            True on success, False if the user does not exist
        """
        await self._load_users()

        user = self._users.get(user_id)
        if user is None:
            return False

        user.totp_secret = None
        user.totp_enabled = False
        user.updated_at = _utcnow()

        await self._save_users()
        return True

    async def needs_first_login_setup(self, user_id: str) -> bool:
        """True only when the user exists and has ``first_login`` set."""
        await self._load_users()
        user = self._users.get(user_id)
        if user is None:
            return False
        return user.first_login is True

    # =========================================================================
    # Lifecycle operations
    # =========================================================================

    async def update_user(
        self, user_id: str, data: Mapping[str, Any]
    ) -> Optional[AdminUser]:
        """
        Merge fields into an existing user.

        ``id``, ``createdAt`` and password hash keys in ``data`` are ignored.
        Keys may be given by field name or by their stored (camelCase) name;
        unknown keys are stored as extra fields.

        Args:
            user_id: User identifier
            data: Fields to change

        Returns:
            Updated user without password hash or None if not found

        Raises:
            DuplicateUsernameError: If renaming to a taken username
            PersistenceError: If the users file cannot be written
        """
        await self._load_users()

        user = self._users.get(user_id)
        if user is None:
            return None

        updates = {}
        for key, value in data.items():
            field = AdminUser.model_fields.get(key)
            alias = field.alias if field is not None and field.alias else key
            if alias in PROTECTED_KEYS:
                continue
            updates[alias] = value

        new_username = updates.get("username")
        if new_username and new_username != user.username:
            if self._find_by_username(new_username) is not None:
                raise DuplicateUsernameError(new_username)

        merged = {
            **user.model_dump(by_alias=True, exclude_unset=True, warnings=False),
            **updates,
            "updatedAt": _utcnow(),
        }
        updated = AdminUser.model_validate(normalize_record(merged))

        self._users[user_id] = updated
        await self._save_users()

        return updated.redacted()

    async def toggle_user_status(self, user_id: str) -> Optional[AdminUser]:
        """
        Flip a user's active flag.

        A user without the flag counts as inactive, so the first toggle
        activates it.

        Returns:
            Updated user without password hash or None if not found
        """
        await self._load_users()

        user = self._users.get(user_id)
        if user is None:
            return None

        user.is_active = not user.is_active
        user.updated_at = _utcnow()
        await self._save_users()

        return user.redacted()

    async def delete_user(self, user_id: str) -> bool:
        """
        Permanently remove a user.

        Returns:
            True if deleted, False if the user does not exist (nothing is written)
        """
        await self._load_users()

        if user_id not in self._users:
            return False

        del self._users[user_id]
        await self._save_users()

        logger.info(f"Deleted admin user {user_id}")
        return True


_admin_user_service: Optional[AdminUserService] = None


def get_admin_user_service() -> AdminUserService:
    """Get singleton AdminUserService instance with default configuration."""
    global _admin_user_service
    if _admin_user_service is None:
        _admin_user_service = AdminUserService()
    return _admin_user_service
