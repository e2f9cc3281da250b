"""
Admin user record stored in the flat-file JSON database.
"""
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Keys holding a password hash; never returned by redacted copies
SECRET_KEYS = ("password", "passwordHash")

# Stored timestamps are kept as written; the service writes ISO 8601 strings
Timestamp = Union[datetime, str, int, float]


class AdminUser(BaseModel):
    """
    Admin user document from the users file.

    Unknown keys are kept in ``model_extra`` and written back unchanged,
    so application-specific fields survive a load/mutate/save cycle.
    Optional fields default to None but are only serialized when present
    in the source document or assigned since.

    A value that does not match its field's type is kept as it was read
    rather than rejected, so one odd record never makes the file unreadable.
    Only ``id`` and ``username`` must be present.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Opaque unique identifier")
    username: str = Field(..., description="Unique login name (case-sensitive)")
    handle: Optional[str] = Field(None, description="Secondary lookup key")
    display_name: Optional[str] = Field(None, alias="displayName")
    password: Optional[str] = Field(None, description="Bcrypt hash, never plaintext")
    role: Any = Field(None, description="Free-form role, opaque to the store")
    is_active: Optional[bool] = Field(None, alias="isActive")
    created_at: Optional[Timestamp] = Field(None, alias="createdAt")
    updated_at: Optional[Timestamp] = Field(None, alias="updatedAt")
    last_login: Optional[Timestamp] = Field(None, alias="lastLogin")
    totp_secret: Optional[str] = Field(None, alias="totpSecret")
    totp_enabled: Optional[bool] = Field(None, alias="totpEnabled")
    first_login: Optional[bool] = Field(None, alias="firstLogin")

    @field_validator("*", mode="wrap")
    @classmethod
    def keep_unrecognised_values(cls, value: Any, handler: Any) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return value

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict keyed by the on-disk names, present keys only."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, warnings=False)

    def redacted(self) -> "AdminUser":
        """Independent copy with every password hash key removed."""
        data = self.model_dump(by_alias=True, exclude_unset=True, warnings=False)
        for key in SECRET_KEYS:
            data.pop(key, None)
        return type(self).model_validate(data)
