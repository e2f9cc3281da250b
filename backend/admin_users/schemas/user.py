"""
User creation request/response schemas.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from admin_users.models.user import AdminUser


class CreateUserData(BaseModel):
    """Data required to create a new admin user."""
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., description="Unique login name")
    role: str = Field(..., description="Role assigned to the user")
    password: Optional[str] = Field(
        None,
        description="Plain password; a temporary one is generated when omitted"
    )
    display_name: Optional[str] = Field(None, alias="displayName")
    handle: Optional[str] = Field(None, description="Login handle")
    generate_credentials: bool = Field(
        default=False,
        alias="generateCredentials",
        description="Issue a temporary password and a TOTP secret"
    )
    totp_secret: Optional[str] = Field(None, alias="totpSecret")
    first_login: Optional[bool] = Field(None, alias="firstLogin")


class CreateUserResult(AdminUser):
    """
    Created user (without password hash) plus credentials issued at creation.

    None of the extra fields are persisted; this is the only place the
    temporary password leaves the service.
    """
    temp_password: Optional[str] = Field(None, alias="tempPassword")
    qr_code: Optional[str] = Field(None, alias="qrCode")
    totp_uri: Optional[str] = Field(None, alias="totpUri")
