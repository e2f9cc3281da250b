"""
Users file format.

The file holds either a bare list of user documents or an object with a
``users`` list. It is always written back in the object form.
"""
import json
from typing import Any, Iterable

from admin_users.models.user import AdminUser


def normalize_record(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Apply compatibility shims to one raw user document.

    Legacy keys are copied onto their canonical names only when the
    canonical key is missing; the legacy keys themselves are kept.
    The TOTP flag is then re-derived from the secret.

    Args:
        raw: User document as parsed from the file

    Returns:
        New normalized document (the input is not modified)
    """
    record = dict(raw)

    if record.get("passwordHash") and not record.get("password"):
        record["password"] = record["passwordHash"]

    if "active" in record and record.get("isActive") is None:
        record["isActive"] = record["active"]

    if "totpSecret" in record or "totpEnabled" in record:
        secret = record.get("totpSecret") or None
        record["totpSecret"] = secret
        record["totpEnabled"] = secret is not None

    return record


def parse_users(text: str) -> list[AdminUser]:
    """
    Parse users file contents into normalized records.

    Args:
        text: Raw file contents

    Returns:
        Records in file order

    Raises:
        ValueError: If the content is not valid JSON, has an unexpected
            shape, or a record fails validation
    """
    parsed = json.loads(text)

    if isinstance(parsed, list):
        documents = parsed
    elif isinstance(parsed, dict):
        documents = parsed.get("users") or []
    else:
        raise ValueError(f"Unexpected users file root: {type(parsed).__name__}")

    if not isinstance(documents, list):
        raise ValueError("'users' must be a list")

    users = []
    for document in documents:
        if not isinstance(document, dict):
            raise ValueError(f"User entry must be an object, got {type(document).__name__}")
        users.append(AdminUser.model_validate(normalize_record(document)))
    return users


def serialize_users(users: Iterable[AdminUser]) -> str:
    """Serialize records as a pretty-printed ``{"users": [...]}`` document."""
    return json.dumps(
        {"users": [user.to_document() for user in users]},
        indent=2,
        ensure_ascii=False,
    )
