"""
Global test fixtures for the admin user service.

This module provides shared fixtures for all tests including:
- An in-memory fake of the users file (read/write collaborators)
- Fake hashing and TOTP collaborators
- Sample user documents
"""

import itertools
import json
import sys
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# Fake File System
# =============================================================================

class FakeUsersFile:
    """
    In-memory stand-in for the users file.

    ``read_file`` and ``write_file`` are AsyncMocks so tests can assert on
    the paths and payloads passed by the service.
    """

    def __init__(self, initial: Optional[Any] = None):
        self.content = json.dumps(initial) if initial is not None else ""
        self.exists = initial is not None
        self.read_file = AsyncMock(side_effect=self._read)
        self.write_file = AsyncMock(side_effect=self._write)

    async def _read(self, path: str) -> str:
        if not self.exists:
            raise FileNotFoundError(f"No such file or directory: '{path}'")
        return self.content

    async def _write(self, path: str, data: str) -> None:
        self.content = data
        self.exists = True

    def set_content(self, content: str) -> None:
        self.content = content
        self.exists = True

    def documents(self) -> list[dict]:
        """User documents currently on 'disk'."""
        return json.loads(self.content)["users"]


# =============================================================================
# Sample Users
# =============================================================================

def build_alice(**overrides) -> dict:
    """Alice, an active admin with a password and no TOTP."""
    return {
        "id": "user-1",
        "username": "alice",
        "handle": "alice_h",
        "displayName": "Alice",
        "password": "$2a$10$hashed_secret123",
        "role": "admin",
        "isActive": True,
        "createdAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2025-01-01T00:00:00.000Z",
        "lastLogin": None,
        "totpSecret": None,
        "totpEnabled": False,
        "firstLogin": False,
        **overrides,
    }


def build_bob(**overrides) -> dict:
    """Bob, an active super admin."""
    return {
        "id": "user-2",
        "username": "bob",
        "handle": "bob_h",
        "displayName": "Bob",
        "password": "$2a$10$hashed_password456",
        "role": "super_admin",
        "isActive": True,
        "createdAt": "2025-02-01T00:00:00.000Z",
        "updatedAt": "2025-02-01T00:00:00.000Z",
        "lastLogin": None,
        "totpSecret": None,
        "totpEnabled": False,
        "firstLogin": False,
        **overrides,
    }


@pytest.fixture
def users_file() -> FakeUsersFile:
    """Users file holding alice and bob."""
    return FakeUsersFile({"users": [build_alice(), build_bob()]})


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def fake_hasher() -> dict:
    """
    Deterministic stand-ins for bcrypt.

    A password ``p`` hashes to ``$2a$<rounds>$hashed_p``.
    """
    return {
        "hash_password": MagicMock(
            side_effect=lambda plain, rounds: f"$2a${rounds:02d}$hashed_{plain}"
        ),
        "verify_password": MagicMock(
            side_effect=lambda plain, hashed: hashed.endswith(f"$hashed_{plain}")
        ),
    }


@pytest.fixture
def fake_totp() -> dict:
    """TOTP and temporary password generators."""
    return {
        "generate_totp_secret": MagicMock(return_value="mock-totp-secret"),
        "generate_totp_uri": MagicMock(
            side_effect=lambda secret, issuer, account:
                f"otpauth://totp/{issuer}:{account}?secret={secret}&issuer={issuer}"
        ),
        "generate_totp_qr_code": AsyncMock(
            side_effect=lambda uri: f"data:image/png;base64,qr_{uri}"
        ),
        "generate_temp_password": MagicMock(side_effect=lambda length: "T" * length),
    }


@pytest.fixture
def id_generator() -> MagicMock:
    """Sequential ids: test-uuid-1, test-uuid-2, ..."""
    counter = itertools.count(1)
    return MagicMock(side_effect=lambda: f"test-uuid-{next(counter)}")


@pytest.fixture
def make_alice():
    """Builder for alice's document with field overrides."""
    return build_alice


@pytest.fixture
def make_bob():
    """Builder for bob's document with field overrides."""
    return build_bob


@pytest.fixture
def make_users_file():
    """Factory for users files with custom contents."""
    return FakeUsersFile


@pytest.fixture
def users_file_path() -> str:
    return "/test/admin-users.json"
