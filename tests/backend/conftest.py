"""
Backend-specific test fixtures.

These fixtures wire the global fake collaborators into a ServiceConfig
and an AdminUserService.
"""

import pytest


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    from admin_users.config import Settings

    return Settings(_env_file=None)


@pytest.fixture
def service_config(settings, users_file_path, users_file, fake_hasher, fake_totp, id_generator):
    """ServiceConfig with every collaborator faked."""
    from admin_users.config import ServiceConfig

    return ServiceConfig(
        settings=settings,
        users_file_path=users_file_path,
        salt_rounds=10,
        read_file=users_file.read_file,
        write_file=users_file.write_file,
        generate_id=id_generator,
        **fake_hasher,
        **fake_totp,
    )


@pytest.fixture
def service(service_config):
    """AdminUserService over the fake users file."""
    from admin_users.services.admin_user_service import AdminUserService

    return AdminUserService(service_config)
