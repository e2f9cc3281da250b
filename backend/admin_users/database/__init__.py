"""
Database module - flat-file users database access and format.
"""
from admin_users.database.connections import read_users_file, write_users_file
from admin_users.database.users_file import (
    normalize_record,
    parse_users,
    serialize_users,
)

__all__ = [
    "read_users_file",
    "write_users_file",
    "normalize_record",
    "parse_users",
    "serialize_users",
]
