"""
Utility functions package.
"""
from timeline.utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    generate_unique_filename,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "generate_unique_filename",
]
