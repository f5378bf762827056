"""Security utilities - password hashing and purpose-scoped tokens.

Re-exports all security-related functions for convenience.
"""

from src.scribe.core.security.crypto import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    hash_token,
    verify_password,
)
from src.scribe.core.security.tokens import (
    OneTimeCode,
    TokenPair,
    TokenPurpose,
    TokenService,
)

__all__ = [
    # Crypto
    "DUMMY_PASSWORD_HASH",
    "hash_password",
    "hash_token",
    "verify_password",
    # Tokens
    "OneTimeCode",
    "TokenPair",
    "TokenPurpose",
    "TokenService",
]
