"""
Key Derivation Functions
========================

Password-based key derivation for the vault envelope.

Implements:
    - PBKDF2-HMAC-SHA256, 100,000 iterations, 32-byte output
    - CSPRNG salt generation

The iteration count is part of the on-disk contract: the envelope does
not record it, so changing it makes existing vaults unreadable.
"""

from __future__ import annotations

import secrets
from typing import Final, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

PBKDF2_ITERATIONS: Final[int] = 100_000
KEY_LENGTH: Final[int] = 32  # AES-256
SALT_SIZE: Final[int] = 16

PasswordMaterial = Union[str, bytes, bytearray]


def generate_salt() -> bytes:
    """
    Generate a fresh random salt for a new vault file.

    Returns:
        16 bytes from the OS CSPRNG
    """
    return secrets.token_bytes(SALT_SIZE)


def derive_key(
    password: PasswordMaterial,
    salt: bytes,
    length: int = KEY_LENGTH,
) -> bytes:
    """
    Derive a key from password using PBKDF2-HMAC-SHA256.

    Deterministic: the same (password, salt) always yields the same key,
    which is what lets a vault be reopened and its salt be reused.

    Args:
        password: User password, as text or as a UTF-8 buffer
        salt: Salt stored at the head of the vault file
        length: Output key length

    Returns:
        Derived key bytes
    """
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be exactly {SALT_SIZE} bytes")

    if isinstance(password, str):
        password = password.encode("utf-8")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password)
