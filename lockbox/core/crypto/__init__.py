"""
Lockbox Cryptographic Core
==========================

Password-derived keys and authenticated encryption for vault files.

Architecture:
    1. PBKDF2-HMAC-SHA256 (100,000 iterations): password + salt -> key
    2. AES-256-GCM: authenticated seal/open of the entry set

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from lockbox.core.crypto.aes_gcm import (
    AesGcmCipher,
    AES_KEY_SIZE,
    AES_NONCE_SIZE,
    AES_TAG_SIZE,
)
from lockbox.core.crypto.kdf import (
    derive_key,
    generate_salt,
    PBKDF2_ITERATIONS,
    SALT_SIZE,
)

__all__ = [
    "AesGcmCipher",
    "AES_KEY_SIZE",
    "AES_NONCE_SIZE",
    "AES_TAG_SIZE",
    "derive_key",
    "generate_salt",
    "PBKDF2_ITERATIONS",
    "SALT_SIZE",
]
