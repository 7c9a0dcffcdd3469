"""
AES-256-GCM Authenticated Encryption
====================================

Seals and opens the serialized entry set of a vault.

Security Properties:
    - 256-bit key derived from the vault password
    - 96-bit random nonce, fresh for every seal
    - 128-bit authentication tag appended to the ciphertext
    - No associated data

WARNING:
    - Never reuse (key, nonce) pairs
    - ``open`` verifies the tag before returning any plaintext
"""

from __future__ import annotations

import secrets
from typing import Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from lockbox.core.errors import AuthenticationError

AES_KEY_SIZE: Final[int] = 32  # 256 bits
AES_NONCE_SIZE: Final[int] = 12  # 96 bits (NIST recommended for GCM)
AES_TAG_SIZE: Final[int] = 16  # 128 bits


class AesGcmCipher:
    """
    AES-256-GCM sealing with caller-supplied key and nonce.

    Usage:
        cipher = AesGcmCipher()
        nonce = cipher.generate_nonce()
        ciphertext = cipher.seal(key, nonce, plaintext)
        plaintext = cipher.open(key, nonce, ciphertext)

    ``open`` raises AuthenticationError for a wrong key and for
    tampered data alike; the two cases are not distinguishable.
    """

    __slots__ = ()

    @staticmethod
    def generate_nonce() -> bytes:
        """
        Generate a cryptographically secure random nonce.

        Returns:
            12 bytes of cryptographic random data
        """
        return secrets.token_bytes(AES_NONCE_SIZE)

    @staticmethod
    def _check_params(key: bytes, nonce: bytes) -> None:
        if len(key) != AES_KEY_SIZE:
            raise ValueError(f"Key must be exactly {AES_KEY_SIZE} bytes")
        if len(nonce) != AES_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {AES_NONCE_SIZE} bytes")

    def seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        """
        Encrypt and authenticate plaintext.

        Args:
            key: 32-byte key
            nonce: 12-byte nonce, never used before with this key
            plaintext: Data to encrypt (can be empty)

        Returns:
            Ciphertext with the authentication tag appended

        Raises:
            ValueError: If key or nonce has the wrong size
        """
        self._check_params(key, nonce)
        return AESGCM(key).encrypt(nonce, plaintext, None)

    def open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        """
        Verify and decrypt ciphertext.

        Args:
            key: 32-byte key
            nonce: The nonce used during sealing
            ciphertext: Encrypted data with authentication tag

        Returns:
            Decrypted plaintext bytes

        Raises:
            ValueError: If key or nonce has the wrong size
            AuthenticationError: If the tag does not verify
        """
        self._check_params(key, nonce)
        if len(ciphertext) < AES_TAG_SIZE:
            raise AuthenticationError("Ciphertext too short (missing authentication tag)")

        try:
            return AESGCM(key).decrypt(nonce, ciphertext, None)
        except InvalidTag as err:
            raise AuthenticationError(
                "Decryption failed: wrong password or corrupted vault"
            ) from err
