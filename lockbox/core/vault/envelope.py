"""
Vault Envelope Format
=====================

Binary container for an encrypted vault file.

File Format:
    offset 0  : salt        (16 bytes)
    offset 16 : nonce       (12 bytes)
    offset 28 : ciphertext  (remainder, includes the 16-byte GCM tag)

There are no length prefixes: salt and nonce are fixed-size and the
ciphertext consumes the rest of the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional

from lockbox.core.crypto import AES_NONCE_SIZE, SALT_SIZE
from lockbox.core.errors import FormatError, VaultIOError
from lockbox.utils.paths import atomic_write_bytes

HEADER_SIZE: Final[int] = SALT_SIZE + AES_NONCE_SIZE  # 28


@dataclass(frozen=True, slots=True)
class VaultEnvelope:
    """
    Immutable on-disk representation of a vault.

    Attributes:
        salt: Key derivation salt, stable for the lifetime of the file
        nonce: AES-GCM nonce, fresh for every save
        ciphertext: Sealed entry set with appended authentication tag
    """

    salt: bytes
    nonce: bytes
    ciphertext: bytes

    def __post_init__(self) -> None:
        if len(self.salt) != SALT_SIZE:
            raise FormatError(f"Salt must be exactly {SALT_SIZE} bytes")
        if len(self.nonce) != AES_NONCE_SIZE:
            raise FormatError(f"Nonce must be exactly {AES_NONCE_SIZE} bytes")

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"VaultEnvelope(ciphertext_len={len(self.ciphertext)})"

    def to_bytes(self) -> bytes:
        """Serialize to the fixed-order file layout."""
        return encode(self.salt, self.nonce, self.ciphertext)

    @classmethod
    def from_bytes(cls, data: bytes) -> "VaultEnvelope":
        """
        Deserialize from file content.

        Raises:
            FormatError: If data is shorter than salt + nonce
        """
        return decode(data)


def encode(salt: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    """Concatenate salt, nonce and ciphertext."""
    return b"".join((salt, nonce, ciphertext))


def decode(data: bytes) -> VaultEnvelope:
    """
    Split file content into its salt, nonce and ciphertext.

    Raises:
        FormatError: If data is shorter than 28 bytes
    """
    if len(data) < HEADER_SIZE:
        raise FormatError(
            f"Vault file is too short or corrupted: {len(data)} bytes "
            f"(minimum {HEADER_SIZE})"
        )
    return VaultEnvelope(
        salt=bytes(data[:SALT_SIZE]),
        nonce=bytes(data[SALT_SIZE:HEADER_SIZE]),
        ciphertext=bytes(data[HEADER_SIZE:]),
    )


def read_envelope(path: Path | str) -> Optional[VaultEnvelope]:
    """
    Read and decode the envelope stored at ``path``.

    Returns:
        The envelope, or None if the file does not exist

    Raises:
        FormatError: If the file is malformed
        VaultIOError: If the file exists but cannot be read
    """
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        return None
    except OSError as err:
        raise VaultIOError(f"Failed to read vault file {path}: {err}") from err
    return decode(data)


def read_salt(path: Path | str) -> Optional[bytes]:
    """
    Return the salt of an existing vault file, if it has a usable one.

    A missing or truncated file yields None so that the caller starts a
    fresh salt.
    """
    try:
        with open(path, "rb") as handle:
            salt = handle.read(SALT_SIZE)
    except FileNotFoundError:
        return None
    except OSError as err:
        raise VaultIOError(f"Failed to read vault file {path}: {err}") from err
    return salt if len(salt) == SALT_SIZE else None


def write_envelope(path: Path | str, envelope: VaultEnvelope) -> Path:
    """
    Atomically replace the vault file with ``envelope``.

    Raises:
        VaultIOError: If the file cannot be written
    """
    try:
        return atomic_write_bytes(path, envelope.to_bytes())
    except OSError as err:
        raise VaultIOError(f"Failed to write vault file {path}: {err}") from err
