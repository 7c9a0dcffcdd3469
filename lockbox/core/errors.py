"""
Lockbox Error Taxonomy
======================

Every failure raised by the vault engine derives from ``LockboxError``.

Propagation policy:
    - FormatError / AuthenticationError: always surface to the caller
    - CredentialCacheError: soft, logged and replaced by a prompt
    - ValidationError: reported per item, never aborts a batch import

Security Notice:
    Messages carry names and paths only, never secret values.
"""

from __future__ import annotations


class LockboxError(Exception):
    """Base class for all vault engine errors."""
    pass


class VaultIOError(LockboxError, OSError):
    """Raised when a vault, pointer or export file cannot be read or written."""
    pass


class FormatError(LockboxError):
    """Raised when a vault envelope is truncated or undecodable."""
    pass


class PayloadError(FormatError):
    """Raised when a decrypted blob is not a valid entry mapping."""
    pass


class AuthenticationError(LockboxError):
    """
    Raised when authenticated decryption fails.

    A wrong password and a tampered/corrupted file are indistinguishable
    by design; both end up here.
    """

    def __init__(self, message: str = "Authentication failed", attempts: int = 1) -> None:
        super().__init__(message)
        self.attempts = attempts


class CredentialCacheError(LockboxError):
    """Raised when the credential backend fails to set, get or delete."""
    pass


class MissingCredentialError(CredentialCacheError):
    """Raised when a save finds no password for the vault."""
    pass


class EntryNotFoundError(LockboxError, KeyError):
    """Raised when an entry name is not present in the vault."""

    def __str__(self) -> str:
        # KeyError.__str__ wraps the message in quotes
        return str(self.args[0]) if self.args else ""
