"""
Lockbox - A Local Encrypted Secrets Vault
=========================================

Named string credentials stored in a single password-protected file.

Security Notice:
- No secrets are logged
- Fail-closed decryption (AES-256-GCM)
- Passwords cached only in the OS keyring
"""

from lockbox.core.config import LockboxConfig
from lockbox.core.logging import get_secure_logger
from lockbox.core.errors import (
    LockboxError,
    VaultIOError,
    FormatError,
    PayloadError,
    AuthenticationError,
    CredentialCacheError,
    MissingCredentialError,
    EntryNotFoundError,
)
from lockbox.utils.validators import ValidationError
from lockbox.core.credentials import (
    KeyringCredentialCache,
    MemoryCredentialCache,
    StaticPasswordPrompt,
    TerminalPasswordPrompt,
    vault_identity,
)
from lockbox.core.vault import EntryStore, SessionTracker, VaultManager, VaultSession

__version__ = "0.1.0"

__all__ = [
    "LockboxConfig",
    "get_secure_logger",
    "LockboxError",
    "VaultIOError",
    "FormatError",
    "PayloadError",
    "AuthenticationError",
    "CredentialCacheError",
    "MissingCredentialError",
    "EntryNotFoundError",
    "ValidationError",
    "KeyringCredentialCache",
    "MemoryCredentialCache",
    "StaticPasswordPrompt",
    "TerminalPasswordPrompt",
    "vault_identity",
    "EntryStore",
    "SessionTracker",
    "VaultManager",
    "VaultSession",
    "__version__",
]
