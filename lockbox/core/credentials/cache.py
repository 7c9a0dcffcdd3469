"""
Credential Cache
================

Stores vault passwords between invocations so the user is not prompted
on every command.

Backends:
    - KeyringCredentialCache: the OS secret store via ``keyring``
      (Secret Service, macOS Keychain, Windows Credential Locker)
    - MemoryCredentialCache: process-local dictionary for tests and
      headless automation

Every backend failure is raised as CredentialCacheError. Callers treat
it as soft: they log a warning and fall back to an interactive prompt.

Security Note:
    Passwords are never logged. Only identities (which embed the vault
    path) appear in log messages.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Final, Optional, Protocol, runtime_checkable

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from lockbox.core.errors import CredentialCacheError
from lockbox.utils.paths import normalize_path

DEFAULT_SERVICE: Final[str] = "lockbox"
IDENTITY_PREFIX: Final[str] = "vault:"


def vault_identity(path: str | Path) -> str:
    """
    Derive the cache identity for a vault file.

    The path is made absolute and resolved first, so two spellings of the
    same file share one identity and distinct files never collide.
    """
    return f"{IDENTITY_PREFIX}{normalize_path(path)}"


@runtime_checkable
class CredentialCache(Protocol):
    """Capability interface for password caching."""

    def set(self, identity: str, password: str) -> None:
        """Store ``password`` under ``identity``, replacing any previous value."""
        ...

    def get(self, identity: str) -> Optional[str]:
        """Return the cached password, or None if nothing is stored."""
        ...

    def delete(self, identity: str) -> None:
        """Remove the cached password. Absent identities are not an error."""
        ...


class KeyringCredentialCache:
    """
    Credential cache backed by the OS keyring.

    Usage:
        cache = KeyringCredentialCache()
        cache.set(vault_identity(path), password)
        password = cache.get(vault_identity(path))
    """

    __slots__ = ("_service", "_log")

    def __init__(self, service: str = DEFAULT_SERVICE) -> None:
        self._service = service
        self._log = logging.getLogger("lockbox.credentials")

    @property
    def service(self) -> str:
        return self._service

    def set(self, identity: str, password: str) -> None:
        try:
            keyring.set_password(self._service, identity, password)
        except KeyringError as err:
            raise CredentialCacheError(
                f"Failed to store password in keyring for {identity}: {err}"
            ) from err
        self._log.debug("Cached password for %s", identity)

    def get(self, identity: str) -> Optional[str]:
        try:
            return keyring.get_password(self._service, identity)
        except KeyringError as err:
            raise CredentialCacheError(
                f"Failed to read password from keyring for {identity}: {err}"
            ) from err

    def delete(self, identity: str) -> None:
        try:
            keyring.delete_password(self._service, identity)
        except PasswordDeleteError:
            # Nothing stored under this identity
            return
        except KeyringError as err:
            raise CredentialCacheError(
                f"Failed to clear password from keyring for {identity}: {err}"
            ) from err
        self._log.debug("Evicted cached password for %s", identity)

    def __repr__(self) -> str:
        return f"KeyringCredentialCache(service={self._service!r})"


class MemoryCredentialCache:
    """
    Process-local credential cache.

    Holds passwords only for the lifetime of the object. Useful where
    no OS keyring is available and in tests.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Dict[str, str]] = None) -> None:
        self._entries: Dict[str, str] = dict(entries or {})

    def set(self, identity: str, password: str) -> None:
        self._entries[identity] = password

    def get(self, identity: str) -> Optional[str]:
        return self._entries.get(identity)

    def delete(self, identity: str) -> None:
        self._entries.pop(identity, None)

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        """Safe representation without passwords."""
        return f"MemoryCredentialCache(entries={len(self._entries)})"
