"""
Vault Manager
=============

Entry point used by front ends (CLI, scripts). Ties together the
configuration, the pointer files, the session tracker and the vault
session.

Usage:
    manager = VaultManager(LockboxConfig.load())
    manager.select_vault("~/secrets.vault")
    store = manager.open()
    store.add("github", "token123")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from lockbox.core.config import LockboxConfig
from lockbox.core.credentials.cache import (
    CredentialCache,
    KeyringCredentialCache,
    vault_identity,
)
from lockbox.core.credentials.prompt import PasswordPrompt, TerminalPasswordPrompt
from lockbox.core.errors import VaultIOError
from lockbox.core.vault.entries import EntryStore
from lockbox.core.vault.session import VaultSession
from lockbox.core.vault.tracker import PointerFile, SessionTracker
from lockbox.utils.paths import normalize_path


class VaultManager:
    """
    Opens vaults on behalf of a front end.

    Args:
        config: Loaded configuration
        cache: Credential cache (default: OS keyring)
        prompt: Password input (default: terminal without echo)
    """

    __slots__ = ("_config", "_cache", "_prompt", "_current", "_tracker", "_log")

    def __init__(
        self,
        config: Optional[LockboxConfig] = None,
        cache: Optional[CredentialCache] = None,
        prompt: Optional[PasswordPrompt] = None,
    ) -> None:
        self._config = config or LockboxConfig.load()
        if cache is None:
            cache = KeyringCredentialCache(self._config.security.keyring_service)
        self._cache = cache
        self._prompt = prompt if prompt is not None else TerminalPasswordPrompt()
        self._current = PointerFile(self._config.paths.current_vault_file)
        self._tracker = SessionTracker(
            self._cache, PointerFile(self._config.paths.last_vault_file)
        )
        self._log = logging.getLogger("lockbox.manager")

    @property
    def config(self) -> LockboxConfig:
        return self._config

    @property
    def tracker(self) -> SessionTracker:
        return self._tracker

    def current_vault(self) -> Optional[Path]:
        """Return the vault recorded as current, if any."""
        return self._current.read()

    def select_vault(self, path: Path | str) -> Path:
        """Record ``path`` as the current vault and return its absolute form."""
        vault_path = normalize_path(path)
        self._current.write(vault_path)
        self._log.info("Switched current vault to %s", vault_path)
        return vault_path

    def session(self, path: Path | str) -> VaultSession:
        return VaultSession(
            path,
            self._cache,
            self._prompt,
            max_attempts=self._config.security.max_unlock_attempts,
        )

    def open(self, path: Optional[Path | str] = None) -> EntryStore:
        """
        Unlock a vault, creating it if needed.

        Switching away from the previously unlocked vault evicts that
        vault's cached password before the new one is loaded.

        Args:
            path: Vault to open (default: the current vault)

        Raises:
            VaultIOError: If no path is given and none is recorded
            FormatError, AuthenticationError: From loading the vault
        """
        if path is None:
            path = self.current_vault()
            if path is None:
                raise VaultIOError(
                    "No current vault recorded. Select a vault file first."
                )
        vault_path = normalize_path(path)

        try:
            previous = self._tracker.get_last_active_path()
        except VaultIOError as err:
            self._log.warning("Could not read last active vault: %s", err)
            previous = None
        self._tracker.reconcile_on_switch(previous, vault_path)

        store = self.session(vault_path).load()

        try:
            self._tracker.set_last_active_path(vault_path)
        except VaultIOError as err:
            self._log.warning("Failed to update last active vault: %s", err)
        return store

    def forget(self, path: Optional[Path | str] = None) -> None:
        """
        Evict the cached password of a vault (default: the current one).

        Raises:
            CredentialCacheError: If the backend fails
        """
        if path is None:
            path = self.current_vault()
            if path is None:
                return
        self._cache.delete(vault_identity(path))
        self._log.info("Forgot cached password for %s", path)
