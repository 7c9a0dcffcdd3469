"""
Session Tracker
===============

Remembers which vault was active last and evicts the cached password of
a vault once the user switches away from it.

The pointer is a plain file holding one path as its entire content. It
is not a history: only the most recent vault is recorded.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, Optional

from lockbox.core.credentials.cache import CredentialCache, vault_identity
from lockbox.core.errors import CredentialCacheError, VaultIOError
from lockbox.utils.paths import atomic_write_bytes

LEGACY_PREFIX: Final[str] = "vault="


class PointerFile:
    """
    A file that records a single vault path.

    ``read`` also accepts the older ``vault=<path>`` line format.
    """

    __slots__ = ("_path",)

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[Path]:
        """
        Return the recorded vault path, or None if nothing is recorded.

        Raises:
            VaultIOError: If the pointer file exists but cannot be read
        """
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as err:
            raise VaultIOError(f"Failed to read pointer file {self._path}: {err}") from err

        for line in content.splitlines():
            line = line.strip()
            if line.startswith(LEGACY_PREFIX):
                line = line[len(LEGACY_PREFIX):].strip()
            if line:
                return Path(line)
        return None

    def write(self, vault_path: Path | str) -> None:
        """
        Record ``vault_path`` as the file's entire content.

        Raises:
            VaultIOError: If the pointer file cannot be written
        """
        try:
            atomic_write_bytes(self._path, str(vault_path).encode("utf-8"))
        except OSError as err:
            raise VaultIOError(f"Failed to write pointer file {self._path}: {err}") from err

    def clear(self) -> None:
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError as err:
            raise VaultIOError(f"Failed to clear pointer file {self._path}: {err}") from err

    def __repr__(self) -> str:
        return f"PointerFile({str(self._path)!r})"


class SessionTracker:
    """
    Session hygiene across vault switches.

    Usage:
        tracker = SessionTracker(cache, PointerFile(last_vault_file))
        tracker.activate(new_vault_path)
    """

    __slots__ = ("_cache", "_pointer", "_log")

    def __init__(self, cache: CredentialCache, pointer: PointerFile) -> None:
        self._cache = cache
        self._pointer = pointer
        self._log = logging.getLogger("lockbox.session")

    def get_last_active_path(self) -> Optional[Path]:
        return self._pointer.read()

    def set_last_active_path(self, path: Path | str) -> None:
        self._pointer.write(path)

    def reconcile_on_switch(
        self,
        old_path: Optional[Path | str],
        new_path: Path | str,
    ) -> bool:
        """
        Evict the cached password of ``old_path`` if it is not ``new_path``.

        Paths are compared by identity, so two spellings of the same file
        count as the same vault. The new vault's entry is never touched.

        Returns:
            True if an eviction was requested
        """
        if not old_path:
            return False

        old_identity = vault_identity(old_path)
        if old_identity == vault_identity(new_path):
            return False

        self._log.info("Clearing cached password for old vault: %s", old_path)
        try:
            self._cache.delete(old_identity)
        except CredentialCacheError as err:
            self._log.warning("Failed to clear old vault password: %s", err)
        return True

    def activate(self, new_path: Path | str) -> Optional[Path]:
        """
        Make ``new_path`` the active vault.

        Reads the last active path, evicts its password if the vault
        changed, then records ``new_path``.

        Returns:
            The previously active path, if any
        """
        try:
            previous = self.get_last_active_path()
        except VaultIOError as err:
            self._log.warning("Could not read last active vault: %s", err)
            previous = None

        self.reconcile_on_switch(previous, new_path)
        self.set_last_active_path(new_path)
        return previous
