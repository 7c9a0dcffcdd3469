"""
Vault Session
=============

Load/save cycle of one vault file.

Load Flow:
    1. Missing file -> prompt for a new password, cache it, save an
       empty vault so the file exists before returning
    2. Decode envelope (FormatError if malformed)
    3. Unlock state machine:

           AWAIT_CREDENTIAL -> ATTEMPT -> SUCCESS
                                  |
                                  +-> RETRY (evict cache, re-prompt)
                                  |     -> ATTEMPT ...
                                  +-> FAILED after max_attempts

    4. Decode the plaintext into an entry set (PayloadError if invalid)

Save Flow:
    1. Password from the credential cache (fatal if absent), unless this
       session already unlocked the file and the on-disk salt is unchanged
    2. Reuse the on-disk salt, or generate one for a new file
    3. Serialize, derive key, fresh random nonce, seal
    4. Atomic write (temp file + rename)

Security Notes:
    - Password bytes are wiped right after key derivation
    - A nonce is never reused: every seal draws a new one
    - Concurrent writers in separate processes are not coordinated; the
      last rename wins
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Final, Optional

from lockbox.core.credentials.cache import CredentialCache, vault_identity
from lockbox.core.credentials.prompt import PasswordPrompt
from lockbox.core.crypto import AesGcmCipher, derive_key, generate_salt
from lockbox.core.errors import (
    AuthenticationError,
    CredentialCacheError,
    MissingCredentialError,
    PayloadError,
)
from lockbox.core.memory import ZeroizeContext, password_buffer
from lockbox.core.vault.entries import EntryStore
from lockbox.core.vault.envelope import (
    VaultEnvelope,
    read_envelope,
    read_salt,
    write_envelope,
)
from lockbox.utils.paths import normalize_path
from lockbox.utils.validators import validate_new_password

DEFAULT_MAX_ATTEMPTS: Final[int] = 3

NEW_VAULT_PROMPT: Final[str] = "Enter password for new vault: "
UNLOCK_PROMPT: Final[str] = "Enter password to decrypt vault: "


class UnlockState(Enum):
    """States of the bounded unlock loop."""
    AWAIT_CREDENTIAL = "AWAIT_CREDENTIAL"
    ATTEMPT = "ATTEMPT"
    RETRY = "RETRY"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


def serialize_entries(entries: Dict[str, str]) -> bytes:
    """Serialize an entry set to the plaintext blob that gets sealed."""
    return json.dumps(entries, sort_keys=True, ensure_ascii=False).encode("utf-8")


def deserialize_entries(blob: bytes) -> Dict[str, str]:
    """
    Parse a decrypted blob back into an entry set.

    Raises:
        PayloadError: If the blob is not a JSON object of strings
    """
    try:
        raw = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as err:
        raise PayloadError(f"Failed to decode vault data: {err}") from err

    if not isinstance(raw, dict):
        raise PayloadError("Failed to decode vault data: not an entry mapping")
    for name, value in raw.items():
        if not isinstance(value, str):
            raise PayloadError(
                f"Failed to decode vault data: value of '{name}' is not a string"
            )
    return raw


class VaultSession:
    """
    Orchestrates loading and saving of one vault file.

    Usage:
        session = VaultSession(path, cache, prompt)
        store = session.load()
        store.add("gmail", "hunter2")   # saved immediately

    Args:
        path: Vault file location
        cache: Credential cache holding the vault password
        prompt: Password input used when the cache has nothing usable
        max_attempts: Number of decryption attempts before giving up
    """

    __slots__ = (
        "_path", "_identity", "_cache", "_prompt", "_max_attempts",
        "_cipher", "_salt", "_key", "_log",
    )

    def __init__(
        self,
        path: Path | str,
        cache: CredentialCache,
        prompt: PasswordPrompt,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._path = normalize_path(path)
        self._identity = vault_identity(self._path)
        self._cache = cache
        self._prompt = prompt
        self._max_attempts = max_attempts
        self._cipher = AesGcmCipher()
        # Key unlocked during this session, valid only for _salt
        self._salt: Optional[bytes] = None
        self._key: Optional[bytes] = None
        self._log = logging.getLogger("lockbox.vault")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def identity(self) -> str:
        return self._identity

    def __repr__(self) -> str:
        return f"VaultSession(path={str(self._path)!r})"

    # ------------------------------------------------------------------
    # Credential helpers
    # ------------------------------------------------------------------

    def _cache_get(self) -> Optional[str]:
        try:
            return self._cache.get(self._identity)
        except CredentialCacheError as err:
            self._log.warning("Credential cache unavailable, prompting instead: %s", err)
            return None

    def _cache_set(self, password: str) -> None:
        try:
            self._cache.set(self._identity, password)
        except CredentialCacheError as err:
            self._log.warning("Failed to cache vault password: %s", err)

    def _cache_evict(self) -> None:
        try:
            self._cache.delete(self._identity)
        except CredentialCacheError as err:
            self._log.warning("Failed to evict cached vault password: %s", err)

    def _derive(self, password: str, salt: bytes) -> bytes:
        secret = password_buffer(password)
        with ZeroizeContext(secret):
            return derive_key(secret, salt)

    def _remember_key(self, salt: bytes, key: bytes) -> None:
        self._salt = salt
        self._key = key

    def lock(self) -> None:
        """Drop the key unlocked by this session."""
        self._salt = None
        self._key = None

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self) -> EntryStore:
        """
        Open the vault, creating it if the file does not exist.

        Returns:
            EntryStore whose mutations are saved back to this vault

        Raises:
            FormatError: If the file is malformed or decrypts to garbage
            AuthenticationError: If every unlock attempt fails
            VaultIOError: If the file or the password prompt fails
            ValidationError: If a new vault is given an empty password
        """
        envelope = read_envelope(self._path)
        if envelope is None:
            entries = self._create()
        else:
            entries = self._unlock(envelope)
        return EntryStore(entries, save=self.save)

    def _create(self) -> Dict[str, str]:
        self._log.info("Vault file not found, creating new vault at %s", self._path)
        password = validate_new_password(self._prompt(NEW_VAULT_PROMPT))
        self._cache_set(password)

        salt = generate_salt()
        self._remember_key(salt, self._derive(password, salt))
        del password

        entries: Dict[str, str] = {}
        self.save(entries)
        return entries

    def _unlock(self, envelope: VaultEnvelope) -> Dict[str, str]:
        state = UnlockState.AWAIT_CREDENTIAL
        attempts = 0
        password: Optional[str] = None
        plaintext = b""

        while state is not UnlockState.SUCCESS:
            if state is UnlockState.AWAIT_CREDENTIAL:
                password = self._cache_get()
                if password is None:
                    password = self._prompt(UNLOCK_PROMPT)
                    self._cache_set(password)
                state = UnlockState.ATTEMPT

            elif state is UnlockState.ATTEMPT:
                attempts += 1
                key = self._derive(password, envelope.salt)
                password = None
                try:
                    plaintext = self._cipher.open(key, envelope.nonce, envelope.ciphertext)
                except AuthenticationError:
                    self._log.warning(
                        "Decryption failed for %s (attempt %d of %d). Possibly wrong password.",
                        self._path, attempts, self._max_attempts,
                    )
                    self._cache_evict()
                    state = (
                        UnlockState.RETRY
                        if attempts < self._max_attempts
                        else UnlockState.FAILED
                    )
                else:
                    self._remember_key(envelope.salt, key)
                    state = UnlockState.SUCCESS

            elif state is UnlockState.RETRY:
                password = self._prompt(UNLOCK_PROMPT)
                self._cache_set(password)
                state = UnlockState.ATTEMPT

            elif state is UnlockState.FAILED:
                raise AuthenticationError(
                    f"Failed to decrypt vault {self._path} after {attempts} attempt(s)",
                    attempts=attempts,
                )

        entries = deserialize_entries(plaintext)
        self._log.info("Vault unlocked: %s (%d entries)", self._path, len(entries))
        return entries

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def _key_for(self, salt: bytes) -> bytes:
        if self._key is not None and self._salt == salt:
            return self._key

        try:
            password = self._cache.get(self._identity)
        except CredentialCacheError as err:
            raise MissingCredentialError(
                f"No password available for {self._path}: {err}"
            ) from err
        if password is None:
            raise MissingCredentialError(f"No password found in keyring for {self._path}")

        key = self._derive(password, salt)
        del password
        self._remember_key(salt, key)
        return key

    def save(self, entries: Dict[str, str]) -> None:
        """
        Encrypt ``entries`` and atomically rewrite the vault file.

        Raises:
            MissingCredentialError: If no password is available
            VaultIOError: If the file cannot be written
        """
        salt = read_salt(self._path) or self._salt or generate_salt()
        key = self._key_for(salt)

        nonce = self._cipher.generate_nonce()
        ciphertext = self._cipher.seal(key, nonce, serialize_entries(entries))
        write_envelope(self._path, VaultEnvelope(salt=salt, nonce=nonce, ciphertext=ciphertext))
        self._log.debug("Saved vault %s (%d entries)", self._path, len(entries))
