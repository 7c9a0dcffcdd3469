"""
Shared fixtures for the Lockbox test suite.

No test touches the real OS keyring: keyring-backed tests install an
in-memory backend for their duration.
"""
import pytest
import keyring
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordDeleteError

from lockbox.core.config import LockboxConfig, PathConfig
from lockbox.core.credentials import MemoryCredentialCache, StaticPasswordPrompt
from lockbox.core.errors import CredentialCacheError
from lockbox.core.vault import VaultSession


class InMemoryKeyring(KeyringBackend):
    """Keyring backend holding passwords in a dict."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.store = {}

    def set_password(self, service, username, password):
        self.store[(service, username)] = password

    def get_password(self, service, username):
        return self.store.get((service, username))

    def delete_password(self, service, username):
        try:
            del self.store[(service, username)]
        except KeyError:
            raise PasswordDeleteError("Password not found")


class BrokenKeyring(KeyringBackend):
    """Keyring backend whose every call fails."""

    priority = 1

    def set_password(self, service, username, password):
        raise KeyringError("backend locked")

    def get_password(self, service, username):
        raise KeyringError("backend locked")

    def delete_password(self, service, username):
        raise KeyringError("backend locked")


class FailingCache:
    """Credential cache whose backend is unavailable."""

    def __init__(self):
        self.calls = []

    def set(self, identity, password):
        self.calls.append(("set", identity))
        raise CredentialCacheError("cache offline")

    def get(self, identity):
        self.calls.append(("get", identity))
        raise CredentialCacheError("cache offline")

    def delete(self, identity):
        self.calls.append(("delete", identity))
        raise CredentialCacheError("cache offline")


PASSWORD = "correctpass"


@pytest.fixture
def cache():
    return MemoryCredentialCache()


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / "test.vault"


@pytest.fixture
def new_vault(vault_path, cache):
    """A freshly created vault protected by PASSWORD, with its store."""
    session = VaultSession(vault_path, cache, StaticPasswordPrompt(PASSWORD))
    store = session.load()
    return session, store


@pytest.fixture
def config(tmp_path):
    return LockboxConfig(
        paths=PathConfig(config_dir=tmp_path / "config", log_dir=tmp_path / "logs"),
    )


@pytest.fixture
def memory_keyring():
    previous = keyring.get_keyring()
    backend = InMemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


@pytest.fixture
def broken_keyring():
    previous = keyring.get_keyring()
    keyring.set_keyring(BrokenKeyring())
    yield
    keyring.set_keyring(previous)
