"""
Tests for credential caches and password prompts.
"""
import getpass

import pytest

from lockbox.core.credentials import (
    CredentialCache,
    KeyringCredentialCache,
    MemoryCredentialCache,
    ScriptedPasswordPrompt,
    StaticPasswordPrompt,
    TerminalPasswordPrompt,
    vault_identity,
)
from lockbox.core.errors import CredentialCacheError, VaultIOError


class TestIdentity:

    def test_prefix_and_absolute_path(self, tmp_path):
        identity = vault_identity(tmp_path / "a.vault")
        assert identity == f"vault:{(tmp_path / 'a.vault').resolve()}"

    def test_relative_paths_resolve(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert vault_identity("a.vault") == vault_identity(tmp_path / "a.vault")

    def test_distinct_paths_distinct_identities(self, tmp_path):
        assert vault_identity(tmp_path / "a.vault") != vault_identity(tmp_path / "b.vault")


class TestMemoryCache:

    def test_set_get_delete(self):
        cache = MemoryCredentialCache()
        cache.set("vault:/a", "pw")
        assert cache.get("vault:/a") == "pw"
        cache.delete("vault:/a")
        assert cache.get("vault:/a") is None

    def test_delete_missing_is_noop(self):
        MemoryCredentialCache().delete("vault:/absent")

    def test_repr_hides_passwords(self):
        assert "pw" not in repr(MemoryCredentialCache({"vault:/a": "pw"}))

    def test_satisfies_protocol(self):
        assert isinstance(MemoryCredentialCache(), CredentialCache)
        assert isinstance(KeyringCredentialCache(), CredentialCache)


class TestKeyringCache:

    def test_round_trip(self, memory_keyring):
        cache = KeyringCredentialCache(service="lockbox-test")
        cache.set("vault:/a", "pw")
        assert memory_keyring.store[("lockbox-test", "vault:/a")] == "pw"
        assert cache.get("vault:/a") == "pw"

    def test_missing_is_none(self, memory_keyring):
        assert KeyringCredentialCache().get("vault:/absent") is None

    def test_delete(self, memory_keyring):
        cache = KeyringCredentialCache()
        cache.set("vault:/a", "pw")
        cache.delete("vault:/a")
        assert cache.get("vault:/a") is None

    def test_delete_missing_is_noop(self, memory_keyring):
        KeyringCredentialCache().delete("vault:/absent")

    @pytest.mark.parametrize("operation", [
        lambda cache: cache.set("vault:/a", "pw"),
        lambda cache: cache.get("vault:/a"),
        lambda cache: cache.delete("vault:/a"),
    ])
    def test_backend_failures_are_wrapped(self, broken_keyring, operation):
        with pytest.raises(CredentialCacheError):
            operation(KeyringCredentialCache())

    def test_service_name(self):
        assert KeyringCredentialCache().service == "lockbox"


class TestPrompts:

    def test_static(self):
        prompt = StaticPasswordPrompt("pw")
        assert prompt("first") == prompt("second") == "pw"
        assert "pw" not in repr(prompt)

    def test_scripted(self):
        prompt = ScriptedPasswordPrompt(["one", "two"])
        assert prompt("a") == "one"
        assert prompt("b") == "two"
        assert prompt.prompts == ["a", "b"]
        with pytest.raises(VaultIOError):
            prompt("c")
        assert prompt.calls == 3

    def test_terminal_uses_getpass(self, monkeypatch):
        seen = []
        monkeypatch.setattr(getpass, "getpass", lambda text: seen.append(text) or "pw")
        assert TerminalPasswordPrompt()("Password: ") == "pw"
        assert seen == ["Password: "]

    def test_terminal_closed_input(self, monkeypatch):
        def closed(text):
            raise EOFError()

        monkeypatch.setattr(getpass, "getpass", closed)
        with pytest.raises(VaultIOError):
            TerminalPasswordPrompt()("Password: ")
