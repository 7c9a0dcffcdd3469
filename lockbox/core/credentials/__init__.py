"""
Lockbox Credentials
===================

Where vault passwords come from: the credential cache (OS keyring) and
password prompts.
"""

from lockbox.core.credentials.cache import (
    CredentialCache,
    KeyringCredentialCache,
    MemoryCredentialCache,
    vault_identity,
)
from lockbox.core.credentials.prompt import (
    PasswordPrompt,
    ScriptedPasswordPrompt,
    StaticPasswordPrompt,
    TerminalPasswordPrompt,
)

__all__ = [
    "CredentialCache",
    "KeyringCredentialCache",
    "MemoryCredentialCache",
    "vault_identity",
    "PasswordPrompt",
    "ScriptedPasswordPrompt",
    "StaticPasswordPrompt",
    "TerminalPasswordPrompt",
]
