"""
Lockbox Vault Engine
====================

Encrypted vault files and the entry sets they hold.

Components:
- envelope.py: on-disk salt | nonce | ciphertext container
- session.py: load/save cycle with bounded unlock retries
- entries.py: in-memory entry set and its mutation rules
- tracker.py: last-active vault pointer and credential eviction
- manager.py: front-end facade
"""

from lockbox.core.vault.envelope import VaultEnvelope, decode, encode
from lockbox.core.vault.entries import EntryStore, ImportDocument, ImportReport
from lockbox.core.vault.session import UnlockState, VaultSession
from lockbox.core.vault.tracker import PointerFile, SessionTracker
from lockbox.core.vault.manager import VaultManager

__all__ = [
    "VaultEnvelope",
    "decode",
    "encode",
    "EntryStore",
    "ImportDocument",
    "ImportReport",
    "UnlockState",
    "VaultSession",
    "PointerFile",
    "SessionTracker",
    "VaultManager",
]
