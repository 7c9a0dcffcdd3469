"""
Entry Store
===========

In-memory name -> secret mapping of an open vault and its mutation
contract.

Rules:
    - Names and values are non-empty strings
    - ``add`` never overwrites an existing name
    - Every successful mutation is saved before the call returns; if the
      save fails the mutation is rolled back and the error propagates
    - Masked listings never contain real characters of a secret

Security Note:
    Values are never logged. Export writes plaintext on explicit request
    only.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from lockbox.core.errors import EntryNotFoundError, VaultIOError
from lockbox.utils.paths import atomic_write_bytes
from lockbox.utils.validators import ValidationError, validate_entry

MASK_CHAR = "*"

SaveCallback = Callable[[Dict[str, str]], None]


def mask_value(value: str) -> str:
    """Return a placeholder with the same length as ``value``."""
    return MASK_CHAR * len(value)


@dataclass
class ImportDocument:
    """
    Typed result of parsing an import file.

    Attributes:
        entries: Keys whose values are plain strings, in document order
        rejected: Keys whose values are not strings, with the reason
    """

    entries: Dict[str, str] = field(default_factory=dict)
    rejected: Dict[str, ValidationError] = field(default_factory=dict)

    @classmethod
    def parse(cls, data: bytes | str) -> "ImportDocument":
        """
        Parse a flat JSON object of strings.

        Raises:
            ValidationError: If the document is not valid JSON or is not
                a JSON object
        """
        try:
            raw: Any = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as err:
            raise ValidationError(f"Invalid JSON format: {err}") from err

        if not isinstance(raw, dict):
            raise ValidationError(
                "Import document must be a JSON object of name/value strings"
            )

        document = cls()
        for name, value in raw.items():
            if isinstance(value, str):
                document.entries[name] = value
            else:
                document.rejected[name] = ValidationError(
                    f"Invalid value for key '{name}': only flat key-value "
                    f"strings are supported (got {type(value).__name__})"
                )
        return document


@dataclass
class ImportReport:
    """Outcome of a batch import."""

    added: List[str] = field(default_factory=list)
    errors: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class EntryStore:
    """
    Mutable entry set of one open vault.

    The store does not know how to encrypt; it hands a snapshot of its
    entries to ``save`` after every mutation.

    Usage:
        store = session.load()
        store.add("github", "token123")
        store.get("github")
        for name, shown in store.list():
            ...
    """

    __slots__ = ("_entries", "_save", "_log")

    def __init__(
        self,
        entries: Optional[Mapping[str, str]] = None,
        save: Optional[SaveCallback] = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            entries: Initial entries (copied)
            save: Called with the full entry set after each mutation
        """
        self._entries: Dict[str, str] = dict(entries or {})
        self._save = save
        self._log = logging.getLogger("lockbox.entries")

    def _persist(self) -> None:
        if self._save is not None:
            self._save(dict(self._entries))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, name: str, value: str) -> None:
        """
        Add a new entry and save the vault.

        Raises:
            ValidationError: If name or value is empty, or name exists
        """
        name, value = validate_entry(name, value)
        if name in self._entries:
            raise ValidationError(f"Entry with name '{name}' already exists")

        self._entries[name] = value
        try:
            self._persist()
        except Exception:
            del self._entries[name]
            raise
        self._log.info("Added entry %r", name)

    def remove(self, name: str) -> None:
        """
        Delete an entry and save the vault.

        Raises:
            EntryNotFoundError: If the entry does not exist
        """
        if name not in self._entries:
            raise EntryNotFoundError(f"Entry with name '{name}' doesn't exist")

        value = self._entries.pop(name)
        try:
            self._persist()
        except Exception:
            self._entries[name] = value
            raise
        self._log.info("Removed entry %r", name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, name: str) -> str:
        """
        Return the secret stored under ``name``.

        Raises:
            EntryNotFoundError: If the entry does not exist
        """
        try:
            return self._entries[name]
        except KeyError:
            raise EntryNotFoundError(f"'{name}' doesn't exist in vault") from None

    def list(self, reveal: bool = False) -> List[Tuple[str, str]]:
        """
        Return ``(name, display_value)`` pairs sorted by name.

        Unless ``reveal`` is set, each value is replaced by a mask of the
        same length.
        """
        return [
            (name, value if reveal else mask_value(value))
            for name, value in sorted(self._entries.items())
        ]

    def names(self) -> List[str]:
        return sorted(self._entries)

    def snapshot(self) -> Dict[str, str]:
        """Return a copy of all entries."""
        return dict(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        """Safe representation without values."""
        return f"EntryStore(entries={len(self._entries)})"

    # ------------------------------------------------------------------
    # Plaintext escape hatches
    # ------------------------------------------------------------------

    def export(self, path: Path | str) -> Path:
        """
        Write all entries as a flat JSON object to ``path``.

        The file is NOT encrypted. It is created with owner-only
        permissions and the path is used exactly as given.

        Raises:
            VaultIOError: If the file cannot be written
        """
        payload = json.dumps(self._entries, indent="\t", ensure_ascii=False)
        try:
            target = atomic_write_bytes(path, payload.encode("utf-8"))
        except OSError as err:
            raise VaultIOError(f"Failed to export vault to {path}: {err}") from err
        self._log.info("Exported %d entries to %s", len(self._entries), target)
        return target

    def import_json(self, data: bytes | str) -> ImportReport:
        """
        Add every entry of a flat JSON object.

        Non-string values and entries that ``add`` rejects are reported
        in the result and do not stop the remaining entries.

        Raises:
            ValidationError: If the document is not a JSON object
        """
        document = ImportDocument.parse(data)
        report = ImportReport(errors=dict(document.rejected))

        for name, value in document.entries.items():
            try:
                self.add(name, value)
            except ValidationError as err:
                report.errors[name] = err
                self._log.warning("Skipped import of %r: %s", name, err)
            else:
                report.added.append(name)

        for name in document.rejected:
            self._log.warning("Rejected import of %r: value is not a string", name)

        self._log.info(
            "Imported %d entries (%d rejected)", len(report.added), len(report.errors)
        )
        return report

    def import_file(self, path: Path | str) -> ImportReport:
        """
        Import entries from a JSON file.

        Raises:
            VaultIOError: If the file cannot be read
            ValidationError: If the document is not a JSON object
        """
        try:
            data = Path(path).read_bytes()
        except OSError as err:
            raise VaultIOError(f"Failed to read import file {path}: {err}") from err
        return self.import_json(data)
