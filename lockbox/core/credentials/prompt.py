"""
Password Prompts
================

Sources of interactively entered passwords.

A prompt is any callable ``prompt(text) -> str``. The engine never reads
stdin directly, so scripted prompts can stand in for a terminal.
"""

from __future__ import annotations

import getpass
from typing import Iterable, List, Protocol

from lockbox.core.errors import VaultIOError


class PasswordPrompt(Protocol):
    """Capability interface for password input."""

    def __call__(self, text: str) -> str:
        ...


class TerminalPasswordPrompt:
    """Reads a password from the controlling terminal without echo."""

    __slots__ = ()

    def __call__(self, text: str) -> str:
        try:
            return getpass.getpass(text)
        except (EOFError, OSError) as err:
            raise VaultIOError(f"Failed to read password: {err!r}") from err


class StaticPasswordPrompt:
    """Answers every prompt with the same password."""

    __slots__ = ("_password",)

    def __init__(self, password: str) -> None:
        self._password = password

    def __call__(self, text: str) -> str:
        return self._password

    def __repr__(self) -> str:
        return "StaticPasswordPrompt(***)"


class ScriptedPasswordPrompt:
    """
    Answers prompts from a fixed sequence of passwords.

    Records every prompt text it was asked with. Once the sequence is
    exhausted it fails like a closed terminal would.
    """

    __slots__ = ("_answers", "prompts")

    def __init__(self, answers: Iterable[str]) -> None:
        self._answers: List[str] = list(answers)
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def __call__(self, text: str) -> str:
        self.prompts.append(text)
        if not self._answers:
            raise VaultIOError("Failed to read password: no more input")
        return self._answers.pop(0)

    def __repr__(self) -> str:
        return f"ScriptedPasswordPrompt(remaining={len(self._answers)})"
