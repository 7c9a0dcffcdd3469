"""
Lockbox Memory Hygiene
======================

Best-effort wiping of password material around key derivation.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- These are best-effort mitigations
"""

from lockbox.core.memory.zeroization import (
    secure_zero,
    password_buffer,
    ZeroizeContext,
)

__all__ = [
    "secure_zero",
    "password_buffer",
    "ZeroizeContext",
]
