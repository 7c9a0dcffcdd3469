"""
Memory Zeroization Utilities
============================

Explicit wiping of password and key buffers.

Security Properties:
- Explicit zeroization (no GC reliance)
- Exception-safe cleanup

Limitations:
- Python ``str`` and ``bytes`` are immutable; only ``bytearray``
  buffers can be wiped. Callers copy secrets into a bytearray as late
  as possible and wipe it as early as possible.
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(data: bytearray) -> None:
    """
    Securely zero a byte buffer.

    Uses ctypes for direct memory access, with fallback to
    Python-level zeroing.

    Args:
        data: Mutable byte buffer to zero
    """
    if len(data) == 0:
        return

    try:
        addr = ctypes.addressof(
            (ctypes.c_char * len(data)).from_buffer(data)
        )

        # Multi-pass wipe
        ctypes.memset(addr, 0, len(data))
        ctypes.memset(addr, 0xFF, len(data))
        ctypes.memset(addr, 0, len(data))

    except (TypeError, ValueError, BufferError):
        for i in range(len(data)):
            data[i] = 0


def password_buffer(password: str) -> bytearray:
    """Copy a password into a wipeable UTF-8 buffer."""
    return bytearray(password.encode("utf-8"))


@contextmanager
def ZeroizeContext(*buffers: bytearray) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit.

    Always zeroizes, whether exit is normal or exceptional.

    Usage:
        secret = password_buffer(password)

        with ZeroizeContext(secret):
            key = derive_key(secret, salt)
        # secret is now zeroed
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)
