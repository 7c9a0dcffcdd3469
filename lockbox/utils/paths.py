"""
Path Utilities
==============

OS-aware path handling and crash-safe file replacement.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Final

# Owner read/write only
PRIVATE_FILE_MODE: Final[int] = 0o600


def normalize_path(path: str | Path) -> Path:
    """
    Return the absolute, user-expanded form of a path.

    The file does not need to exist.
    """
    return Path(path).expanduser().resolve()


def atomic_write_bytes(
    path: str | Path,
    data: bytes,
    mode: int = PRIVATE_FILE_MODE,
) -> Path:
    """
    Write bytes to a file so that readers see either the old or the new content.

    The data is written to a temporary file in the destination directory,
    flushed to disk, then renamed over the destination with ``os.replace``.
    If anything fails before the rename, the destination is untouched and
    the temporary file is removed.

    Args:
        path: Destination file
        data: Full file content
        mode: Permission bits for the new file

    Returns:
        The destination path

    Raises:
        OSError: If the write or rename fails
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if platform.system().lower() != "windows":
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

    return target


def get_app_config_dir(app_name: str = "lockbox") -> Path:
    """
    Get the OS-appropriate application configuration directory.

    Args:
        app_name: Name of the application

    Returns:
        Path to application configuration directory
    """
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    elif system == "darwin":
        base = Path.home() / "Library" / "Preferences"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    return base / app_name


def get_app_log_dir(app_name: str = "lockbox") -> Path:
    """Get the OS-appropriate log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / app_name / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / app_name
    else:
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / app_name / "logs"
