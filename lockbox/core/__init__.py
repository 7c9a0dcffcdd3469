"""
Core module - Contains configuration, logging, errors and the vault engine.
"""

from lockbox.core.config import LockboxConfig
from lockbox.core.logging import get_secure_logger, configure_logging, SecureLogFilter

__all__ = ["LockboxConfig", "get_secure_logger", "configure_logging", "SecureLogFilter"]
