"""
Utils module - Path and validation helpers used throughout Lockbox.
"""

from lockbox.utils.paths import (
    atomic_write_bytes,
    get_app_config_dir,
    get_app_log_dir,
    normalize_path,
)
from lockbox.utils.validators import (
    ValidationError,
    validate_entry,
    validate_new_password,
    validate_string_safe,
)

__all__ = [
    "atomic_write_bytes",
    "get_app_config_dir",
    "get_app_log_dir",
    "normalize_path",
    "ValidationError",
    "validate_entry",
    "validate_new_password",
    "validate_string_safe",
]
