"""
Lockbox Configuration
=====================

Immutable, environment-aware configuration with security-first defaults.

Security Features:
- Immutable configuration after initialization
- Environment variable override support (LOCKBOX_ prefix)
- Sensitive-looking variables are never read from the environment
- OS-aware path handling
"""

from __future__ import annotations

import os
import platform
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional

from lockbox.utils.paths import get_app_config_dir, get_app_log_dir

# Security Constants
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "token", "api_key",
    "private", "credential", "salt",
})

CURRENT_VAULT_FILENAME: Final[str] = "current_vault"
LAST_VAULT_FILENAME: Final[str] = "last_vault"


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    config_dir: Path = field(default_factory=get_app_config_dir)
    log_dir: Path = field(default_factory=get_app_log_dir)

    def __post_init__(self) -> None:
        """Validate paths after initialization."""
        for field_name in ["config_dir", "log_dir"]:
            path = getattr(self, field_name)
            if not path.is_absolute():
                raise ValueError(f"{field_name} must be an absolute path: {path}")

    @property
    def current_vault_file(self) -> Path:
        """Pointer file naming the vault commands operate on."""
        return self.config_dir / CURRENT_VAULT_FILENAME

    @property
    def last_vault_file(self) -> Path:
        """Pointer file naming the vault that was unlocked last."""
        return self.config_dir / LAST_VAULT_FILENAME


@dataclass(frozen=True, slots=True)
class SecurityConfig:
    """Immutable security configuration."""

    max_unlock_attempts: int = 3
    keyring_service: str = "lockbox"

    def __post_init__(self) -> None:
        """Validate security settings."""
        if self.max_unlock_attempts < 1:
            raise ValueError("max_unlock_attempts must be at least 1")
        if not self.keyring_service:
            raise ValueError("keyring_service cannot be empty")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "WARNING"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False

    def __post_init__(self) -> None:
        """Validate logging settings."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


class LockboxConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = LockboxConfig.load()
        pointer = config.paths.current_vault_file
        attempts = config.security.max_unlock_attempts
    """

    __slots__ = ("_paths", "_security", "_logging", "_frozen")

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        security: Optional[SecurityConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use LockboxConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_security", security or SecurityConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_frozen", True)

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def security(self) -> SecurityConfig:
        return self._security

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @classmethod
    def load(cls, env_prefix: str = "LOCKBOX") -> LockboxConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables use the prefix and double underscores for
        nested values.

        Examples:
            LOCKBOX_LOGGING__LEVEL=DEBUG
            LOCKBOX_SECURITY__MAX_UNLOCK_ATTEMPTS=5
            LOCKBOX_PATHS__CONFIG_DIR=/custom/path

        Args:
            env_prefix: Prefix for environment variables (default: LOCKBOX)

        Returns:
            Configured LockboxConfig instance
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        paths_kwargs: dict[str, Any] = {}
        if "paths.config_dir" in env_overrides:
            paths_kwargs["config_dir"] = Path(env_overrides["paths.config_dir"]).expanduser()
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"]).expanduser()

        security_kwargs: dict[str, Any] = {}
        if "security.max_unlock_attempts" in env_overrides:
            security_kwargs["max_unlock_attempts"] = int(
                env_overrides["security.max_unlock_attempts"]
            )
        if "security.keyring_service" in env_overrides:
            security_kwargs["keyring_service"] = env_overrides["security.keyring_service"]

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() == "true"
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = env_overrides["logging.enable_file"].lower() == "true"

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            security=SecurityConfig(**security_kwargs) if security_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # Convert LOCKBOX_SECTION__KEY to section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                # SECURITY: Skip sensitive keys from environment
                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    def ensure_directories(self) -> None:
        """Create all required directories with secure permissions."""
        for directory in (self._paths.config_dir, self._paths.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

            if platform.system().lower() != "windows":
                directory.chmod(stat.S_IRWXU)  # 700 - owner only

    def __repr__(self) -> str:
        return (
            f"LockboxConfig(config_dir={str(self._paths.config_dir)!r}, "
            f"service={self._security.keyring_service!r})"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if getattr(self, "_frozen", False):
            raise AttributeError("LockboxConfig is immutable after initialization")
        super().__setattr__(name, value)
