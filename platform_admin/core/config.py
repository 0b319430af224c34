"""platform-admin runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class AdminConfig:
    """Runtime configuration for scaffold operations.

    Attributes:
        templates_dir: Template set to scaffold from (default: bundled templates)
        log_file: Default log file for CLI runs (default: ~/.platform-admin/logs)
        verbose: Enable debug logging by default
    """

    templates_dir: Optional[str] = None
    log_file: Optional[str] = None
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "AdminConfig":
        """Create config from environment variables.

        Environment variables:
            PLATFORM_ADMIN_TEMPLATES_DIR: Directory holding catalog.yml and template sources
            PLATFORM_ADMIN_LOG_FILE: Log file path
            PLATFORM_ADMIN_VERBOSE: "1"/"true" to enable debug logging

        Returns:
            AdminConfig instance with values from environment or defaults
        """
        return cls(
            templates_dir=os.getenv("PLATFORM_ADMIN_TEMPLATES_DIR") or None,
            log_file=os.getenv("PLATFORM_ADMIN_LOG_FILE") or None,
            verbose=os.getenv("PLATFORM_ADMIN_VERBOSE", "").lower() in ("1", "true", "yes"),
        )


# None until first read
_active: Optional[AdminConfig] = None


def get_config() -> AdminConfig:
    """Return the active configuration, reading the environment on first use."""
    global _active
    if _active is None:
        _active = AdminConfig.from_env()
    return _active


def set_config(config: Optional[AdminConfig]) -> None:
    """Replace the active configuration. Passing None re-reads the environment on next use."""
    global _active
    _active = config
