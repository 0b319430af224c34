"""Exceptions raised by the scaffold engine.

Everything fatal derives from ScaffoldError so the CLI can surface it with a
single handler. Per-file problems are never raised; they are collected into
the upgrade result instead.
"""


class ScaffoldError(Exception):
    """Base class for fatal scaffold errors."""
    pass


class ConfigError(ScaffoldError):
    """Project or manifest state does not allow the requested operation."""
    pass


class ProjectNotFoundError(ConfigError):
    """Raised when the project directory does not exist."""
    pass


class ProjectExistsError(ConfigError):
    """Raised when scaffolding into a directory that already exists."""
    pass


class ManifestMissingError(ConfigError):
    """Raised when an operation needs a manifest and none is present."""
    pass


class ManifestExistsError(ConfigError):
    """Raised when adopting a project that already has a manifest."""
    pass


class UnsupportedManifestVersionError(ConfigError):
    """Raised when the stored manifest format tag is not the supported one."""

    def __init__(self, found, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            f"Manifest version {found} is not supported (expected {expected}). "
            f"Please upgrade platform-admin."
        )


class ManifestCorruptError(ConfigError):
    """Raised when the manifest cannot be parsed or fails validation."""
    pass


class TemplateCatalogError(ConfigError):
    """Raised when the template set is malformed or a template is missing."""
    pass


class TierDowngradeError(ScaffoldError):
    """Raised when an upgrade would move a project to a lower tier."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f'Cannot downgrade from "{current}" to "{target}". '
            f"Tier changes must be upgrades (minimal -> standard -> full)."
        )
