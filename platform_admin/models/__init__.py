"""Data models for platform-admin."""
from platform_admin.models.manifest import Manifest, ManifestContext

__all__ = [
    'Manifest',
    'ManifestContext',
]
