"""Scaffold manifest persistence.

The manifest records what was generated into a project so that later
upgrades can tell untouched files from user edits. It lives in
`.platform-scaffold.json` at the project root.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import ValidationError

from platform_admin.core.errors import ManifestCorruptError, UnsupportedManifestVersionError
from platform_admin.core.logger import get_logger
from platform_admin.core.tiers import Tier, parse_tier
from platform_admin.models.manifest import Manifest, ManifestContext

logger = get_logger(__name__)

MANIFEST_FILENAME = ".platform-scaffold.json"
MANIFEST_VERSION = 1


def manifest_path(project_dir: Path) -> Path:
    return Path(project_dir) / MANIFEST_FILENAME


def read_manifest(project_dir: Path) -> Optional[Manifest]:
    """Load the manifest from a project directory.

    Args:
        project_dir: Project root

    Returns:
        Manifest, or None if the project has no manifest file

    Raises:
        UnsupportedManifestVersionError: If the stored format tag is not MANIFEST_VERSION
        ManifestCorruptError: If the file is not valid JSON or fails validation
    """
    path = manifest_path(project_dir)
    if not path.exists():
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ManifestCorruptError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ManifestCorruptError(f"{path} must contain a JSON object")

    # Version gate runs before validation so future formats fail with a clear message
    version = raw.get('manifestVersion')
    if version != MANIFEST_VERSION:
        raise UnsupportedManifestVersionError(version, MANIFEST_VERSION)

    try:
        manifest = Manifest.model_validate(raw)
    except ValidationError as e:
        raise ManifestCorruptError(f"{path} is not a valid scaffold manifest:\n{e}") from e

    logger.debug(f"Loaded manifest from {path}")
    return manifest


def write_manifest(project_dir: Path, manifest: Manifest) -> Path:
    """Persist the manifest, replacing any previous one.

    The file is written to a temporary sibling and renamed into place, so a
    failed write never leaves a half-written manifest behind.

    Returns:
        Path of the written manifest
    """
    path = manifest_path(project_dir)
    temp_file = path.with_name(path.name + '.tmp')

    try:
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(manifest.to_json_dict(), f, indent=2)
            f.write('\n')
        temp_file.replace(path)
    except Exception:
        temp_file.unlink(missing_ok=True)
        raise

    logger.debug(f"Saved manifest to {path}")
    return path


def build_manifest(
    sdk_version: str,
    tier: Union[str, Tier],
    context: Union[ManifestContext, Dict[str, str]],
    file_hashes: Dict[str, str],
    highest_scaffold_migration: int,
) -> Manifest:
    """Assemble a manifest stamped with the current time."""
    if not isinstance(context, ManifestContext):
        context = ManifestContext.model_validate(context)

    return Manifest(
        manifest_version=MANIFEST_VERSION,
        sdk_version=sdk_version,
        generated_at=datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        tier=parse_tier(tier),
        context=context,
        files=dict(sorted(file_hashes.items())),
        highest_scaffold_migration=highest_scaffold_migration,
    )
