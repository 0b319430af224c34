"""Adopt a project that was scaffolded before it had a manifest.

Hashes the tracked files already on disk as a baseline and writes
`.platform-scaffold.json` so the project can be upgraded from then on.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platform_admin.core.errors import ManifestExistsError, ProjectNotFoundError
from platform_admin.core.hasher import hash_file
from platform_admin.core.logger import get_logger
from platform_admin.core.manifest import (
    MANIFEST_FILENAME,
    build_manifest,
    manifest_path,
    write_manifest,
)
from platform_admin.core.template_catalog import TemplateCatalog
from platform_admin.core.tiers import Tier, parse_tier
from platform_admin.models.manifest import Manifest, ManifestContext
from platform_admin.scaffold.templates import TemplateEngine, build_render_context

logger = get_logger(__name__)


@dataclass
class AdoptOptions:
    """Context the project was originally generated with."""
    project_name: str
    project_slug: Optional[str] = None  # derived from project_name when empty
    tier: Tier = Tier.MINIMAL
    github_org: str = ""
    gatus_url: str = ""
    default_assignee: str = ""
    from_version: Optional[str] = None  # SDK version that generated the project

    def context(self) -> ManifestContext:
        return ManifestContext.for_project(
            self.project_name,
            project_slug=self.project_slug,
            github_org=self.github_org,
            gatus_url=self.gatus_url,
            default_assignee=self.default_assignee,
        )


def adopt(
    project_dir: Path,
    options: AdoptOptions,
    catalog: Optional[TemplateCatalog] = None,
) -> Manifest:
    """Write a baseline manifest for an existing project.

    The migration high-water mark is the highest number the tier's template
    set owns, not whatever is on disk, so user migrations numbered above it
    are never claimed by the scaffold.

    Raises:
        ProjectNotFoundError: If project_dir does not exist
        ManifestExistsError: If the project already has a manifest
    """
    project_dir = Path(project_dir)
    if not project_dir.is_dir():
        raise ProjectNotFoundError(f"Directory does not exist: {project_dir}")

    if manifest_path(project_dir).exists():
        raise ManifestExistsError(
            f"{project_dir} already has a {MANIFEST_FILENAME}. "
            f"Use `platform-admin upgrade` instead."
        )

    catalog = catalog or TemplateCatalog()
    tier = parse_tier(options.tier)
    context = options.context()
    sdk_version = options.from_version or catalog.sdk_version

    variables = build_render_context(context, tier, sdk_version)
    files = catalog.files_for_tier(tier)

    file_hashes = {}
    for file in files:
        dest = TemplateEngine.resolve_path(file.dest, variables)
        dest_path = project_dir / dest
        if dest_path.is_file():
            file_hashes[dest] = hash_file(dest_path)

    highest_migration = catalog.highest_migration(tier)

    manifest = build_manifest(sdk_version, tier, context, file_hashes, highest_migration)
    write_manifest(project_dir, manifest)

    logger.info(f"create {MANIFEST_FILENAME}")
    logger.info(f"Matched {len(file_hashes)} of {len(files)} expected files")
    logger.info(f"Highest scaffold migration: {highest_migration or 'none'}")
    logger.info(f"Tier: {tier}, SDK: {sdk_version}")

    return manifest
