"""Upgrade an existing scaffolded project to a newer template version.

For each file the template set ships:
  - not on disk                      -> create it
  - untouched since generation       -> overwrite with the new version
  - modified by the user             -> skip with a warning
  - tracked but no longer shipped    -> warn, keep on disk, stop tracking

New scaffold migrations are renumbered past everything already in the
project's migrations directory.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from platform_admin.core.errors import ManifestMissingError, ProjectNotFoundError
from platform_admin.core.logger import get_logger
from platform_admin.core.manifest import (
    MANIFEST_FILENAME,
    build_manifest,
    read_manifest,
    write_manifest,
)
from platform_admin.core.reconciler import (
    ReconciliationEngine,
    ReconciliationPlan,
    apply_plan,
    log_plan,
)
from platform_admin.core.template_catalog import TemplateCatalog
from platform_admin.core.tiers import Tier, ensure_tier_transition, parse_tier

logger = get_logger(__name__)


@dataclass
class UpgradeOptions:
    """Options for upgrade()."""
    tier: Optional[Tier] = None  # None keeps the manifest's tier
    dry_run: bool = False


@dataclass
class UpgradeResult:
    """Project-relative paths touched (or that would be touched) by an upgrade."""

    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    migrations: List[str] = field(default_factory=list)

    @classmethod
    def from_plan(cls, plan: ReconciliationPlan) -> "UpgradeResult":
        return cls(
            created=plan.created,
            updated=plan.updated,
            skipped=plan.skipped,
            removed=list(plan.removed),
            migrations=[migration.dest for migration in plan.migrations],
        )

    def is_empty(self) -> bool:
        return not (self.created or self.updated or self.skipped or self.removed or self.migrations)

    @property
    def warnings(self) -> List[str]:
        """Non-fatal findings worth repeating in a run summary."""
        return [f"{path} (user modified, not updated)" for path in self.skipped] + [
            f"{path} (removed from template set, kept on disk)" for path in self.removed
        ]


def upgrade(
    project_dir: Path,
    options: Optional[UpgradeOptions] = None,
    catalog: Optional[TemplateCatalog] = None,
) -> UpgradeResult:
    """Reconcile a project with the current template set.

    Args:
        project_dir: Project root holding the manifest
        options: Target tier and dry-run flag
        catalog: Template set to upgrade to (defaults to the bundled one)

    Returns:
        UpgradeResult. Dry runs return the same result a real run would.

    Raises:
        ManifestMissingError: If the project has no manifest
        TierDowngradeError: If the target tier is below the manifest's tier
        ConfigError: For unreadable manifests or a broken template set
    """
    project_dir = Path(project_dir)
    options = options or UpgradeOptions()

    if not project_dir.is_dir():
        raise ProjectNotFoundError(f"Directory does not exist: {project_dir}")

    manifest = read_manifest(project_dir)
    if manifest is None:
        raise ManifestMissingError(
            f"No {MANIFEST_FILENAME} found in {project_dir}.\n"
            f"If this project was scaffolded without a manifest, run:\n"
            f"  platform-admin adopt {project_dir}"
        )

    target_tier = parse_tier(options.tier) if options.tier else manifest.tier
    ensure_tier_transition(manifest.tier, target_tier)

    catalog = catalog or TemplateCatalog()

    if manifest.sdk_version == catalog.sdk_version and manifest.tier == target_tier:
        logger.info(f"Already up to date (SDK {catalog.sdk_version}, tier {target_tier})")
        return UpgradeResult()

    logger.info(
        f"Upgrading {project_dir}: SDK {manifest.sdk_version} -> {catalog.sdk_version}, "
        f"tier {manifest.tier} -> {target_tier}"
    )

    plan = ReconciliationEngine(project_dir, manifest, catalog, target_tier).build_plan()
    log_plan(plan)
    result = UpgradeResult.from_plan(plan)

    if options.dry_run:
        logger.info("Dry run - no files written")
        return result

    apply_plan(project_dir, plan)

    # Only after every file landed, so the manifest never claims more than the disk holds
    new_manifest = build_manifest(
        catalog.sdk_version,
        target_tier,
        manifest.context,
        plan.file_hashes,
        plan.highest_scaffold_migration,
    )
    write_manifest(project_dir, new_manifest)

    return result
