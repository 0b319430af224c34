"""File reconciliation between a generated project and its template set.

Deciding and doing are kept apart: `ReconciliationEngine.build_plan` only
reads the project tree and returns a `ReconciliationPlan`; `apply_plan` only
writes what a plan says. A dry run is simply a plan that never gets applied,
so it reports exactly what a real run would do.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from platform_admin.core.hasher import hash_content, hash_file
from platform_admin.core.logger import get_logger
from platform_admin.core.migrations import (
    PlannedMigration,
    find_highest_migration,
    highest_source_migration,
    is_migration_path,
    plan_migrations,
)
from platform_admin.core.template_catalog import TemplateCatalog
from platform_admin.models.manifest import Manifest
from platform_admin.scaffold.templates import TemplateEngine, build_render_context

logger = get_logger(__name__)


class FileAction(Enum):
    """Outcome for a single tracked file."""
    CREATE = "create"  # not on disk yet
    UPDATE = "update"  # untouched since generation, template changed
    SKIP_USER_MODIFIED = "skip"  # edited by the user, never overwritten
    UNCHANGED = "unchanged"  # untouched and template identical


def classify_file(
    disk_hash: Optional[str],
    manifest_hash: Optional[str],
    new_hash: str,
) -> FileAction:
    """Classify a file from three digests.

    Args:
        disk_hash: Digest of the file currently on disk, None if absent
        manifest_hash: Digest recorded when the file was last generated, None if untracked
        new_hash: Digest of the freshly rendered template

    Returns:
        The FileAction to take
    """
    if disk_hash is None:
        return FileAction.CREATE
    if disk_hash != manifest_hash:
        return FileAction.SKIP_USER_MODIFIED
    if new_hash != disk_hash:
        return FileAction.UPDATE
    return FileAction.UNCHANGED


def recorded_hash(action: FileAction, disk_hash: Optional[str], new_hash: str) -> str:
    """Digest the next manifest should hold for a file after `action`.

    User-modified files keep the user's current digest, so the next upgrade
    compares against their latest version instead of warning forever.
    """
    if action is FileAction.SKIP_USER_MODIFIED:
        return disk_hash
    return new_hash


@dataclass
class FilePlanEntry:
    """Decision for one rendered template file."""
    dest: str
    action: FileAction
    content: bytes
    recorded_hash: str


@dataclass
class ReconciliationPlan:
    """Everything an upgrade will do, computed without touching the disk."""

    files: List[FilePlanEntry] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    migrations: List[PlannedMigration] = field(default_factory=list)
    file_hashes: Dict[str, str] = field(default_factory=dict)
    highest_scaffold_migration: int = 0

    def paths_for(self, action: FileAction) -> List[str]:
        return [entry.dest for entry in self.files if entry.action is action]

    @property
    def created(self) -> List[str]:
        return self.paths_for(FileAction.CREATE)

    @property
    def updated(self) -> List[str]:
        return self.paths_for(FileAction.UPDATE)

    @property
    def skipped(self) -> List[str]:
        return self.paths_for(FileAction.SKIP_USER_MODIFIED)

    def has_writes(self) -> bool:
        return bool(self.created or self.updated or self.migrations)


class ReconciliationEngine:
    """Build a reconciliation plan for a project against a template set."""

    def __init__(
        self,
        project_dir: Path,
        manifest: Manifest,
        catalog: TemplateCatalog,
        target_tier,
    ):
        self.project_dir = Path(project_dir)
        self.manifest = manifest
        self.catalog = catalog
        self.target_tier = target_tier
        self.engine = TemplateEngine(catalog)
        self.context = build_render_context(manifest.context, target_tier, catalog.sdk_version)

    def build_plan(self) -> ReconciliationPlan:
        plan = ReconciliationPlan()
        self._plan_files(plan)
        self._plan_migrations(plan)
        self._plan_removed(plan)
        return plan

    # ----------------------------
    # Regular files
    # ----------------------------

    def _plan_files(self, plan: ReconciliationPlan) -> None:
        for file in self.catalog.regular_files(self.target_tier):
            dest = self.engine.resolve_path(file.dest, self.context)
            content = self.engine.render_file(file, self.context)
            new_hash = hash_content(content)

            dest_path = self.project_dir / dest
            disk_hash = hash_file(dest_path) if dest_path.is_file() else None
            manifest_hash = self.manifest.files.get(dest)

            action = classify_file(disk_hash, manifest_hash, new_hash)
            entry = FilePlanEntry(
                dest=dest,
                action=action,
                content=content,
                recorded_hash=recorded_hash(action, disk_hash, new_hash),
            )
            plan.files.append(entry)
            plan.file_hashes[dest] = entry.recorded_hash

    # ----------------------------
    # Migrations
    # ----------------------------

    def _plan_migrations(self, plan: ReconciliationPlan) -> None:
        sources = self.catalog.migration_sources(self.target_tier)
        highest_scaffold = self.manifest.highest_scaffold_migration
        highest_on_disk = find_highest_migration(self.project_dir / self.catalog.migrations_dir)

        plan.migrations = plan_migrations(sources, highest_scaffold, highest_on_disk)

        # Previously emitted migrations keep their recorded hashes
        for path, digest in self.manifest.files.items():
            if is_migration_path(path, self.catalog.migrations_dir):
                plan.file_hashes.setdefault(path, digest)

        for migration in plan.migrations:
            plan.file_hashes[migration.dest] = hash_content(migration.content)

        plan.highest_scaffold_migration = max(highest_scaffold, highest_source_migration(sources))

    # ----------------------------
    # Files dropped from the template set
    # ----------------------------

    def _plan_removed(self, plan: ReconciliationPlan) -> None:
        expected = {entry.dest for entry in plan.files}
        for path in self.manifest.files:
            if is_migration_path(path, self.catalog.migrations_dir):
                continue
            if path not in expected:
                plan.removed.append(path)


def apply_plan(project_dir: Path, plan: ReconciliationPlan) -> None:
    """Write every created, updated and migration file of a plan.

    Skipped and unchanged files are never opened for writing.
    """
    project_dir = Path(project_dir)

    for entry in plan.files:
        if entry.action not in (FileAction.CREATE, FileAction.UPDATE):
            continue
        _write_file(project_dir / entry.dest, entry.content)

    for migration in plan.migrations:
        _write_file(project_dir / migration.dest, migration.content)


def log_plan(plan: ReconciliationPlan) -> None:
    """Log one line per reported file, the way the CLI lists them."""
    for entry in plan.files:
        if entry.action is FileAction.CREATE:
            logger.info(f"create {entry.dest}")
        elif entry.action is FileAction.UPDATE:
            logger.info(f"update {entry.dest}")
        elif entry.action is FileAction.SKIP_USER_MODIFIED:
            logger.warning(f"skip   {entry.dest} (user modified)")

    for migration in plan.migrations:
        logger.info(f"create {migration.dest} (from {migration.original_filename})")

    for path in plan.removed:
        logger.warning(f"warn   {path} (removed from template set, keeping on disk)")


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
