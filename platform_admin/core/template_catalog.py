"""Template set loading: which files each tier ships and where they go."""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from platform_admin import __version__
from platform_admin.core.config import get_config
from platform_admin.core.errors import TemplateCatalogError
from platform_admin.core.migrations import (
    MigrationSource,
    get_migration_number,
    is_migration_path,
)
from platform_admin.core.tiers import TIER_ORDER, Tier, parse_tier

CATALOG_FILENAME = "catalog.yml"
DEFAULT_MIGRATIONS_DIR = "storage/d1/migrations"


@dataclass(frozen=True)
class TemplateFile:
    """One file of the template set."""
    src: str  # relative to the templates directory
    dest: str  # relative to the project root, may hold {{token}} placeholders
    template: bool = False  # rendered through jinja2 when True, copied verbatim otherwise
    tier: Tier = Tier.MINIMAL


class TemplateCatalog:
    """Loads the tiered template set described by catalog.yml."""

    def __init__(self, templates_dir: Optional[Path] = None, sdk_version: str = __version__):
        """Initialize template catalog.

        Args:
            templates_dir: Directory with catalog.yml and template sources.
                Defaults to PLATFORM_ADMIN_TEMPLATES_DIR, then the bundled templates.
            sdk_version: Version stamped into manifests generated from this set
        """
        if templates_dir is None:
            configured = get_config().templates_dir
            templates_dir = Path(configured) if configured else Path(__file__).parent.parent / "templates"
        self.templates_dir = Path(templates_dir)
        self.sdk_version = sdk_version
        self.migrations_dir = DEFAULT_MIGRATIONS_DIR
        self._tiers: Dict[Tier, List[TemplateFile]] = {}
        self._load()

    def _load(self) -> None:
        catalog_path = self.templates_dir / CATALOG_FILENAME
        if not catalog_path.exists():
            raise TemplateCatalogError(f"Template catalog not found at {catalog_path}")

        try:
            with open(catalog_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise TemplateCatalogError(f"Invalid YAML in {catalog_path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get('tiers'), dict):
            raise TemplateCatalogError(f"{catalog_path} must define a 'tiers' mapping")

        self.migrations_dir = str(data.get('migrations_dir', DEFAULT_MIGRATIONS_DIR)).strip('/')

        self._tiers = {tier: [] for tier in TIER_ORDER}
        for tier_name, entries in data['tiers'].items():
            try:
                tier = parse_tier(tier_name)
            except ValueError as e:
                raise TemplateCatalogError(f"{catalog_path}: {e}") from None

            for entry in entries or []:
                if not isinstance(entry, dict) or 'src' not in entry or 'dest' not in entry:
                    raise TemplateCatalogError(
                        f"{catalog_path}: every file in tier '{tier_name}' needs 'src' and 'dest'"
                    )
                self._tiers[tier].append(
                    TemplateFile(
                        src=entry['src'],
                        dest=entry['dest'],
                        template=bool(entry.get('template', False)),
                        tier=tier,
                    )
                )

    def files_for_tier(self, tier) -> List[TemplateFile]:
        """All files a tier ships. Higher tiers include every lower tier's files.

        Args:
            tier: Tier or tier name

        Returns:
            List of TemplateFile in catalog order, lowest tier first
        """
        tier = parse_tier(tier)
        files: List[TemplateFile] = []
        for candidate in TIER_ORDER:
            if tier.includes(candidate):
                files.extend(self._tiers[candidate])
        return files

    def is_migration(self, file: TemplateFile) -> bool:
        return is_migration_path(file.dest, self.migrations_dir)

    def regular_files(self, tier) -> List[TemplateFile]:
        return [f for f in self.files_for_tier(tier) if not self.is_migration(f)]

    def migration_files(self, tier) -> List[TemplateFile]:
        return [f for f in self.files_for_tier(tier) if self.is_migration(f)]

    def migration_sources(self, tier) -> List[MigrationSource]:
        """Template migrations of a tier with their content, at their template dest."""
        return [
            MigrationSource(original_dest=f.dest, content=self.read_source(f))
            for f in self.migration_files(tier)
        ]

    def highest_migration(self, tier) -> int:
        """Highest migration number the scaffold owns for a tier (0 if none)."""
        numbers = [get_migration_number(f.dest) for f in self.migration_files(tier)]
        return max((n for n in numbers if n is not None), default=0)

    def source_path(self, file: TemplateFile) -> Path:
        return self.templates_dir / file.src

    def read_source(self, file: TemplateFile) -> bytes:
        """Read a template source file.

        Raises:
            TemplateCatalogError: If the source file is missing
        """
        path = self.source_path(file)
        if not path.exists():
            raise TemplateCatalogError(f"Template '{file.src}' not found at {path}")
        return path.read_bytes()
