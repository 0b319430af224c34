"""Core scaffolding functionality for new platform projects."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platform_admin.core.errors import ProjectExistsError
from platform_admin.core.hasher import hash_content
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
class ScaffoldOptions:
    """Answers that shape a new project."""
    project_name: str
    project_slug: Optional[str] = None
    tier: Tier = Tier.MINIMAL
    github_org: str = ""
    gatus_url: str = ""
    default_assignee: str = ""

    def context(self) -> ManifestContext:
        return ManifestContext.for_project(
            self.project_name,
            project_slug=self.project_slug,
            github_org=self.github_org,
            gatus_url=self.gatus_url,
            default_assignee=self.default_assignee,
        )


class ScaffoldManager:
    """Generates brand-new projects from the template set."""

    def __init__(self, catalog: Optional[TemplateCatalog] = None):
        self.catalog = catalog or TemplateCatalog()
        self.engine = TemplateEngine(self.catalog)

    def scaffold_project(self, options: ScaffoldOptions, output_dir: Path) -> Manifest:
        """Render every file of the chosen tier into a new directory.

        Args:
            options: Project name, tier and context variables
            output_dir: Directory to create; must not exist yet

        Returns:
            The manifest written alongside the generated files

        Raises:
            ProjectExistsError: If output_dir already exists
        """
        output_dir = Path(output_dir)
        if output_dir.exists():
            if manifest_path(output_dir).exists():
                raise ProjectExistsError(
                    f"{output_dir} is an existing scaffold. Use:\n"
                    f"  platform-admin upgrade {output_dir}"
                )
            raise ProjectExistsError(f"Directory already exists: {output_dir}")

        tier = parse_tier(options.tier)
        context = options.context()
        variables = build_render_context(context, tier, self.catalog.sdk_version)
        files = self.catalog.files_for_tier(tier)

        # Render everything before creating the directory so a bad template leaves nothing behind
        rendered = []
        for file in files:
            dest = self.engine.resolve_path(file.dest, variables)
            rendered.append((dest, self.engine.render_file(file, variables)))

        logger.info(f"Creating {tier} project: {context.project_name}")
        output_dir.mkdir(parents=True)

        file_hashes = {}
        for dest, content in rendered:
            dest_path = output_dir / dest
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(content)
            file_hashes[dest] = hash_content(content)
            logger.debug(f"create {dest}")

        manifest = build_manifest(
            self.catalog.sdk_version,
            tier,
            context,
            file_hashes,
            self.catalog.highest_migration(tier),
        )
        write_manifest(output_dir, manifest)

        logger.info(f"Generated {len(file_hashes)} files and {MANIFEST_FILENAME}")
        return manifest
