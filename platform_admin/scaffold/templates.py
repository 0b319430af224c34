"""Template engine for project scaffolding."""
import re
from typing import Any, Dict

from jinja2 import BaseLoader, Environment, TemplateError

from platform_admin.core.errors import TemplateCatalogError
from platform_admin.core.template_catalog import TemplateCatalog, TemplateFile
from platform_admin.core.tiers import Tier, parse_tier
from platform_admin.models.manifest import ManifestContext

PATH_TOKEN_RE = re.compile(r'\{\{\s*(\w+)\s*\}\}')


def build_render_context(context: ManifestContext, tier, sdk_version: str) -> Dict[str, str]:
    """Variables available to templates and destination paths.

    Adds tier flags so templates can use `{% if isStandard %}` blocks.
    """
    tier = parse_tier(tier)
    variables = context.render_variables()
    variables.update(
        {
            "tier": tier.value,
            "sdkVersion": sdk_version,
            "isStandard": "true" if tier.includes(Tier.STANDARD) else "",
            "isFull": "true" if tier.includes(Tier.FULL) else "",
        }
    )
    return variables


class TemplateEngine:
    """Handles template rendering for scaffolding."""

    def __init__(self, catalog: TemplateCatalog):
        self.catalog = catalog
        self.jinja_env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_string(self, source: str, context: Dict[str, Any], name: str = "<string>") -> str:
        """Render a template body with the given context."""
        try:
            template = self.jinja_env.from_string(source)
            return template.render(**context)
        except TemplateError as e:
            raise TemplateCatalogError(f"Failed to render template {name}: {e}") from e

    @staticmethod
    def resolve_path(dest: str, context: Dict[str, Any]) -> str:
        """Substitute {{token}} placeholders in a destination path.

        Unknown tokens are left as-is.
        """
        def _replace(match):
            key = match.group(1)
            if key in context:
                return str(context[key])
            return match.group(0)

        return PATH_TOKEN_RE.sub(_replace, dest)

    def render_file(self, file: TemplateFile, context: Dict[str, Any]) -> bytes:
        """Produce the exact bytes a template file should have on disk."""
        raw = self.catalog.read_source(file)
        if not file.template:
            return raw
        try:
            source = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TemplateCatalogError(f"Template {file.src} is not valid UTF-8: {e}") from e
        return self.render_string(source, context, name=file.src).encode("utf-8")
