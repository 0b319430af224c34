"""Scaffold manifest models.

The manifest is persisted as camelCase JSON; the models expose snake_case
attributes and accept either spelling on input.
"""
import re
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from platform_admin.core.tiers import Tier


def slugify(name: str) -> str:
    """Lowercase a project name and collapse non-alphanumerics to dashes.

    >>> slugify("My Platform!")
    'my-platform'
    """
    return re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')


class ManifestContext(BaseModel):
    """Template variables captured when the project was generated or adopted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='allow',
    )

    project_name: str
    project_slug: str
    github_org: str = ""
    gatus_url: str = ""
    default_assignee: str = ""

    @classmethod
    def for_project(
        cls,
        project_name: str,
        project_slug: Optional[str] = None,
        github_org: str = "",
        gatus_url: str = "",
        default_assignee: str = "",
    ) -> "ManifestContext":
        """Build a context, deriving the slug from the name when not given."""
        return cls(
            project_name=project_name,
            project_slug=project_slug or slugify(project_name),
            github_org=github_org or "",
            gatus_url=gatus_url or "",
            default_assignee=default_assignee or "",
        )

    def render_variables(self) -> Dict[str, str]:
        """Context as the camelCase variables templates are written against."""
        return {
            key: "" if value is None else str(value)
            for key, value in self.model_dump(by_alias=True).items()
        }


class Manifest(BaseModel):
    """Persisted per-project record of generated file hashes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='forbid',
    )

    manifest_version: int
    sdk_version: str
    generated_at: str
    tier: Tier
    context: ManifestContext
    files: Dict[str, str] = Field(default_factory=dict)
    highest_scaffold_migration: int = Field(0, ge=0)

    @field_validator('files')
    @classmethod
    def validate_relative_paths(cls, v):
        """Manifest keys are project-relative POSIX paths."""
        for path in v:
            if path.startswith('/') or '\\' in path or '..' in path.split('/'):
                raise ValueError(f"Manifest path must be project-relative. Got: {path}")
        return v

    def to_json_dict(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)
