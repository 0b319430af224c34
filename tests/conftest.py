"""Shared test fixtures for platform-admin tests."""
import pytest
from pathlib import Path

from platform_admin.core.config import AdminConfig, set_config
from platform_admin.core.template_catalog import TemplateCatalog
from platform_admin.scaffold import ScaffoldManager, ScaffoldOptions

MIGRATIONS_DIR = "db/migrations"

CATALOG_YML = """\
migrations_dir: db/migrations
tiers:
  minimal:
    - {src: app.yaml.j2, dest: config/app.yaml, template: true}
    - {src: README.md, dest: README.md}
    - {src: wrangler.jsonc.j2, dest: "wrangler.{{projectSlug}}.jsonc", template: true}
    - {src: migrations/0001_core.sql, dest: db/migrations/0001_core.sql}
    - {src: migrations/0002_usage.sql, dest: db/migrations/0002_usage.sql}
    - {src: seed.sql.j2, dest: db/migrations/seed.sql, template: true}
  standard:
    - {src: migrations/0003_errors.sql, dest: db/migrations/0003_errors.sql}
    - {src: workers/errors.ts, dest: workers/errors.ts}
  full:
    - {src: migrations/0004_patterns.sql, dest: db/migrations/0004_patterns.sql}
    - {src: workers/patterns.ts, dest: workers/patterns.ts}
"""

TEMPLATE_FILES = {
    "app.yaml.j2": "name: {{ projectName }}\ntier: {{ tier }}\n",
    "README.md": "# Platform\n",
    "wrangler.jsonc.j2": '{"name": "{{ projectSlug }}-usage"}\n',
    "seed.sql.j2": "INSERT INTO projects VALUES ('{{ projectSlug }}');\n",
    "migrations/0001_core.sql": "CREATE TABLE core (id TEXT);\n",
    "migrations/0002_usage.sql": "CREATE TABLE usage (id TEXT);\n",
    "migrations/0003_errors.sql": "CREATE TABLE errors (id TEXT);\n",
    "migrations/0004_patterns.sql": "CREATE TABLE patterns (id TEXT);\n",
    "workers/errors.ts": "export const errors = 1;\n",
    "workers/patterns.ts": "export const patterns = 1;\n",
}


def write_template_set(root: Path) -> Path:
    """Write a small template set to root and return it."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "catalog.yml").write_text(CATALOG_YML)
    for name, content in TEMPLATE_FILES.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture(autouse=True)
def isolated_config():
    """Keep PLATFORM_ADMIN_* variables from the host out of the tests."""
    set_config(AdminConfig())
    yield
    set_config(None)


@pytest.fixture
def templates_dir(tmp_path):
    """A template set with four migrations across the three tiers."""
    return write_template_set(tmp_path / "templates")


@pytest.fixture
def make_catalog(templates_dir):
    """Build a catalog over templates_dir stamped with a given SDK version."""
    def _make(sdk_version: str = "1.0.0") -> TemplateCatalog:
        return TemplateCatalog(templates_dir, sdk_version=sdk_version)
    return _make


@pytest.fixture
def project_dir(tmp_path, make_catalog):
    """A minimal-tier project scaffolded at SDK 1.0.0."""
    target = tmp_path / "demo"
    manager = ScaffoldManager(make_catalog("1.0.0"))
    manager.scaffold_project(ScaffoldOptions(project_name="Demo App"), target)
    return target
