"""Tests for manifest persistence."""
import json

import pytest

from platform_admin.core.errors import ManifestCorruptError, UnsupportedManifestVersionError
from platform_admin.core.manifest import (
    MANIFEST_FILENAME,
    MANIFEST_VERSION,
    build_manifest,
    read_manifest,
    write_manifest,
)
from platform_admin.core.tiers import Tier
from platform_admin.models.manifest import ManifestContext, slugify


@pytest.fixture
def manifest():
    context = ManifestContext.for_project("Demo App", github_org="acme")
    return build_manifest(
        "1.0.0",
        "standard",
        context,
        {"b.txt": "2" * 64, "a.txt": "1" * 64},
        3,
    )


def test_read_missing_manifest_returns_none(tmp_path):
    assert read_manifest(tmp_path) is None


def test_written_manifest_uses_camel_case_keys(tmp_path, manifest):
    path = write_manifest(tmp_path, manifest)

    assert path.name == MANIFEST_FILENAME
    data = json.loads(path.read_text())
    assert data["manifestVersion"] == MANIFEST_VERSION
    assert data["sdkVersion"] == "1.0.0"
    assert data["tier"] == "standard"
    assert data["highestScaffoldMigration"] == 3
    assert data["context"]["projectName"] == "Demo App"
    assert data["context"]["projectSlug"] == "demo-app"
    assert data["context"]["githubOrg"] == "acme"
    assert list(data["files"]) == ["a.txt", "b.txt"]
    assert data["generatedAt"].endswith("Z")
    assert path.read_text().endswith("\n")


def test_write_then_read(tmp_path, manifest):
    write_manifest(tmp_path, manifest)

    loaded = read_manifest(tmp_path)

    assert loaded == manifest
    assert loaded.tier is Tier.STANDARD
    assert not (tmp_path / (MANIFEST_FILENAME + ".tmp")).exists()


def test_failed_write_leaves_no_temp_file(tmp_path, manifest, monkeypatch):
    write_manifest(tmp_path, manifest)
    saved = (tmp_path / MANIFEST_FILENAME).read_text()

    def fail(*args, **kwargs):
        raise TypeError("Object of type bytes is not JSON serializable")

    monkeypatch.setattr("platform_admin.core.manifest.json.dump", fail)

    with pytest.raises(TypeError):
        write_manifest(tmp_path, manifest)

    assert not (tmp_path / (MANIFEST_FILENAME + ".tmp")).exists()
    assert (tmp_path / MANIFEST_FILENAME).read_text() == saved


def test_unknown_context_keys_are_preserved(tmp_path, manifest):
    data = manifest.to_json_dict()
    data["context"]["slackChannel"] = "#ops"
    (tmp_path / MANIFEST_FILENAME).write_text(json.dumps(data))

    loaded = read_manifest(tmp_path)

    assert loaded.context.render_variables()["slackChannel"] == "#ops"


def test_unsupported_version_rejected(tmp_path, manifest):
    data = manifest.to_json_dict()
    data["manifestVersion"] = 2
    (tmp_path / MANIFEST_FILENAME).write_text(json.dumps(data))

    with pytest.raises(UnsupportedManifestVersionError) as exc_info:
        read_manifest(tmp_path)

    assert "Manifest version 2 is not supported" in str(exc_info.value)
    assert "upgrade platform-admin" in str(exc_info.value)


def test_invalid_json_is_corrupt(tmp_path):
    (tmp_path / MANIFEST_FILENAME).write_text("{not json")

    with pytest.raises(ManifestCorruptError):
        read_manifest(tmp_path)


def test_missing_fields_are_corrupt(tmp_path):
    (tmp_path / MANIFEST_FILENAME).write_text(json.dumps({"manifestVersion": 1}))

    with pytest.raises(ManifestCorruptError):
        read_manifest(tmp_path)


def test_absolute_paths_are_corrupt(tmp_path, manifest):
    data = manifest.to_json_dict()
    data["files"] = {"/etc/passwd": "0" * 64}
    (tmp_path / MANIFEST_FILENAME).write_text(json.dumps(data))

    with pytest.raises(ManifestCorruptError):
        read_manifest(tmp_path)


def test_slugify():
    assert slugify("My Platform!") == "my-platform"
    assert slugify("  already-slugged ") == "already-slugged"
