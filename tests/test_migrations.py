"""Tests for migration numbering."""
import logging
import os
from pathlib import Path

import pytest

from platform_admin.core.migrations import (
    MigrationSource,
    find_highest_migration,
    get_migration_number,
    highest_source_migration,
    is_migration_path,
    plan_migrations,
    renumber_migration,
)


def sources(*dests):
    return [MigrationSource(original_dest=dest, content=f"-- {dest}\n".encode()) for dest in dests]


class TestParsing:
    """Test migration filename parsing."""

    def test_get_migration_number(self):
        assert get_migration_number("storage/d1/migrations/005_error.sql") == 5
        assert get_migration_number("0012_custom.sql") == 12

    def test_seed_is_not_a_migration(self):
        assert get_migration_number("storage/d1/migrations/seed.sql") is None

    def test_is_migration_path(self):
        assert is_migration_path("db/migrations/0001_core.sql", "db/migrations")
        assert not is_migration_path("db/migrations/seed.sql", "db/migrations")
        assert not is_migration_path("db/migrations/old/0001_core.sql", "db/migrations")
        assert not is_migration_path("workers/0001_core.sql", "db/migrations")

    def test_renumber_keeps_width(self):
        assert renumber_migration("005_error_collection.sql", 12) == "012_error_collection.sql"
        assert renumber_migration("001_core.sql", 8) == "008_core.sql"
        assert renumber_migration("0003_errors.sql", 4) == "0004_errors.sql"

    def test_renumber_overflows_width(self):
        assert renumber_migration("05_x.sql", 123) == "123_x.sql"

    def test_renumber_rejects_non_migration(self):
        with pytest.raises(ValueError):
            renumber_migration("seed.sql", 3)


class TestFindHighestMigration:
    """Test the on-disk high-water mark."""

    def test_missing_directory(self, tmp_path):
        assert find_highest_migration(tmp_path / "nope") == 0

    def test_highest_number(self, tmp_path):
        for name in ("001_core.sql", "005_errors.sql", "003_features.sql"):
            (tmp_path / name).write_text("")
        assert find_highest_migration(tmp_path) == 5

    def test_ignores_unparseable_names(self, tmp_path):
        (tmp_path / "003_features.sql").write_text("")
        (tmp_path / "seed.sql").write_text("")
        (tmp_path / "README.md").write_text("")
        (tmp_path / "099_notes").mkdir()
        assert find_highest_migration(tmp_path) == 3

    def test_unreadable_directory_counts_as_zero(self, tmp_path, monkeypatch, caplog):
        (tmp_path / "007_custom.sql").write_text("")

        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", deny)

        with caplog.at_level(logging.WARNING, logger="platform_admin"):
            assert find_highest_migration(tmp_path) == 0

        assert any(
            record.levelno == logging.WARNING and "Could not read migrations directory" in record.getMessage()
            for record in caplog.records
        )

    def test_unsearchable_parent_counts_as_zero(self, tmp_path, monkeypatch, caplog):
        migrations_dir = tmp_path / "storage" / "migrations"
        real_exists = Path.exists

        def deny(self, *args, **kwargs):
            if self == migrations_dir:
                raise PermissionError(13, "Permission denied", str(self))
            return real_exists(self, *args, **kwargs)

        monkeypatch.setattr(Path, "exists", deny)

        with caplog.at_level(logging.WARNING, logger="platform_admin"):
            assert find_highest_migration(migrations_dir) == 0

        assert [r.levelno for r in caplog.records] == [logging.WARNING]

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_parent_without_search_permission(self, tmp_path, caplog):
        storage = tmp_path / "storage"
        (storage / "migrations").mkdir(parents=True)
        (storage / "migrations" / "003_custom.sql").write_text("")
        storage.chmod(0o600)
        try:
            with caplog.at_level(logging.WARNING, logger="platform_admin"):
                assert find_highest_migration(storage / "migrations") == 0
        finally:
            storage.chmod(0o700)

        assert any(record.levelno == logging.WARNING for record in caplog.records)


class TestPlanMigrations:
    """Test renumbering of new scaffold migrations."""

    def test_renumbers_after_user_migrations(self):
        planned = plan_migrations(
            sources(
                "storage/d1/migrations/005_error.sql",
                "storage/d1/migrations/006_patterns.sql",
                "storage/d1/migrations/007_search.sql",
            ),
            highest_scaffold_migration=4,
            highest_on_disk=10,
        )

        assert [m.dest for m in planned] == [
            "storage/d1/migrations/011_error.sql",
            "storage/d1/migrations/012_patterns.sql",
            "storage/d1/migrations/013_search.sql",
        ]
        assert planned[0].original_dest == "storage/d1/migrations/005_error.sql"
        assert planned[0].original_filename == "005_error.sql"
        assert planned[0].content == b"-- storage/d1/migrations/005_error.sql\n"

    def test_keeps_numbers_when_no_collision(self):
        planned = plan_migrations(
            sources("m/001_core.sql", "m/002_usage.sql", "m/003_errors.sql"),
            highest_scaffold_migration=2,
            highest_on_disk=2,
        )
        assert [m.dest for m in planned] == ["m/003_errors.sql"]

    def test_nothing_new(self):
        planned = plan_migrations(
            sources("m/001_core.sql", "m/002_usage.sql"),
            highest_scaffold_migration=2,
            highest_on_disk=7,
        )
        assert planned == []

    def test_sorted_by_source_number(self):
        planned = plan_migrations(
            sources("m/007_search.sql", "m/005_error.sql"),
            highest_scaffold_migration=4,
            highest_on_disk=4,
        )
        assert [m.dest for m in planned] == ["m/005_error.sql", "m/006_search.sql"]

    def test_new_numbers_never_collide(self):
        disk = {1, 2, 3, 9}
        planned = plan_migrations(
            sources("m/003_a.sql", "m/004_b.sql"),
            highest_scaffold_migration=2,
            highest_on_disk=max(disk),
        )
        numbers = [get_migration_number(m.dest) for m in planned]
        assert numbers == [10, 11]
        assert not disk.intersection(numbers)

    def test_highest_source_migration(self):
        assert highest_source_migration(sources("m/003_a.sql", "m/seed.sql", "m/001_b.sql")) == 3
        assert highest_source_migration([]) == 0
