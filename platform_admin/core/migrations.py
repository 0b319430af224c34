"""Migration numbering for safe upgrades.

Two numbering universes meet in a project's migrations directory: the
scaffold's own sequence (tracked in the manifest as
`highestScaffoldMigration`) and whatever the project's developers added on
top. New scaffold migrations are renumbered past both so they never collide
with a file already on disk.

Migration filenames carry a numeric prefix followed by an underscore, e.g.
`005_error_collection.sql` or `0003_custom.sql`. Anything else in the
directory is ignored when computing high-water marks.
"""
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from platform_admin.core.logger import get_logger

logger = get_logger(__name__)

MIGRATION_FILENAME_RE = re.compile(r'^(?P<number>\d+)_(?P<name>.+)$')


@dataclass
class MigrationSource:
    """A migration shipped by the template set, at its template destination."""
    original_dest: str
    content: bytes


@dataclass
class PlannedMigration:
    """A new scaffold migration and the destination it will be written to."""
    original_dest: str
    dest: str
    content: bytes

    @property
    def original_filename(self) -> str:
        return PurePosixPath(self.original_dest).name


def parse_migration_number(filename: str) -> Optional[int]:
    """Return the sequence number of a migration filename, or None."""
    match = MIGRATION_FILENAME_RE.match(filename)
    if not match:
        return None
    return int(match.group('number'))


def get_migration_number(dest: str) -> Optional[int]:
    """Return the sequence number of a project-relative migration path, or None.

    >>> get_migration_number('storage/d1/migrations/005_error.sql')
    5
    """
    return parse_migration_number(PurePosixPath(dest).name)


def is_migration_path(dest: str, migrations_dir: str) -> bool:
    """True if dest is a numbered file directly inside migrations_dir."""
    path = PurePosixPath(dest)
    if path.parent != PurePosixPath(migrations_dir):
        return False
    return parse_migration_number(path.name) is not None


def renumber_migration(filename: str, number: int) -> str:
    """Swap the numeric prefix of filename, keeping its zero-padding width.

    >>> renumber_migration('005_error_collection.sql', 12)
    '012_error_collection.sql'
    """
    match = MIGRATION_FILENAME_RE.match(filename)
    if not match:
        raise ValueError(f"Not a migration filename: {filename}")
    width = len(match.group('number'))
    return f"{number:0{width}d}_{match.group('name')}"


def find_highest_migration(migrations_dir: Path) -> int:
    """Return the highest migration number present in a directory.

    Covers both scaffold-emitted and user-authored migrations. A missing
    directory counts as 0. An unreadable one also counts as 0, with a
    warning, so a permissions glitch doesn't abort the whole upgrade.
    """
    migrations_dir = Path(migrations_dir)
    try:
        # exists() raises too when a parent directory can't be searched
        if not migrations_dir.exists():
            logger.debug(f"No migrations directory at {migrations_dir}")
            return 0
        entries = list(migrations_dir.iterdir())
    except OSError as e:
        logger.warning(
            f"Could not read migrations directory {migrations_dir}: {e}. "
            f"Assuming no migrations on disk; check numbering after the upgrade."
        )
        return 0

    highest = 0
    for entry in entries:
        number = parse_migration_number(entry.name)
        if number is None:
            continue
        if not entry.is_file():
            continue
        highest = max(highest, number)
    return highest


def highest_source_migration(sources: Iterable[MigrationSource]) -> int:
    """Greatest source sequence number in a set of template migrations."""
    numbers = [get_migration_number(source.original_dest) for source in sources]
    return max((n for n in numbers if n is not None), default=0)


def plan_migrations(
    sources: List[MigrationSource],
    highest_scaffold_migration: int,
    highest_on_disk: int,
) -> List[PlannedMigration]:
    """Plan which template migrations are new and what numbers they get.

    Args:
        sources: Migrations in the upcoming template set
        highest_scaffold_migration: Manifest high-water mark of emitted scaffold migrations
        highest_on_disk: Highest number currently in the project's migrations directory

    Returns:
        Planned migrations in source order, numbered consecutively from
        max(highest_scaffold_migration, highest_on_disk) + 1. Empty if
        every source migration has already been emitted.
    """
    pending = []
    for source in sources:
        number = get_migration_number(source.original_dest)
        if number is not None and number > highest_scaffold_migration:
            pending.append((number, source))

    # sorted() is stable, so equal source numbers keep template order
    pending = sorted(pending, key=lambda item: item[0])

    next_number = max(highest_scaffold_migration, highest_on_disk) + 1
    planned: List[PlannedMigration] = []
    for _, source in pending:
        original = PurePosixPath(source.original_dest)
        new_name = renumber_migration(original.name, next_number)
        planned.append(
            PlannedMigration(
                original_dest=source.original_dest,
                dest=str(original.with_name(new_name)),
                content=source.content,
            )
        )
        next_number += 1

    return planned
