"""Tracked-file drift detection.

Compares each file recorded in a project's manifest with what is on disk now.
Read-only; `platform-admin status` uses it to show which generated files the
next upgrade will leave alone.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from platform_admin.core.hasher import hash_file
from platform_admin.models.manifest import Manifest


class DriftStatus:
    """Drift states for a tracked file."""

    MODIFIED = "modified"
    MISSING = "missing"


@dataclass
class DriftItem:
    """A tracked file that no longer matches its recorded hash."""

    path: str
    status: str
    recorded_hash: str
    current_hash: Optional[str] = None  # None when the file is gone

    @property
    def message(self) -> str:
        if self.status == DriftStatus.MISSING:
            return f"{self.path} is tracked but missing on disk"
        return f"{self.path} changed since it was generated"


@dataclass
class DriftReport:
    """Drifted files plus the paths that still match."""

    items: List[DriftItem] = field(default_factory=list)
    clean: List[str] = field(default_factory=list)

    def is_clean(self) -> bool:
        return not self.items

    def summary(self) -> Dict[str, int]:
        return dict(Counter(item.status for item in self.items))


class DriftEngine:
    """Hash every tracked file and compare it with the manifest."""

    def __init__(self, project_dir: Path, manifest: Manifest):
        self.project_dir = Path(project_dir)
        self.manifest = manifest

    def run(self) -> DriftReport:
        report = DriftReport()
        for path, recorded in sorted(self.manifest.files.items()):
            item = self._check(path, recorded)
            if item is None:
                report.clean.append(path)
            else:
                report.items.append(item)
        return report

    def _check(self, path: str, recorded: str) -> Optional[DriftItem]:
        disk_path = self.project_dir / path
        if not disk_path.is_file():
            return DriftItem(path, DriftStatus.MISSING, recorded)

        current = hash_file(disk_path)
        if current == recorded:
            return None
        return DriftItem(path, DriftStatus.MODIFIED, recorded, current)


def summarize_drift_report(report: DriftReport, limit: int = 5) -> Dict[str, object]:
    """Return counts, the number of clean files and the first `limit` findings."""
    return {
        "counts": report.summary(),
        "clean": len(report.clean),
        "samples": [
            {"status": item.status, "path": item.path, "message": item.message}
            for item in report.items[:limit]
        ],
    }
