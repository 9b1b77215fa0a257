"""
Result counters for migration package import.

Counters are plain and mutable: each import stage fills a StageCounts and
the orchestrator folds it into the package-wide PackageImportResult. Row
level detail is logged, not retained here.
"""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class StageCounts:
    """Outcome counters of one import stage (one package file)."""

    entity_type: str
    file_name: str
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    deferred_resolved: int = 0

    def add_inserted(self):
        self.inserted += 1

    def add_updated(self):
        self.updated += 1

    def add_skip(self):
        self.skipped += 1

    def add_error(self):
        self.errors += 1

    @property
    def rows_processed(self) -> int:
        """Number of data rows that reached an outcome."""
        return self.inserted + self.updated + self.skipped + self.errors

    def to_dict(self) -> Dict:
        return {
            "entity_type": self.entity_type,
            "file_name": self.file_name,
            "inserted": self.inserted,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "deferred_resolved": self.deferred_resolved,
        }


@dataclass
class PackageImportResult:
    """
    Result of a migration package import.

    Attributes:
        files_read: Package files found and processed
        inserted: Rows that created a new entity
        updated: Rows that updated an existing entity
        skipped: Rows ignored (blank key, unresolvable owner, duplicate fingerprint)
        errors: Rows rejected (missing required value, unreadable cell,
            unresolvable mandatory reference, storage failure)
        stages: Per-file counters in processing order
    """

    files_read: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    stages: List[StageCounts] = field(default_factory=list)

    def add_stage(self, stage: StageCounts):
        """Fold the counters of a completed stage into the totals."""
        self.files_read += 1
        self.inserted += stage.inserted
        self.updated += stage.updated
        self.skipped += stage.skipped
        self.errors += stage.errors
        self.stages.append(stage)

    @property
    def entity_counts(self) -> Dict[str, Dict[str, int]]:
        """Counters per entity type."""
        counts: Dict[str, Dict[str, int]] = {}
        for stage in self.stages:
            entry = counts.setdefault(
                stage.entity_type, {"inserted": 0, "updated": 0, "skipped": 0, "errors": 0}
            )
            entry["inserted"] += stage.inserted
            entry["updated"] += stage.updated
            entry["skipped"] += stage.skipped
            entry["errors"] += stage.errors
        return counts

    @property
    def has_errors(self) -> bool:
        return self.errors > 0

    def to_dict(self) -> Dict:
        return {
            "files_read": self.files_read,
            "inserted": self.inserted,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "entity_counts": self.entity_counts,
        }

    def get_summary(self) -> str:
        """Get a user-friendly summary string of the import results."""
        lines = [
            "=" * 60,
            "Migration Package Import Summary",
            "=" * 60,
        ]

        if self.stages:
            for stage in self.stages:
                parts = []
                if stage.inserted > 0:
                    parts.append(f"{stage.inserted} inserted")
                if stage.updated > 0:
                    parts.append(f"{stage.updated} updated")
                if stage.skipped > 0:
                    parts.append(f"{stage.skipped} skipped")
                if stage.errors > 0:
                    parts.append(f"{stage.errors} errors")
                if parts:
                    lines.append(f"  {stage.file_name}: {', '.join(parts)}")
            lines.append("")

        lines.extend([
            f"Files read: {self.files_read}",
            f"Inserted:   {self.inserted}",
            f"Updated:    {self.updated}",
            f"Skipped:    {self.skipped}",
            f"Errors:     {self.errors}",
        ])

        lines.append("=" * 60)
        return "\n".join(lines)
