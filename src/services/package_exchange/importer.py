"""
Package import orchestrator.

Walks the package files in dependency order. Each present file is applied by
an ImportStage and committed before the next file is read, and the natural
key directory is refreshed from the database so later stages resolve
against what is actually stored. Missing files are skipped.

Deferred references are buffered by the stages and resolved once the stage
they point to has completed: self references right after their own stage,
forward references after the later stage they name.
"""

from pathlib import Path
from typing import List

from sqlalchemy.orm import Session

from src.services.exceptions import PackageNotFoundError
from src.services.logging_utils import get_service_logger, log_operation
from .catalog import DESCRIPTORS, build_directory
from .csv_codec import read_csv_file
from .descriptors import EntityDescriptor
from .key_directory import KeyDirectory
from .results import PackageImportResult, StageCounts
from .stages import ImportStage, PendingReference, resolve_pending

logger = get_service_logger(__name__)


def _run_stage(
    session: Session,
    descriptor: EntityDescriptor,
    package_dir: Path,
    directory: KeyDirectory,
    pending: List[PendingReference],
):
    """Apply one package file; returns its counters, or None when the file is absent."""
    table = read_csv_file(package_dir / descriptor.file_name)
    if table is None:
        log_operation(
            logger,
            operation="import_stage",
            outcome="file_missing",
            entity=descriptor.entity_type,
            package_file=descriptor.file_name,
        )
        return None

    stage = ImportStage(session, descriptor, directory)
    counts = stage.run(table)
    session.commit()

    if descriptor.after_stage is not None:
        descriptor.after_stage(session)
        session.commit()

    directory.refresh(session, descriptor)
    pending.extend(stage.pending)
    return counts


def _log_stage(counts: StageCounts) -> None:
    log_operation(
        logger,
        operation="import_stage",
        outcome="success",
        entity=counts.entity_type,
        package_file=counts.file_name,
        inserted=counts.inserted,
        updated=counts.updated,
        skipped=counts.skipped,
        errors=counts.errors,
    )


def read_package(session: Session, package_dir: Path) -> PackageImportResult:
    """
    Import a migration package directory into the database.

    Args:
        session: Session to write through; committed after every stage
        package_dir: Package directory

    Returns:
        PackageImportResult with totals and per-file counters

    Raises:
        PackageNotFoundError: If the directory does not exist
    """
    if not package_dir.is_dir():
        raise PackageNotFoundError(package_dir)

    result = PackageImportResult()
    directory = build_directory(session)
    pending: List[PendingReference] = []

    for descriptor in DESCRIPTORS:
        counts = _run_stage(session, descriptor, package_dir, directory, pending)

        ready = [p for p in pending if p.trigger == descriptor.entity_type]
        if ready:
            resolve_pending(session, directory, ready)
            session.commit()
            pending = [p for p in pending if p.trigger != descriptor.entity_type]

        if counts is not None:
            _log_stage(counts)
            result.add_stage(counts)

    return result
