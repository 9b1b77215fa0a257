"""
Migration Package Service - Whole-database export/import as CSV files.

A migration package is a directory holding one CSV file per entity type
(01_agenti.csv ... 43_registri_iva.csv). Foreign keys are written as the
natural keys of the referenced rows, so a package can be imported into a
different database whose surrogate IDs do not match the source.

Import never deletes. Masters and transactional headers are matched by
natural key and inserted or updated; lines, links and events are appended
unless an identical row is already present. Re-importing the same package
therefore changes nothing.

Usage:
    from src.services.migration_package_service import export_package, import_package

    # Export to a directory (plus a ZIP next to it)
    path = export_package("/backups/migration_2024-12-31", create_zip=True)

    # Import into the current database
    result = import_package("/backups/migration_2024-12-31")
    print(result.get_summary())
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from sqlalchemy.orm import Session

from src.models import (
    Article,
    Client,
    Document,
    JournalEntry,
    Order,
    StockMovement,
    Supplier,
)
from src.services.database import session_scope
from src.services.exceptions import PackageNotFoundError, PackageWriteError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.package_exchange import (
    PackageImportResult,
    read_package,
    validate_package as _validate_package,
    write_package,
)

logger = get_service_logger(__name__)

# Tables that are never empty in a database that has seen real use
_PRIMARY_MODELS = (Client, Supplier, Article, Document, Order, StockMovement, JournalEntry)


# ============================================================================
# Export
# ============================================================================


def export_package(
    target_directory: Union[str, Path],
    session: Optional[Session] = None,
    create_zip: bool = False,
) -> str:
    """
    Export the whole database as a migration package.

    Args:
        target_directory: Package directory; created when missing, existing
            package files are overwritten
        session: Optional SQLAlchemy session for transactional composition
        create_zip: Also write a ZIP archive next to the directory

    Returns:
        Absolute path of the package directory

    Raises:
        ValueError: If target_directory is blank
        PackageWriteError: If the directory or a file cannot be written
    """
    if target_directory is None or not str(target_directory).strip():
        raise ValueError("Target directory is required")

    if session is not None:
        return _export_package_impl(Path(target_directory), create_zip, session)
    with session_scope() as sess:
        return _export_package_impl(Path(target_directory), create_zip, sess)


def _export_package_impl(output_dir: Path, create_zip: bool, session: Session) -> str:
    """Internal implementation of package export."""
    try:
        manifest = write_package(session, output_dir, create_zip=create_zip)
    except OSError as e:
        log_operation(
            logger,
            operation="export_package",
            outcome="error",
            level=logging.ERROR,
            directory=str(output_dir),
            error=str(e),
        )
        raise PackageWriteError(output_dir, e)

    log_operation(
        logger,
        operation="export_package",
        outcome="success",
        directory=str(output_dir),
        files=len(manifest.files),
        records=manifest.total_records,
    )
    return str(output_dir.resolve())


# ============================================================================
# Import
# ============================================================================


def import_package(
    source_directory: Union[str, Path],
    session: Optional[Session] = None,
) -> PackageImportResult:
    """
    Import a migration package into the database.

    Files are processed in dependency order and each one is committed before
    the next is read; a file that is absent from the package is skipped.
    Row problems are counted, never raised.

    Args:
        source_directory: Package directory
        session: Optional SQLAlchemy session for transactional composition

    Returns:
        PackageImportResult with files read and inserted, updated, skipped
        and error row counts

    Raises:
        PackageNotFoundError: If source_directory does not exist
    """
    if (
        source_directory is None
        or not str(source_directory).strip()
        or not Path(source_directory).is_dir()
    ):
        log_operation(
            logger,
            operation="import_package",
            outcome="error",
            level=logging.ERROR,
            directory=str(source_directory),
            error="directory not found",
        )
        raise PackageNotFoundError(source_directory)

    package_dir = Path(source_directory)
    if session is not None:
        return _import_package_impl(package_dir, session)
    with session_scope() as sess:
        return _import_package_impl(package_dir, sess)


def _import_package_impl(package_dir: Path, session: Session) -> PackageImportResult:
    """Internal implementation of package import."""
    result = read_package(session, package_dir)
    log_operation(
        logger,
        operation="import_package",
        outcome="success",
        directory=str(package_dir),
        files_read=result.files_read,
        inserted=result.inserted,
        updated=result.updated,
        skipped=result.skipped,
        errors=result.errors,
    )
    return result


# ============================================================================
# Helpers
# ============================================================================


def validate_package(directory: Union[str, Path]) -> Dict:
    """
    Check the files of a package against its manifest checksums.

    Args:
        directory: Package directory or ZIP archive

    Returns:
        Dictionary with valid, files_checked, entities (status per entity
        type) and errors
    """
    return _validate_package(str(directory))


def is_database_probably_empty(session: Optional[Session] = None) -> bool:
    """
    Cheap check used before offering an import into a fresh database.

    Returns:
        True when none of the main tables holds a row
    """
    if session is not None:
        return _is_database_probably_empty_impl(session)
    with session_scope() as sess:
        return _is_database_probably_empty_impl(sess)


def _is_database_probably_empty_impl(session: Session) -> bool:
    for model in _PRIMARY_MODELS:
        if session.query(model.id).first() is not None:
            return False
    return True
