"""
Package export: writes every entity type to its CSV file plus a manifest.

The natural-key directory is built for all types before the first file is
written, so every foreign key can be rendered as the referenced row's key
regardless of where the target sits in the file order. Files are written in
dependency order; manifest.json records checksums for validate_package().
"""

import hashlib
import json
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import (
    APP_NAME,
    APP_VERSION,
    PACKAGE_FORMAT_VERSION,
    PACKAGE_MANIFEST_FILENAME,
)
from src.utils.datetime_utils import utc_now
from .catalog import DESCRIPTORS, build_directory
from .csv_codec import read_csv_file, write_csv_file
from .descriptors import EntityDescriptor
from .key_directory import KeyDirectory

logger = get_service_logger(__name__)


# ============================================================================
# Data Classes
# ============================================================================


@dataclass
class FileEntry:
    """Metadata for a single exported file."""

    filename: str
    entity_type: str
    record_count: int
    sha256: str
    dependencies: List[str]
    import_order: int

    def to_dict(self) -> Dict:
        return {
            "filename": self.filename,
            "entity_type": self.entity_type,
            "record_count": self.record_count,
            "sha256": self.sha256,
            "dependencies": self.dependencies,
            "import_order": self.import_order,
        }


@dataclass
class ExportManifest:
    """Manifest for a migration package."""

    version: str = PACKAGE_FORMAT_VERSION
    export_date: str = ""
    source: str = ""
    files: List[FileEntry] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(f.record_count for f in self.files)

    def to_dict(self) -> Dict:
        """Convert manifest to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "export_date": self.export_date,
            "source": self.source,
            "files": [f.to_dict() for f in self.files],
        }


# ============================================================================
# Helper Functions
# ============================================================================


def _calculate_checksum(file_path: Path) -> str:
    """Calculate SHA256 checksum of a file."""
    with open(file_path, "rb") as f:
        return hashlib.sha256(f.read()).hexdigest()


def _dependencies(descriptor: EntityDescriptor) -> List[str]:
    """Entity types referenced by a descriptor, self references excluded."""
    targets = []
    for ref in descriptor.references:
        if ref.target != descriptor.entity_type and ref.target not in targets:
            targets.append(ref.target)
    return targets


def _export_entity(
    output_dir: Path,
    descriptor: EntityDescriptor,
    directory: KeyDirectory,
    import_order: int,
    session: Session,
) -> FileEntry:
    """Write one entity type to its package file and return its FileEntry."""
    entities = session.query(descriptor.model).order_by(descriptor.model.id).all()
    rows = [descriptor.export_row(entity, directory) for entity in entities]

    file_path = output_dir / descriptor.file_name
    count = write_csv_file(file_path, descriptor.header, rows)

    return FileEntry(
        filename=descriptor.file_name,
        entity_type=descriptor.entity_type,
        record_count=count,
        sha256=_calculate_checksum(file_path),
        dependencies=_dependencies(descriptor),
        import_order=import_order,
    )


# ============================================================================
# Export
# ============================================================================


def write_package(
    session: Session,
    output_dir: Path,
    create_zip: bool = False,
) -> ExportManifest:
    """
    Write the whole database as a migration package.

    Args:
        session: Session to read from
        output_dir: Package directory (created when missing)
        create_zip: Also write a sibling ZIP archive of the package

    Returns:
        ExportManifest describing the written files

    Raises:
        OSError: If the directory or a file cannot be written
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    manifest = ExportManifest(
        export_date=utc_now().isoformat(),
        source=f"{APP_NAME} v{APP_VERSION}",
    )

    directory = build_directory(session)
    for import_order, descriptor in enumerate(DESCRIPTORS, start=1):
        entry = _export_entity(output_dir, descriptor, directory, import_order, session)
        manifest.files.append(entry)
        log_operation(
            logger,
            operation="export_entity",
            outcome="success",
            entity=descriptor.entity_type,
            package_file=descriptor.file_name,
            records=entry.record_count,
        )

    manifest_path = output_dir / PACKAGE_MANIFEST_FILENAME
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest.to_dict(), f, indent=2, ensure_ascii=False)

    if create_zip:
        zip_path = output_dir.parent / f"{output_dir.name}.zip"
        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for file in sorted(output_dir.iterdir()):
                zf.write(file, file.name)

    return manifest


# ============================================================================
# Validation
# ============================================================================


VALID = "ok"
MISSING = "missing"
MODIFIED = "modified"
COUNT_MISMATCH = "count_mismatch"


def _check_entry(package_dir: Path, entry: Dict) -> Tuple[str, Optional[str]]:
    """Status of one manifest entry, plus a message when it is not VALID."""
    filename = entry["filename"]
    file_path = package_dir / filename
    if not file_path.is_file():
        return MISSING, f"{entry['entity_type']}: {filename} not found"

    actual = _calculate_checksum(file_path)
    if actual != entry["sha256"]:
        return MODIFIED, (
            f"{entry['entity_type']}: {filename} was modified "
            f"(sha256 {actual[:8]}, manifest {entry['sha256'][:8]})"
        )

    records = len(read_csv_file(file_path))
    if records != entry["record_count"]:
        return COUNT_MISMATCH, (
            f"{entry['entity_type']}: {filename} holds {records} records, "
            f"manifest says {entry['record_count']}"
        )
    return VALID, None


def validate_package(package_path: str) -> Dict:
    """
    Compare a package directory (or its ZIP archive) with its manifest.

    Each entity file listed in the manifest must exist, match its SHA-256
    and hold the recorded number of data records.

    Returns:
        Dictionary with:
        - valid: True when every entity file checks out
        - files_checked: Files found and read
        - entities: Status per entity type ("ok", "missing", "modified",
          "count_mismatch")
        - errors: One message per failing entity type
    """
    package_dir = Path(package_path)

    if package_dir.suffix == ".zip":
        with tempfile.TemporaryDirectory() as tmp:
            with zipfile.ZipFile(package_dir, "r") as zf:
                zf.extractall(tmp)
            return validate_package(tmp)

    manifest_path = package_dir / PACKAGE_MANIFEST_FILENAME
    if not manifest_path.exists():
        return {
            "valid": False,
            "files_checked": 0,
            "entities": {},
            "errors": [f"{PACKAGE_MANIFEST_FILENAME} not found"],
        }

    with open(manifest_path, "r", encoding="utf-8") as f:
        entries = json.load(f).get("files", [])

    entities: Dict[str, str] = {}
    errors: List[str] = []
    for entry in entries:
        status, message = _check_entry(package_dir, entry)
        entities[entry["entity_type"]] = status
        if message is not None:
            errors.append(message)

    return {
        "valid": not errors,
        "files_checked": sum(1 for status in entities.values() if status != MISSING),
        "entities": entities,
        "errors": errors,
    }
