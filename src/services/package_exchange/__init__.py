"""
Migration package engine: relational snapshot exchange through CSV files.

This module provides:
- CSV codec for package files (UTF-8 with BOM, ';' separated, quoted)
- Tolerant header lookup and cell value parsing
- Natural-key directory translating surrogate IDs to natural keys and back
- Entity descriptors and the package catalogue in dependency order
- Package export with manifest, and import with per-row savepoints

The public entry points live in src.services.migration_package_service.

Usage:
    from src.services.package_exchange import (
        DESCRIPTORS,
        KeyDirectory,
        PackageImportResult,
        read_package,
        write_package,
    )
"""

from .csv_codec import (
    read_csv_file,
    read_records,
    write_csv_file,
    write_records,
)

from .records import (
    normalize_header,
    CsvTable,
    HeaderMap,
    Record,
)

from .key_directory import (
    composite_key,
    KeyDirectory,
)

from .descriptors import (
    EntityCategory,
    EntityDescriptor,
    Field,
    MergePolicy,
    Reference,
    Requirement,
)

from .catalog import (
    build_directory,
    get_descriptor,
    DESCRIPTORS,
    DESCRIPTORS_BY_TYPE,
    PACKAGE_FILES,
)

from .results import (
    PackageImportResult,
    StageCounts,
)

from .exporter import (
    validate_package,
    write_package,
    ExportManifest,
    FileEntry,
)

from .importer import read_package

__all__ = [
    # CSV codec
    "read_csv_file",
    "read_records",
    "write_csv_file",
    "write_records",
    # Records
    "normalize_header",
    "CsvTable",
    "HeaderMap",
    "Record",
    # Natural keys
    "composite_key",
    "KeyDirectory",
    # Descriptors
    "EntityCategory",
    "EntityDescriptor",
    "Field",
    "MergePolicy",
    "Reference",
    "Requirement",
    # Catalogue
    "build_directory",
    "get_descriptor",
    "DESCRIPTORS",
    "DESCRIPTORS_BY_TYPE",
    "PACKAGE_FILES",
    # Results
    "PackageImportResult",
    "StageCounts",
    # Export / import
    "validate_package",
    "write_package",
    "ExportManifest",
    "FileEntry",
    "read_package",
]
