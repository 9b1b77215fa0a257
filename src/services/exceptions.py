"""Service layer exception classes for Gestio.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── PackageNotFoundError
    ├── PackageWriteError
    └── RowImportError
        ├── MissingRequiredField
        └── UnresolvedReference

PackageNotFoundError and PackageWriteError abort a whole migration package
operation. RowImportError subclasses never escape the importer: they are
counted as row errors and processing moves on to the next row.
"""

from pathlib import Path
from typing import Optional, Union


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


# Migration package exceptions


class PackageNotFoundError(ServiceError):
    """Raised when the migration package directory does not exist.

    Args:
        directory: The directory that was requested

    Example:
        >>> raise PackageNotFoundError("/tmp/missing")
        PackageNotFoundError: Migration package directory not found: /tmp/missing
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = str(directory)
        super().__init__(f"Migration package directory not found: {self.directory}")


class PackageWriteError(ServiceError):
    """Raised when the export target cannot be created or written.

    Args:
        path: The directory or file that could not be written
        original_error: The underlying OSError
    """

    def __init__(self, path: Union[str, Path], original_error: Optional[Exception] = None):
        self.path = str(path)
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"Cannot write migration package at {self.path}{detail}")


class RowImportError(ServiceError):
    """Raised for a single package row that cannot be applied.

    Args:
        entity_type: Entity type of the row (e.g. "Supplier")
        message: Description of the problem
    """

    def __init__(self, entity_type: str, message: str):
        self.entity_type = entity_type
        super().__init__(f"{entity_type}: {message}")


class MissingRequiredField(RowImportError):
    """Raised when a row would create an entity without a required value.

    Example:
        >>> raise MissingRequiredField("Supplier", "RagioneSociale")
        MissingRequiredField: Supplier: missing required field 'RagioneSociale'
    """

    def __init__(self, entity_type: str, field_name: str):
        self.field_name = field_name
        super().__init__(entity_type, f"missing required field '{field_name}'")


class UnresolvedReference(RowImportError):
    """Raised when a mandatory natural-key reference has no local match.

    Example:
        >>> raise UnresolvedReference("Contract", "Client", "C999")
        UnresolvedReference: Contract: Client 'C999' not found
    """

    def __init__(self, entity_type: str, target_type: str, key: str):
        self.target_type = target_type
        self.key = key
        super().__init__(entity_type, f"{target_type} '{key}' not found")
