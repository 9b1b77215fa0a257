"""Services package - Business logic layer for Gestio.

This package contains the service modules that provide business logic
and database operations for the application.

Architecture:
- Services: Stateless functions; every public function takes an optional
  session and opens its own session_scope() when none is given
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Service Modules:
- migration_package_service: Whole-database export/import as a directory
  of CSV files (migration package)
- package_exchange: Building blocks of the migration package engine

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured logging helpers
"""
