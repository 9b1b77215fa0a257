"""
Application-wide constants for Gestio.
"""

# ============================================================================
# Application
# ============================================================================

APP_NAME = "Gestio"
APP_VERSION = "0.1.0"

DATABASE_FILENAME = "gestio.db"

# ============================================================================
# Migration Package
# ============================================================================

# Subdirectory of the data directory offered as default package location
MIGRATION_DIRNAME = "migration"

# Field separator of every package CSV file
PACKAGE_SEPARATOR = ";"

# Written next to the CSV files on export; import never reads it
PACKAGE_MANIFEST_FILENAME = "manifest.json"
PACKAGE_FORMAT_VERSION = "1.0"
