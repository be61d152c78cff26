"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_catalog,
    validate_settings,
    settings_errors,
    ValidationError,
    CATALOG_SCHEMA_VERSION,
)

__all__ = [
    "validate_catalog",
    "validate_settings",
    "settings_errors",
    "ValidationError",
    "CATALOG_SCHEMA_VERSION",
]
