"""
Schema Validation Utilities

Validates the template catalog data file and host settings mappings
against the JSON schemas shipped next to this module.

- `validate_catalog()` fails fast: the catalog file is authored data and a
  schema violation is a packaging bug.
- `settings_errors()` never raises: it reports which settings keys are
  malformed so the caller can fall back to defaults for those keys.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping

import jsonschema


# Schema version constants
CATALOG_SCHEMA_VERSION = 1  # v1: compact [row, col, row_span, col_span] cells


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


@lru_cache(maxsize=None)
def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    schema_path = Path(__file__).parent / f"{name}.schema.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")
    with open(schema_path, "r", encoding="utf-8") as f:
        return json.load(f)


def _validator(name: str) -> jsonschema.Draft7Validator:
    return jsonschema.Draft7Validator(_load_schema(name))


def _format_path(error: jsonschema.ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path)


def validate_catalog(data: Mapping[str, Any]) -> None:
    """
    Validate catalog data against the catalog schema.

    Only the structure is checked here. Geometric validity (overlaps,
    coverage) is the job of engine.validation.

    Args:
        data: Parsed templates.json content

    Raises:
        ValidationError: If data is invalid or has an unsupported version
    """
    errors = sorted(_validator("catalog").iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        raise ValidationError(
            f"Catalog schema validation failed: {first.message}",
            path=_format_path(first),
            errors=[f"{_format_path(e) or '<root>'}: {e.message}" for e in errors],
        )

    version = data.get("catalog_schema_version")
    if version != CATALOG_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported catalog schema version: {version} (expected {CATALOG_SCHEMA_VERSION})",
            path="catalog_schema_version",
        )


def settings_errors(data: Mapping[str, Any]) -> Dict[str, str]:
    """
    Report malformed keys in a host settings mapping.

    Unknown keys are allowed (hosts carry UI-only settings in the same
    mapping).

    Args:
        data: Host settings mapping (camelCase keys)

    Returns:
        Mapping of top-level key -> first error message. Empty when valid.
    """
    found: Dict[str, str] = {}
    for error in _validator("settings").iter_errors(dict(data)):
        key = str(error.absolute_path[0]) if error.absolute_path else "<root>"
        found.setdefault(key, error.message)
    return found


def validate_settings(data: Mapping[str, Any]) -> None:
    """
    Strictly validate a host settings mapping.

    Raises:
        ValidationError: If any key is malformed
    """
    found = settings_errors(data)
    if found:
        key = sorted(found)[0]
        raise ValidationError(
            f"Invalid setting {key!r}: {found[key]}",
            path=key,
            errors=[f"{k}: {msg}" for k, msg in sorted(found.items())],
        )


def error_list(found: Mapping[str, str]) -> List[str]:
    """Flatten a settings_errors() result for logging."""
    return [f"{key}: {message}" for key, message in sorted(found.items())]
