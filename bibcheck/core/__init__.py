"""Core domain models for bibliography integrity checking."""

from bibcheck.core.fields import (
    DEFAULT_FIELD_PROPERTIES,
    FieldName,
    FieldProperties,
    FieldProperty,
)
from bibcheck.core.filefield import ParsedFileField, parse_file_field
from bibcheck.core.identifiers import ISBN, ISSN
from bibcheck.core.models import BibDatabase, BibDatabaseMode, Entry

__all__ = [
    # Models
    "Entry",
    "BibDatabase",
    "BibDatabaseMode",
    # Fields
    "FieldName",
    "FieldProperty",
    "FieldProperties",
    "DEFAULT_FIELD_PROPERTIES",
    # File links
    "ParsedFileField",
    "parse_file_field",
    # Identifiers
    "ISSN",
    "ISBN",
]
