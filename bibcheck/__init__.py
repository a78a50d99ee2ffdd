"""Integrity checking for BibTeX and biblatex bibliographies."""

__version__ = "0.1.0"

from bibcheck.core.models import BibDatabase, BibDatabaseMode, Entry
from bibcheck.integrity.check import IntegrityCheck
from bibcheck.integrity.messages import IntegrityMessage

__all__ = [
    "__version__",
    "BibDatabase",
    "BibDatabaseMode",
    "Entry",
    "IntegrityCheck",
    "IntegrityMessage",
]
