"""Reading bibliography files and locating linked files."""

from bibcheck.storage.files import FileDirectoryPreferences, FileResolver
from bibcheck.storage.parser import BibtexParser, ParseError, parse_bibtex

__all__ = [
    "BibtexParser",
    "ParseError",
    "parse_bibtex",
    "FileDirectoryPreferences",
    "FileResolver",
]
