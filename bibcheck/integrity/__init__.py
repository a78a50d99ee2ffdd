"""Integrity checking for bibliography entries.

This package provides:
- A fixed battery of independent checkers (names, brackets, capitalization,
  years, page ranges, macro delimiters, encodings, URLs, linked files,
  ISSN and ISBN)
- An orchestrator running the checkers over a whole database
- Report formatters (JSON, CSV, Markdown)
"""

from bibcheck.integrity.check import IntegrityCheck
from bibcheck.integrity.checkers import (
    AbbreviationChecker,
    ASCIICharacterChecker,
    AuthorNameChecker,
    BiblatexPagesChecker,
    BibStringChecker,
    BooktitleChecker,
    BracketChecker,
    Checker,
    FieldChecker,
    FileChecker,
    HTMLCharacterChecker,
    ISBNChecker,
    ISSNChecker,
    PagesChecker,
    TitleChecker,
    TypeChecker,
    UrlChecker,
    YearChecker,
)
from bibcheck.integrity.messages import IntegrityMessage
from bibcheck.integrity.reporting import (
    CSVReporter,
    IntegrityReport,
    JSONReporter,
    MarkdownReporter,
    ReportFormatter,
    get_reporter,
)

__all__ = [
    # Orchestration
    "IntegrityCheck",
    "IntegrityMessage",
    # Checkers
    "Checker",
    "FieldChecker",
    "AbbreviationChecker",
    "ASCIICharacterChecker",
    "AuthorNameChecker",
    "BiblatexPagesChecker",
    "BibStringChecker",
    "BooktitleChecker",
    "BracketChecker",
    "FileChecker",
    "HTMLCharacterChecker",
    "ISBNChecker",
    "ISSNChecker",
    "PagesChecker",
    "TitleChecker",
    "TypeChecker",
    "UrlChecker",
    "YearChecker",
    # Reporting
    "IntegrityReport",
    "ReportFormatter",
    "JSONReporter",
    "CSVReporter",
    "MarkdownReporter",
    "get_reporter",
]
