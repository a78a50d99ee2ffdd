"""Runs the integrity checkers over a bibliography database.

The checker sequence is fixed. The database mode decides which of the
dialect-specific checkers take part: BibTeX databases get the title
capitalization, strict page range and ASCII checks, biblatex databases get
the relaxed page range check instead. Messages come back in entry order and,
within one entry, in checker order.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from bibcheck.core.fields import FieldName, FieldProperties
from bibcheck.core.models import BibDatabase, Entry
from bibcheck.integrity.checkers import (
    AbbreviationChecker,
    ASCIICharacterChecker,
    AuthorNameChecker,
    BiblatexPagesChecker,
    BibStringChecker,
    BooktitleChecker,
    BracketChecker,
    Checker,
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
from bibcheck.storage.files import FileDirectoryPreferences, FileResolver

logger = logging.getLogger(__name__)


class IntegrityCheck:
    """Checks every entry of a database against the full checker set."""

    def __init__(
        self,
        database: BibDatabase,
        file_preferences: FileDirectoryPreferences | None = None,
        field_properties: FieldProperties | None = None,
        resolver: FileResolver | None = None,
    ):
        if database is None:
            raise ValueError("database is required")
        self.database = database
        self.file_preferences = file_preferences or FileDirectoryPreferences()
        self.field_properties = field_properties or FieldProperties()
        self.resolver = resolver or FileResolver()
        self._checkers = self._build_checkers()

    def _build_checkers(self) -> list[Checker]:
        checkers: list[Checker] = [AuthorNameChecker(self.field_properties)]

        if self.database.is_biblatex_mode:
            checkers.append(BiblatexPagesChecker())
        else:
            checkers.extend([TitleChecker(), PagesChecker(), ASCIICharacterChecker()])

        checkers.extend(
            [
                BracketChecker(FieldName.TITLE),
                YearChecker(),
                UrlChecker(),
                FileChecker(self.database, self.file_preferences, self.resolver),
                TypeChecker(),
            ]
        )
        checkers.extend(
            AbbreviationChecker(field)
            for field in self.field_properties.journal_name_fields()
        )
        checkers.extend(
            AbbreviationChecker(field)
            for field in self.field_properties.book_name_fields()
        )
        checkers.extend(
            [
                BibStringChecker(self.field_properties),
                HTMLCharacterChecker(),
                BooktitleChecker(),
                ISSNChecker(),
                ISBNChecker(),
            ]
        )
        return checkers

    def checkers(self) -> list[Checker]:
        """The checkers applied to each entry, in invocation order."""
        return list(self._checkers)

    def check_entry(self, entry: Entry | None) -> list[IntegrityMessage]:
        """Run all checkers on one entry."""
        if entry is None:
            return []

        results: list[IntegrityMessage] = []
        for checker in self._checkers:
            results.extend(checker.check(entry))

        if results:
            logger.debug(f"{entry.key}: {len(results)} issue(s)")
        return results

    def check_entries(
        self, entries: Iterable[Entry | None], workers: int = 1
    ) -> list[IntegrityMessage]:
        """Check entries, optionally in parallel, keeping entry order."""
        entries = list(entries)
        if workers > 1 and len(entries) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                per_entry = list(executor.map(self.check_entry, entries))
        else:
            per_entry = [self.check_entry(entry) for entry in entries]

        return [message for messages in per_entry for message in messages]

    def check_database(self, workers: int = 1) -> list[IntegrityMessage]:
        """Check every entry in the database."""
        start = time.perf_counter()
        results = self.check_entries(self.database.entries, workers=workers)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            f"Checked {len(self.database.entries)} entries "
            f"({self.database.mode.value} mode): {len(results)} issue(s) "
            f"in {elapsed_ms:.0f} ms"
        )
        return results
