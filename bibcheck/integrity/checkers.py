"""Integrity checkers for bibliography entries.

Each checker inspects one entry and returns zero or more messages. Checkers
are independent of each other, keep no state between calls and never modify
the entry. A field that is absent never produces a message.

Most rules look at a single field; they derive from ``FieldChecker`` and only
implement ``check_value``. Rules that walk every field of an entry implement
``check`` directly.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from abc import ABC, abstractmethod

from bibcheck.core.fields import FieldName, FieldProperties, FieldProperty
from bibcheck.core.filefield import parse_file_field
from bibcheck.core.identifiers import ISBN, ISSN
from bibcheck.core.models import BibDatabase, Entry
from bibcheck.integrity.messages import IntegrityMessage
from bibcheck.storage.files import FileDirectoryPreferences, FileResolver

logger = logging.getLogger(__name__)


class Checker(ABC):
    """Base checker interface."""

    @abstractmethod
    def check(self, entry: Entry) -> list[IntegrityMessage]:
        """Check an entry and return the messages found."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FieldChecker(Checker):
    """Checker for a single field that reports at most one message."""

    def __init__(self, field: str):
        self.field = field

    @abstractmethod
    def check_value(self, value: str) -> str | None:
        """Return a complaint about a present value, or None if it is fine."""
        pass

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        value = entry.get_field(self.field)
        if value is None:
            return []

        complaint = self.check_value(value)
        if complaint is None:
            return []
        return [IntegrityMessage(complaint, entry, self.field)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field!r})"


class TypeChecker(Checker):
    """Proceedings volumes as a whole have no page numbers."""

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        if not entry.has_field(FieldName.PAGES):
            return []

        if entry.type.lower() == "proceedings":
            return [
                IntegrityMessage(
                    "wrong entry type as proceedings has page numbers",
                    entry,
                    FieldName.PAGES,
                )
            ]
        return []


class BooktitleChecker(FieldChecker):
    """Flags book titles cut off after "Conference on"."""

    def __init__(self):
        super().__init__(FieldName.BOOKTITLE)

    def check_value(self, value: str) -> str | None:
        if value.strip().lower().endswith("conference on"):
            return "booktitle ends with 'conference on'"
        return None


class AbbreviationChecker(FieldChecker):
    """Journal and book names should be written out in full."""

    def check_value(self, value: str) -> str | None:
        if "." in value:
            return "abbreviation detected"
        return None


class AuthorNameChecker(Checker):
    """Name lists must not start or end with a dangling separator.

    Every present field classified as holding person names is checked on its
    own.
    """

    def __init__(self, field_properties: FieldProperties):
        self.field_properties = field_properties

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        results = []
        for field, value in entry.fields.items():
            if not self.field_properties.has(field, FieldProperty.PERSON_NAMES):
                continue

            normalized = value.strip().lower()
            if normalized.startswith(("and ", ",")):
                results.append(
                    IntegrityMessage("should start with a name", entry, field)
                )
            elif normalized.endswith((" and", ",")):
                results.append(
                    IntegrityMessage("should end with a name", entry, field)
                )
        return results


class BracketChecker(FieldChecker):
    """Curly brackets in a field must balance."""

    def check_value(self, value: str) -> str | None:
        depth = 0
        for char in value.strip():
            if char == "{":
                depth += 1
            elif char == "}":
                if depth == 0:
                    return "unexpected closing curly bracket"
                depth -= 1

        if depth > 0:
            return "unexpected opening curly bracket"
        return None


class TitleChecker(FieldChecker):
    """Capital letters in a BibTeX title must be protected by braces.

    BibTeX styles lower-case titles, so any capital that should survive has
    to sit inside ``{...}``. The very first character is exempt unless the
    title starts with a brace. Brace groups are removed innermost first until
    none remain; whatever is left must not contain upper- or title-case
    letters.
    """

    INSIDE_CURLY_BRACKETS = re.compile(r"\{[^{}]*\}")

    def __init__(self):
        super().__init__(FieldName.TITLE)

    def check_value(self, value: str) -> str | None:
        trimmed = value.strip()
        unprotected = trimmed if trimmed.startswith("{") else trimmed[1:]

        while True:
            stripped = self.INSIDE_CURLY_BRACKETS.sub("", unprotected)
            if stripped == unprotected:
                break
            unprotected = stripped

        if any(unicodedata.category(char) in ("Lu", "Lt") for char in unprotected):
            return "large capitals are not masked using curly brackets {}"
        return None


class YearChecker(FieldChecker):
    """A year must contain a run of exactly four digits."""

    CONTAINS_FOUR_DIGIT = re.compile(r"(?:[^0-9]|^)[0-9]{4}(?:[^0-9]|$)")

    def __init__(self):
        super().__init__(FieldName.YEAR)

    def check_value(self, value: str) -> str | None:
        if not self.CONTAINS_FOUR_DIGIT.search(value.strip()):
            return "should contain a four digit number"
        return None


class PagesChecker(FieldChecker):
    """Page numbers as the BibTeX manual describes them.

    One or more page numbers or ranges such as ``42--111``, ``7,41,73--97``
    or ``43+``, where ``+`` marks pages that do not form a simple range.
    Ranges use a double dash.
    """

    VALID_PAGE_NUMBER = re.compile(
        r"\d+"  # number
        r"(?:\+|-{2}\d+)?"  # optional + or --number
        r"(?:,\d+(?:\+|-{2}\d+)?)*",  # more of the same after commas
        re.ASCII,
    )

    def __init__(self):
        super().__init__(FieldName.PAGES)

    def check_value(self, value: str) -> str | None:
        if not self.VALID_PAGE_NUMBER.fullmatch(value.strip()):
            return "should contain a valid page number range"
        return None


class BiblatexPagesChecker(PagesChecker):
    """Same as ``PagesChecker`` but a single dash also forms a range."""

    VALID_PAGE_NUMBER = re.compile(
        r"\d+(?:\+|-{1,2}\d+)?(?:,\d+(?:\+|-{1,2}\d+)?)*", re.ASCII
    )


class BibStringChecker(Checker):
    """Unescaped ``#`` characters must come in pairs.

    ``#`` delimits string concatenation and macro references, so an odd
    count means an unterminated macro. Verbatim fields are skipped.
    """

    UNESCAPED_HASH = re.compile(r"(?<!\\)#")

    def __init__(self, field_properties: FieldProperties):
        self.field_properties = field_properties

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        results = []
        for field, value in entry.fields.items():
            if self.field_properties.has(field, FieldProperty.VERBATIM):
                continue

            hash_count = len(self.UNESCAPED_HASH.findall(value))
            if hash_count % 2 == 1:
                results.append(
                    IntegrityMessage("odd number of unescaped '#'", entry, field)
                )
        return results


class HTMLCharacterChecker(Checker):
    """Fields should not contain HTML entities such as ``&amp;``."""

    HTML_CHARACTER_PATTERN = re.compile(r"&[#A-Za-z0-9]+;")

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        return [
            IntegrityMessage("HTML encoded character found", entry, field)
            for field, value in entry.fields.items()
            if self.HTML_CHARACTER_PATTERN.search(value)
        ]


class ASCIICharacterChecker(Checker):
    """BibTeX fields should only contain 7-bit ASCII characters."""

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        return [
            IntegrityMessage("Non-ASCII encoded character found", entry, field)
            for field, value in entry.fields.items()
            if not value.isascii()
        ]


class UrlChecker(FieldChecker):
    """URLs must name their protocol."""

    def __init__(self):
        super().__init__(FieldName.URL)

    def check_value(self, value: str) -> str | None:
        if "://" not in value:
            return "should contain a protocol: http[s]://, file://, ftp://, ..."
        return None


class FileChecker(Checker):
    """Local file links must point at existing files.

    Remote ``http(s)`` links and records without a link are not checked.
    Only the first broken link is reported.
    """

    def __init__(
        self,
        database: BibDatabase,
        preferences: FileDirectoryPreferences,
        resolver: FileResolver | None = None,
    ):
        self.database = database
        self.preferences = preferences
        self.resolver = resolver or FileResolver()

    def check(self, entry: Entry) -> list[IntegrityMessage]:
        value = entry.get_field(FieldName.FILE)
        if value is None:
            return []

        for parsed in parse_file_field(value):
            if parsed.is_online or not parsed.link:
                continue
            if not self._exists(parsed.link):
                return [
                    IntegrityMessage(
                        "link should refer to a correct file path",
                        entry,
                        FieldName.FILE,
                    )
                ]
        return []

    def _exists(self, link: str) -> bool:
        try:
            path = self.resolver.resolve(self.database, link, self.preferences)
            return path is not None and path.exists()
        except OSError as e:
            logger.warning(f"Could not check linked file {link}: {e}")
            return False


class ISSNChecker(FieldChecker):
    """ISSNs must be well formed and carry a correct check digit."""

    def __init__(self):
        super().__init__(FieldName.ISSN)

    def check_value(self, value: str) -> str | None:
        issn = ISSN(value)
        if not issn.is_valid_format():
            return "incorrect format"
        if not issn.is_valid_checksum():
            return "incorrect control digit"
        return None


class ISBNChecker(FieldChecker):
    """ISBNs must be well formed and carry a correct check digit."""

    def __init__(self):
        super().__init__(FieldName.ISBN)

    def check_value(self, value: str) -> str | None:
        isbn = ISBN(value)
        if not isbn.is_valid_format():
            return "incorrect format"
        if not isbn.is_valid_checksum():
            return "incorrect control digit"
        return None
