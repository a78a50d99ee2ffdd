"""Core data models for bibliography entries and databases.

The models mirror what a BibTeX reader sees in a ``.bib`` file: an entry is
a type tag, a citation key and an ordered map of raw field values. Values
are kept exactly as written (inner braces, macro references and escapes
included) because the integrity checkers reason about that raw text.

Key components:
- Entry: Immutable bibliography entry with raw field values
- BibDatabase: Ordered collection of entries plus dialect mode and metadata
- BibDatabaseMode: BibTeX or biblatex dialect
"""

import enum
from collections.abc import Iterator, Mapping
from pathlib import Path

import msgspec


@enum.unique
class BibDatabaseMode(enum.Enum):
    """Bibliography dialect a database is written for."""

    BIBTEX = "bibtex"
    BIBLATEX = "biblatex"

    @classmethod
    def parse(cls, value: str | None) -> "BibDatabaseMode":
        """Parse a mode name, defaulting to BibTeX."""
        if not value:
            return cls.BIBTEX
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown database mode: {value}") from None


class Entry(msgspec.Struct, frozen=True, kw_only=True):
    """Immutable bibliography entry.

    ``fields`` maps lower-case field names to their raw string values in the
    order they were read. The citation key and entry type are not fields.
    A field that is absent from ``fields`` is different from one holding an
    empty string.
    """

    key: str
    type: str
    fields: dict[str, str] = msgspec.field(default_factory=dict)

    def __post_init__(self) -> None:
        mixed = [name for name in self.fields if name != name.lower()]
        if mixed:
            raise ValueError(
                f"Field names must be lower-case, got {', '.join(mixed)}; "
                "use Entry.create to normalize them"
            )

    @classmethod
    def create(
        cls, key: str, type: str, fields: Mapping[str, str] | None = None
    ) -> "Entry":
        """Build an entry, lower-casing field names.

        When two names differ only in case the first value wins.
        """
        normalized: dict[str, str] = {}
        for name, value in (fields or {}).items():
            normalized.setdefault(name.lower(), value)
        return cls(key=key, type=type, fields=normalized)

    def get_field(self, name: str) -> str | None:
        """Return the raw value of a field, or None if it is absent."""
        return self.fields.get(name.lower())

    def has_field(self, name: str) -> bool:
        """Check whether a field is present (possibly empty)."""
        return name.lower() in self.fields

    @property
    def field_names(self) -> tuple[str, ...]:
        """Names of the populated fields in read order."""
        return tuple(self.fields)


class BibDatabase(msgspec.Struct, kw_only=True):
    """An ordered set of entries read from one bibliography file.

    ``metadata`` holds the key/value pairs found in ``jabref-meta`` comments
    (``databaseType``, ``fileDirectory`` and so on).
    """

    entries: list[Entry] = msgspec.field(default_factory=list)
    mode: BibDatabaseMode = BibDatabaseMode.BIBTEX
    path: Path | None = None
    metadata: dict[str, str] = msgspec.field(default_factory=dict)

    @property
    def is_biblatex_mode(self) -> bool:
        return self.mode is BibDatabaseMode.BIBLATEX

    @property
    def directory(self) -> Path | None:
        """Directory containing the bibliography file, if known."""
        if self.path is None:
            return None
        return self.path.resolve().parent

    def find(self, key: str) -> Entry | None:
        """Find an entry by citation key."""
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
