"""Field names and semantic field properties.

Integrity checkers never hard-code which fields hold person names or verbatim
text. They consult a ``FieldProperties`` registry that maps each field name
to the set of roles it plays. The registry is static configuration: the
default table below follows the standard BibTeX and biblatex field sets, and
callers may extend it from a config file.
"""

from collections.abc import Iterable, Mapping
from enum import Enum, unique


class FieldName:
    """Names of the fields the checkers look at directly."""

    AUTHOR = "author"
    BOOKTITLE = "booktitle"
    EDITOR = "editor"
    FILE = "file"
    ISBN = "isbn"
    ISSN = "issn"
    JOURNAL = "journal"
    JOURNALTITLE = "journaltitle"
    PAGES = "pages"
    TITLE = "title"
    URL = "url"
    YEAR = "year"


@unique
class FieldProperty(Enum):
    """Semantic roles a field can play."""

    PERSON_NAMES = "person_names"
    VERBATIM = "verbatim"
    JOURNAL_NAME = "journal_name"
    BOOK_NAME = "book_name"
    EXTERNAL = "external"
    NUMERIC = "numeric"
    DATE = "date"

    @classmethod
    def parse(cls, value: str) -> "FieldProperty":
        """Parse a role name such as ``person-names`` or ``PERSON_NAMES``."""
        normalized = value.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown field property: {value}") from None


_PERSON = frozenset({FieldProperty.PERSON_NAMES})
_VERBATIM = frozenset({FieldProperty.VERBATIM})
_VERBATIM_EXTERNAL = frozenset({FieldProperty.VERBATIM, FieldProperty.EXTERNAL})

DEFAULT_FIELD_PROPERTIES: dict[str, frozenset[FieldProperty]] = {
    # Person names
    "author": _PERSON,
    "editor": _PERSON,
    "editora": _PERSON,
    "editorb": _PERSON,
    "editorc": _PERSON,
    "bookauthor": _PERSON,
    "translator": _PERSON,
    "annotator": _PERSON,
    "commentator": _PERSON,
    "introduction": _PERSON,
    "foreword": _PERSON,
    "afterword": _PERSON,
    "holder": _PERSON,
    # Journal and book names
    "journal": frozenset({FieldProperty.JOURNAL_NAME}),
    "journaltitle": frozenset({FieldProperty.JOURNAL_NAME}),
    "booktitle": frozenset({FieldProperty.BOOK_NAME}),
    # Verbatim content
    "url": _VERBATIM_EXTERNAL,
    "doi": _VERBATIM_EXTERNAL,
    "eprint": _VERBATIM_EXTERNAL,
    "file": _VERBATIM_EXTERNAL,
    "pdf": _VERBATIM_EXTERNAL,
    "ps": _VERBATIM_EXTERNAL,
    "verba": _VERBATIM,
    "verbb": _VERBATIM,
    "verbc": _VERBATIM,
    # Numbers and dates
    "volume": frozenset({FieldProperty.NUMERIC}),
    "number": frozenset({FieldProperty.NUMERIC}),
    "edition": frozenset({FieldProperty.NUMERIC}),
    "pagetotal": frozenset({FieldProperty.NUMERIC}),
    "year": frozenset({FieldProperty.DATE}),
    "date": frozenset({FieldProperty.DATE}),
    "urldate": frozenset({FieldProperty.DATE}),
    "eventdate": frozenset({FieldProperty.DATE}),
    "origdate": frozenset({FieldProperty.DATE}),
}


class FieldProperties:
    """Lookup table from field name to its semantic roles."""

    def __init__(
        self, table: Mapping[str, Iterable[FieldProperty]] | None = None
    ) -> None:
        source = DEFAULT_FIELD_PROPERTIES if table is None else table
        self._table: dict[str, frozenset[FieldProperty]] = {
            name.lower(): frozenset(props) for name, props in source.items()
        }

    @classmethod
    def from_config(cls, overrides: Mapping[str, Iterable[str]]) -> "FieldProperties":
        """Build a registry from the defaults plus configured overrides.

        Each override replaces the roles of one field, e.g.
        ``{"collaborator": ["person_names"]}``.
        """
        table = dict(DEFAULT_FIELD_PROPERTIES)
        for name, roles in overrides.items():
            if isinstance(roles, str):
                roles = [roles]
            table[name.lower()] = frozenset(FieldProperty.parse(r) for r in roles)
        return cls(table)

    def classify(self, field_name: str) -> frozenset[FieldProperty]:
        """Return the roles of a field (empty for unknown fields)."""
        return self._table.get(field_name.lower(), frozenset())

    def has(self, field_name: str, prop: FieldProperty) -> bool:
        return prop in self.classify(field_name)

    def fields_with(self, prop: FieldProperty) -> list[str]:
        """All configured fields carrying a role, in table order."""
        return [name for name, props in self._table.items() if prop in props]

    def journal_name_fields(self) -> list[str]:
        return self.fields_with(FieldProperty.JOURNAL_NAME)

    def book_name_fields(self) -> list[str]:
        return self.fields_with(FieldProperty.BOOK_NAME)

    def person_name_fields(self) -> list[str]:
        return self.fields_with(FieldProperty.PERSON_NAMES)
