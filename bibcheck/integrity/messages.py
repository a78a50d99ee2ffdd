"""Diagnostic messages produced by the integrity checkers."""

import msgspec

from bibcheck.core.models import Entry


class IntegrityMessage(msgspec.Struct, frozen=True):
    """A complaint about one field of one entry.

    Messages compare by value but are not hashable, since they carry the
    entry and its field dict. Use ``location`` to deduplicate or index them.
    """

    message: str
    entry: Entry
    field: str

    @property
    def entry_key(self) -> str:
        return self.entry.key

    @property
    def location(self) -> tuple[str, str, str]:
        """Hashable ``(entry_key, field, message)`` identity."""
        return (self.entry.key, self.field, self.message)

    def to_dict(self) -> dict[str, str]:
        return {
            "entry_key": self.entry_key,
            "field": self.field,
            "message": self.message,
        }
