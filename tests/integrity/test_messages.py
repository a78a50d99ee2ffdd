"""Tests for integrity messages."""

import pytest

from bibcheck.core.models import Entry
from bibcheck.integrity.messages import IntegrityMessage


@pytest.fixture
def entry():
    return Entry(key="doe2024", type="article", fields={"year": "24"})


class TestIntegrityMessage:
    def test_entry_key(self, entry):
        message = IntegrityMessage("should contain a four digit number", entry, "year")
        assert message.entry_key == "doe2024"

    def test_to_dict(self, entry):
        message = IntegrityMessage("should contain a four digit number", entry, "year")

        assert message.to_dict() == {
            "entry_key": "doe2024",
            "field": "year",
            "message": "should contain a four digit number",
        }

    def test_value_equality(self, entry):
        first = IntegrityMessage("x", entry, "year")
        same_entry = Entry.create("doe2024", "article", {"Year": "24"})

        assert first == IntegrityMessage("x", same_entry, "year")

    def test_not_hashable(self, entry):
        with pytest.raises(TypeError):
            hash(IntegrityMessage("x", entry, "year"))

    def test_deduplicate_by_location(self, entry):
        """Repeated runs collapse to one message per location."""
        runs = [
            [IntegrityMessage("x", entry, "year"), IntegrityMessage("y", entry, "url")],
            [IntegrityMessage("x", entry, "year")],
        ]

        unique = {m.location: m for run in runs for m in run}

        assert list(unique) == [("doe2024", "year", "x"), ("doe2024", "url", "y")]
