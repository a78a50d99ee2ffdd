"""Tests for ISSN and ISBN validation."""

import pytest

from bibcheck.core.identifiers import ISBN, ISSN


class TestISSN:
    @pytest.mark.parametrize(
        "value", ["0378-5955", "2434-561X", "2434-561x", " 0378-5955 "]
    )
    def test_valid(self, value: str) -> None:
        issn = ISSN(value)
        assert issn.is_valid_format()
        assert issn.is_valid_checksum()

    @pytest.mark.parametrize(
        "value", ["03785955", "0378-595", "0378_5955", "abcd-efgh"]
    )
    def test_invalid_format(self, value: str) -> None:
        assert not ISSN(value).is_valid_format()

    def test_wrong_check_digit(self) -> None:
        issn = ISSN("0378-5954")
        assert issn.is_valid_format()
        assert not issn.is_valid_checksum()

    def test_fullwidth_digits_rejected(self) -> None:
        assert not ISSN("０３７８-５９５５").is_valid_format()


class TestISBN:
    @pytest.mark.parametrize(
        "value",
        ["0-201-13447-0", "0-8044-2957-X", "978-0-306-40615-7", "9780306406157"],
    )
    def test_valid(self, value: str) -> None:
        isbn = ISBN(value)
        assert isbn.is_valid_format()
        assert isbn.is_valid_checksum()

    def test_kinds(self) -> None:
        assert ISBN("0-201-13447-0").is_isbn10()
        assert ISBN("978-0-306-40615-7").is_isbn13()
        assert not ISBN("978-0-306-40615-7").is_isbn10()

    @pytest.mark.parametrize("value", ["0 201 13447 0", "12345", "978030640615X"])
    def test_invalid_format(self, value: str) -> None:
        isbn = ISBN(value)
        assert not isbn.is_valid_format()
        assert not isbn.is_valid_checksum()

    @pytest.mark.parametrize("value", ["0-201-13447-1", "978-0-306-40615-8"])
    def test_wrong_check_digit(self, value: str) -> None:
        isbn = ISBN(value)
        assert isbn.is_valid_format()
        assert not isbn.is_valid_checksum()
