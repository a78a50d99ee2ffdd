"""ISSN and ISBN identifier values.

Both identifiers carry a check digit. Format and checksum are validated
separately so the integrity checkers can tell a mistyped layout apart from a
wrong control digit.
"""

import re


class ISSN:
    """An International Standard Serial Number in ``NNNN-NNNC`` form."""

    ISSN_PATTERN = re.compile(r"^\d{4}-\d{3}[\dxX]$", re.ASCII)

    def __init__(self, value: str):
        self.value = value.strip()

    def is_valid_format(self) -> bool:
        return bool(self.ISSN_PATTERN.match(self.value))

    def is_valid_checksum(self) -> bool:
        """Validate the mod-11 check digit (``X`` stands for 10)."""
        if not self.is_valid_format():
            return False
        digits = self.value.replace("-", "")
        total = sum(int(digits[i]) * (8 - i) for i in range(7))
        check = digits[7].upper()
        total += 10 if check == "X" else int(check)
        return total % 11 == 0

    def __str__(self) -> str:
        return self.value


class ISBN:
    """An International Standard Book Number, 10 or 13 digits.

    Hyphens are ignored; any other separator makes the format invalid.
    """

    ISBN_PATTERN = re.compile(r"^(\d{9}[\dxX]|\d{13})$", re.ASCII)

    def __init__(self, value: str):
        self.value = value.strip().replace("-", "")

    def is_valid_format(self) -> bool:
        return bool(self.ISBN_PATTERN.match(self.value))

    def is_isbn10(self) -> bool:
        return len(self.value) == 10 and self.is_valid_format()

    def is_isbn13(self) -> bool:
        return len(self.value) == 13 and self.is_valid_format()

    def is_valid_checksum(self) -> bool:
        if self.is_isbn10():
            return self._validate_isbn10_checksum(self.value)
        if self.is_isbn13():
            return self._validate_isbn13_checksum(self.value)
        return False

    @staticmethod
    def _validate_isbn10_checksum(isbn: str) -> bool:
        """Validate ISBN-10 checksum."""
        total = sum(int(isbn[i]) * (10 - i) for i in range(9))
        check = isbn[9].upper()
        total += 10 if check == "X" else int(check)
        return total % 11 == 0

    @staticmethod
    def _validate_isbn13_checksum(isbn: str) -> bool:
        """Validate ISBN-13 checksum."""
        total = sum(int(isbn[i]) * (3 if i % 2 else 1) for i in range(12))
        check_digit = (10 - (total % 10)) % 10
        return check_digit == int(isbn[12])

    def __str__(self) -> str:
        return self.value
