"""BibTeX reader that keeps raw field text.

Features:
- Entries delimited by braces or parentheses
- @string, @preamble and @comment blocks
- jabref-meta comments (database type, file directory)
- Braced and quoted values kept verbatim, inner braces included
- Macro references and ``#`` concatenation stored as ``#macro#``
- Error recovery: a malformed entry is skipped and recorded

Field values are not decoded or normalized. The integrity checkers need to
see exactly what the author wrote.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from bibcheck.core.models import BibDatabase, BibDatabaseMode, Entry
from bibcheck.exceptions import BibcheckError

logger = logging.getLogger(__name__)

META_PREFIX = "jabref-meta:"
_NAME_RE = re.compile(r"[^\s\"#%'(),={}]+")


@dataclass
class ParseError(BibcheckError):
    """Parse error with detailed location."""

    message: str
    line: int
    column: int
    severity: str = "error"  # error, warning
    context: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.upper()}] " if self.severity != "error" else ""
        location = f"Line {self.line}, column {self.column}"
        base = f"{prefix}{location}: {self.message}"
        if self.context:
            return f"{base}\n  {self.context}"
        return base


def _describe(char: str | None) -> str:
    return repr(char) if char is not None else "end of file"


class _Abort(Exception):
    """Internal signal to abandon the current block."""


class BibtexParser:
    """BibTeX parser with error recovery.

    Errors and warnings are collected in ``errors``; ``parse`` itself only
    fails on unreadable input.
    """

    def __init__(self, default_mode: BibDatabaseMode = BibDatabaseMode.BIBTEX):
        self.default_mode = default_mode
        self.text = ""
        self.pos = 0
        self.errors: list[ParseError] = []
        self.string_defs: dict[str, str] = {}
        self.preambles: list[str] = []
        self.metadata: dict[str, str] = {}

    # Cursor helpers

    def current_char(self) -> str | None:
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def location(self, pos: int | None = None) -> tuple[int, int]:
        """Line and column (1-based) of a text offset."""
        if pos is None:
            pos = self.pos
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return line, column

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char.isspace():
                self.pos += 1
            elif char == "%":
                end = self.text.find("\n", self.pos)
                self.pos = len(self.text) if end == -1 else end + 1
            else:
                break

    def error(self, message: str, severity: str = "error") -> None:
        """Record a parse error at the current position."""
        line, column = self.location()
        error = ParseError(message, line, column, severity)
        self.errors.append(error)
        logger.debug(str(error))
        if severity == "error":
            raise _Abort()

    def expect(self, char: str) -> None:
        self.skip_whitespace()
        if self.current_char() != char:
            self.error(f"Expected {char!r}, got {_describe(self.current_char())}")
        self.pos += 1

    def read_name(self) -> str:
        self.skip_whitespace()
        match = _NAME_RE.match(self.text, self.pos)
        if not match:
            self.error(f"Expected a name, got {_describe(self.current_char())}")
        self.pos = match.end()
        return match.group()

    # Values

    def read_braced(self) -> str:
        """Read a ``{...}`` group and return its content without outer braces."""
        start = self.pos + 1
        depth = 0
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    self.pos += 1
                    return self.text[start : self.pos - 1]
            self.pos += 1
        self.error("Unterminated braced value")
        return ""

    def read_quoted(self) -> str:
        """Read a ``"..."`` string; quotes inside braces do not terminate it."""
        start = self.pos + 1
        self.pos += 1
        depth = 0
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            elif char == '"' and depth <= 0:
                self.pos += 1
                return self.text[start : self.pos - 1]
            self.pos += 1
        self.error("Unterminated quoted value")
        return ""

    def read_value(self) -> str:
        """Read a value expression, joining ``#`` concatenations."""
        parts = []
        while True:
            self.skip_whitespace()
            char = self.current_char()
            if char == "{":
                parts.append(self.read_braced())
            elif char == '"':
                parts.append(self.read_quoted())
            elif char is not None and char.isdigit():
                start = self.pos
                while self.current_char() is not None and self.current_char().isdigit():
                    self.pos += 1
                parts.append(self.text[start : self.pos])
            elif char is not None and _NAME_RE.match(char):
                # Macro references are kept unexpanded
                parts.append(f"#{self.read_name()}#")
            else:
                self.error(f"Expected a field value, got {_describe(char)}")

            self.skip_whitespace()
            if self.current_char() == "#":
                self.pos += 1
            else:
                return "".join(parts)

    # Blocks

    def parse(self, text: str, path: Path | None = None) -> BibDatabase:
        """Parse BibTeX text into a database."""
        self.text = text
        self.pos = 0
        self.errors = []
        self.string_defs = {}
        self.preambles = []
        self.metadata = {}

        entries: list[Entry] = []
        seen_keys: set[str] = set()

        while True:
            at = self.find_block_start()
            if at == -1:
                break
            self.pos = at + 1
            block_start = at

            try:
                kind = self.read_name().lower()
                self.skip_whitespace()
                opening = self.current_char()
                if opening not in ("{", "("):
                    self.error(f"Expected {{ or ( after @{kind}")
                closing = "}" if opening == "{" else ")"

                if kind == "comment":
                    self.parse_comment(closing)
                elif kind == "preamble":
                    self.pos += 1
                    self.preambles.append(self.read_value())
                    self.expect(closing)
                elif kind == "string":
                    self.pos += 1
                    self.parse_string_def(closing)
                else:
                    self.pos += 1
                    entry = self.parse_entry(kind, closing)
                    if entry.key in seen_keys:
                        line, column = self.location(block_start)
                        self.errors.append(
                            ParseError(
                                f"Duplicate key: {entry.key}", line, column, "warning"
                            )
                        )
                    seen_keys.add(entry.key)
                    entries.append(entry)
            except _Abort:
                # Resume scanning after the @ that opened the broken block
                self.pos = block_start + 1

        mode = self.default_mode
        if database_type := self.metadata.get("databaseType"):
            try:
                mode = BibDatabaseMode.parse(database_type)
            except ValueError:
                line, column = self.location(0)
                self.errors.append(
                    ParseError(
                        f"Unknown database type: {database_type}",
                        line,
                        column,
                        "warning",
                    )
                )

        logger.debug(f"Parsed {len(entries)} entries with {len(self.errors)} problems")
        return BibDatabase(
            entries=entries, mode=mode, path=path, metadata=dict(self.metadata)
        )

    def find_block_start(self) -> int:
        """Offset of the next ``@`` that is not inside a ``%`` comment, or -1."""
        while True:
            at = self.text.find("@", self.pos)
            if at == -1:
                return -1
            line_start = self.text.rfind("\n", 0, at) + 1
            if "%" not in self.text[max(line_start, self.pos) : at]:
                return at
            end = self.text.find("\n", at)
            if end == -1:
                return -1
            self.pos = end + 1

    def parse_entry(self, entry_type: str, closing: str) -> Entry:
        """Parse the body of an entry after its opening delimiter."""
        self.skip_whitespace()
        start = self.pos
        while self.current_char() not in (",", closing, None):
            self.pos += 1
        key = self.text[start : self.pos].strip()
        if not key:
            self.error("Missing citation key", severity="warning")

        fields: dict[str, str] = {}
        while True:
            self.skip_whitespace()
            char = self.current_char()
            if char == closing:
                self.pos += 1
                break
            if char == ",":
                self.pos += 1
                continue
            if char is None:
                self.error(f"Unexpected end of file in entry {key}")

            name = self.read_name().lower()
            self.expect("=")
            value = self.read_value()
            if name in fields:
                self.error(
                    f"Duplicate field '{name}' in entry {key}", severity="warning"
                )
            else:
                fields[name] = value

        return Entry.create(key, entry_type, fields)

    def parse_string_def(self, closing: str) -> None:
        name = self.read_name()
        self.expect("=")
        self.string_defs[name.lower()] = self.read_value()
        self.expect(closing)

    def parse_comment(self, closing: str) -> None:
        """Read a comment block, picking up jabref-meta settings."""
        if closing == "}":
            content = self.read_braced()
        else:
            end = self.text.find(")", self.pos)
            if end == -1:
                self.error("Unterminated comment")
            content = self.text[self.pos + 1 : end]
            self.pos = end + 1

        content = content.strip()
        if content.startswith(META_PREFIX):
            setting = content[len(META_PREFIX) :].strip()
            key, sep, value = setting.partition(":")
            if sep:
                self.metadata[key.strip()] = value.strip().rstrip(";").strip()

    def parse_file(self, path: Path) -> BibDatabase:
        """Parse a BibTeX file, falling back to Latin-1 for legacy files."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.info(f"{path} is not valid UTF-8, reading as Latin-1")
            text = path.read_text(encoding="latin-1")
        except OSError as e:
            raise ParseError(f"Failed to read file: {e}", 0, 0) from e
        return self.parse(text, path=path)


def parse_bibtex(
    text: str, mode: BibDatabaseMode = BibDatabaseMode.BIBTEX
) -> BibDatabase:
    """Parse BibTeX text with a fresh parser."""
    return BibtexParser(default_mode=mode).parse(text)
