"""Parsing of multi-valued file attachment fields.

A file field lists linked files as ``description:link:type`` records joined
by ``;``. A backslash escapes the next character, so ``C\\:\\\\paper.pdf``
carries a Windows path. XML character references such as ``&#44;`` are kept
intact even though they end in ``;``.
"""

import msgspec


class ParsedFileField(msgspec.Struct, frozen=True):
    """One linked file from a file field."""

    description: str = ""
    link: str = ""
    file_type: str = ""

    @property
    def is_online(self) -> bool:
        """Whether the link points at a remote http(s) resource."""
        return self.link.startswith(("http://", "https://"))


def parse_file_field(value: str | None) -> list[ParsedFileField]:
    """Split a file field into its linked files.

    Malformed input never raises: whatever can be read is returned, and a
    blank field yields no links.
    """
    if value is None or not value.strip():
        return []

    files: list[ParsedFileField] = []
    parts: list[str] = []
    current: list[str] = []
    escaped = False
    in_xml_char = False

    for i, char in enumerate(value):
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "&" and not in_xml_char:
            current.append(char)
            if value[i + 1 : i + 2] == "#":
                in_xml_char = True
        elif char == ";" and in_xml_char:
            current.append(char)
            in_xml_char = False
        elif char == ":":
            parts.append("".join(current))
            current = []
        elif char == ";":
            parts.append("".join(current))
            current = []
            files.append(_convert(parts))
            parts = []
        else:
            current.append(char)

    if current:
        parts.append("".join(current))
    if parts:
        files.append(_convert(parts))

    return files


def _convert(parts: list[str]) -> ParsedFileField:
    """Build a record from its parts; a lone part is taken as the link."""
    description, link, file_type = (parts + ["", "", ""])[:3]

    if not description and not link and file_type:
        return ParsedFileField(link=file_type)
    if description and not link and not file_type:
        return ParsedFileField(link=description)

    return ParsedFileField(description, link, file_type)
