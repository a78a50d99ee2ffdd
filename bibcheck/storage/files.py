"""Resolution of linked file names to files on disk.

A file link in a bibliography is usually relative. It is looked up in a
list of candidate directories built from user preferences, from the
database's own ``fileDirectory`` metadata and from the location of the
``.bib`` file itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bibcheck.core.models import BibDatabase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileDirectoryPreferences:
    """Where linked files are searched for.

    ``field_directories`` maps a file extension (``"pdf"``) to a directory
    that is tried before the main file directory.
    """

    main_file_directory: Path | None = None
    field_directories: dict[str, Path] = field(default_factory=dict)
    bib_location_as_primary: bool = True


class FileResolver:
    """Expands file links against the configured directories."""

    def candidate_directories(
        self,
        database: BibDatabase,
        link: str,
        preferences: FileDirectoryPreferences,
    ) -> list[Path]:
        """Directories to search for ``link``, in priority order, deduplicated."""
        directories: list[Path] = []

        extension = Path(link).suffix.lstrip(".").lower()
        if extension and extension in preferences.field_directories:
            directories.append(Path(preferences.field_directories[extension]))

        bib_dir = database.directory
        if meta_dir := database.metadata.get("fileDirectory"):
            meta_path = Path(meta_dir).expanduser()
            if not meta_path.is_absolute() and bib_dir is not None:
                meta_path = bib_dir / meta_path
            directories.append(meta_path)

        if preferences.main_file_directory is not None:
            directories.append(Path(preferences.main_file_directory).expanduser())

        if bib_dir is not None:
            if preferences.bib_location_as_primary:
                directories.insert(0, bib_dir)
            else:
                directories.append(bib_dir)

        unique: list[Path] = []
        for directory in directories:
            if directory not in unique:
                unique.append(directory)
        return unique

    def resolve(
        self,
        database: BibDatabase,
        link: str,
        preferences: FileDirectoryPreferences,
    ) -> Path | None:
        """Return the existing file a link refers to, or None.

        Raises OSError if the filesystem cannot be queried.
        """
        if not link:
            return None

        # Windows-style separators are accepted on every platform
        name = link.replace("\\", "/") if "\\" in link and "/" not in link else link
        direct = Path(name).expanduser()
        if direct.exists():
            return direct

        if direct.is_absolute():
            return None

        for directory in self.candidate_directories(database, name, preferences):
            candidate = directory / name
            if candidate.exists():
                logger.debug(f"Resolved {link} to {candidate}")
                return candidate

        logger.debug(f"Could not resolve file link {link}")
        return None
