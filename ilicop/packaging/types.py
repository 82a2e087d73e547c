"""Types for the packaging module."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class NamedFile:
    """A file on disk and the entry name it gets inside the archive.

    display_name defaults to the file's basename.
    """

    file_path: Path
    display_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "file_path", Path(self.file_path))
        if not self.display_name:
            object.__setattr__(self, "display_name", self.file_path.name)


@dataclass
class ArchiveResult:
    """The written archive and the entries it contains, in write order."""

    zip_file_path: Path
    entries: list[str] = field(default_factory=list)
