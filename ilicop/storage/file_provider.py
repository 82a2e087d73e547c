"""Per-job working directories.

Every validation job owns one directory below the upload root. The
transfer file, the generated logs, the GeoPackage and the final ZIP archive
all live there. Components access it only through the FileProvider
protocol, so tests can swap in their own implementation.

Security:
  - `_resolve()` rejects names that would escape the job directory
    (`..` components, absolute paths elsewhere, null bytes).
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

LOG_FILE_SUFFIX = "_log"


class LogType(str, enum.Enum):
    """Kinds of log artifacts a job can produce."""

    LOG = "log"
    XTF = "xtf"
    CSV = "csv"
    GEOJSON = "geojson"
    ZIP = "zip"

    @property
    def extension(self) -> str:
        return f".{self.value}"


@runtime_checkable
class FileProvider(Protocol):
    """Access to the files of the current job."""

    @property
    def home_directory(self) -> Path: ...

    def initialize(self, job_id: str) -> None: ...

    def create_file(self, file_name: str) -> BinaryIO: ...

    def get_files(self) -> list[str]: ...

    def exists(self, file_name: str) -> bool: ...

    def delete_file(self, file_name: str) -> bool: ...

    def get_log_file(self, log_type: LogType) -> Optional[Path]: ...


class LocalFileProvider:
    """FileProvider backed by `root_dir/<job_id>` on the local disk."""

    def __init__(self, root_dir: str | Path):
        self.root_dir = Path(root_dir)
        self._home: Optional[Path] = None

    @property
    def home_directory(self) -> Path:
        if self._home is None:
            raise RuntimeError("File provider is not initialized, call initialize(job_id) first")
        return self._home

    def initialize(self, job_id: str) -> None:
        self._home = self.root_dir / str(job_id)
        self._home.mkdir(parents=True, exist_ok=True)

    def create_file(self, file_name: str) -> BinaryIO:
        """Open `file_name` in the job directory for writing, truncating it."""
        return self._resolve(file_name).open("wb")

    def get_files(self) -> list[str]:
        return sorted(p.name for p in self.home_directory.iterdir() if p.is_file())

    def exists(self, file_name: str) -> bool:
        return self._resolve(file_name).is_file()

    def delete_file(self, file_name: str) -> bool:
        """Delete `file_name` if present. Returns whether a file was removed."""
        path = self._resolve(file_name)
        if not path.is_file():
            return False
        path.unlink()
        logger.debug("Deleted %s", path)
        return True

    def get_log_file(self, log_type: LogType) -> Optional[Path]:
        """Return the `*_log.<ext>` file of the given type, or None if absent."""
        wanted = f"{LOG_FILE_SUFFIX}{log_type.extension}"
        for name in self.get_files():
            if name.lower().endswith(wanted):
                return self.home_directory / name
        logger.debug("No %s log file in %s", log_type.value, self.home_directory)
        return None

    def _resolve(self, file_name: str) -> Path:
        if not file_name or "\x00" in file_name:
            raise ValueError(f"Invalid file name: {file_name!r}")

        home = self.home_directory.resolve()
        path = Path(file_name)
        candidate = (path if path.is_absolute() else home / path).resolve()
        if candidate.parent != home:
            raise ValueError(f"File {file_name!r} is outside of the job directory {home}")
        return candidate
