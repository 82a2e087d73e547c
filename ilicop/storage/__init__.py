"""Job working directory access."""

from ilicop.storage.file_provider import FileProvider, LocalFileProvider, LogType

__all__ = ["FileProvider", "LocalFileProvider", "LogType"]
