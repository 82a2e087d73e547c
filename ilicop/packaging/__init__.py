"""Packaging module for job artifact archives.

Public API:
    bundle_job_artifacts(file_provider, zip_file_name, ...) -> ArchiveResult
"""

from ilicop.packaging.bundler import bundle_job_artifacts, collect_files_to_zip, create_zip
from ilicop.packaging.types import ArchiveResult, NamedFile

__all__ = [
    "bundle_job_artifacts",
    "collect_files_to_zip",
    "create_zip",
    "ArchiveResult",
    "NamedFile",
]
