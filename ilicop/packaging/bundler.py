"""Artifact bundler: assembles job outputs into one downloadable ZIP.

Entry order:
1. Logs: one entry per available log kind (log.log, log.xtf, log.csv,
   log.geojson)
2. Profile-specific additional files, under their own names
3. The populated GeoPackage, if present
4. The translated transfer file, if present

Missing artifacts are skipped. The archive is written even when only logs
exist. Write errors are not caught.
"""

import logging
import zipfile
from pathlib import Path
from typing import Optional

from ilicop.packaging.types import ArchiveResult, NamedFile
from ilicop.storage.file_provider import FileProvider, LogType

logger = logging.getLogger(__name__)

# Same setting for every entry so archive sizes are reproducible.
COMPRESSION = zipfile.ZIP_DEFLATED
COMPRESS_LEVEL = 9

ZIPPED_LOG_TYPES = (LogType.LOG, LogType.XTF, LogType.CSV, LogType.GEOJSON)

LOG_ENTRY_STEM = "log"


def collect_files_to_zip(
    file_provider: FileProvider,
    additional_files_dir: Optional[Path],
    gpkg_file_name: str,
    translated_file_name: Optional[str],
) -> list[NamedFile]:
    """Gather everything that goes into the archive, in entry order.

    Entry names are unique. An additional file named like a log entry, the
    GeoPackage or the translated file is skipped with a warning.
    """
    log_files = _collect_log_files(file_provider)

    job_outputs: list[NamedFile] = []
    if file_provider.exists(gpkg_file_name):
        job_outputs.append(NamedFile(file_provider.home_directory / gpkg_file_name, gpkg_file_name))
    if translated_file_name and file_provider.exists(translated_file_name):
        job_outputs.append(NamedFile(
            file_provider.home_directory / translated_file_name, translated_file_name,
        ))

    taken = {f.display_name for f in log_files + job_outputs}
    additional_files = []
    for named_file in _collect_additional_files(additional_files_dir):
        if named_file.display_name in taken:
            logger.warning(
                "Skipping additional file %s: archive entry %s is already taken",
                named_file.file_path, named_file.display_name,
            )
            continue
        additional_files.append(named_file)

    return log_files + additional_files + job_outputs


def _collect_log_files(file_provider: FileProvider) -> list[NamedFile]:
    files = []
    for log_type in ZIPPED_LOG_TYPES:
        path = file_provider.get_log_file(log_type)
        if path is None:
            continue
        files.append(NamedFile(path, f"{LOG_ENTRY_STEM}{log_type.extension}"))
    return files


def _collect_additional_files(additional_files_dir: Optional[Path]) -> list[NamedFile]:
    if additional_files_dir is None or not additional_files_dir.is_dir():
        logger.debug("No additional files folder at %s", additional_files_dir)
        return []
    return [
        NamedFile(path)
        for path in sorted(additional_files_dir.iterdir())
        if path.is_file()
    ]


def create_zip(
    file_provider: FileProvider,
    zip_file_name: str,
    files: list[NamedFile],
) -> ArchiveResult:
    """Write `files` into `zip_file_name` in the job directory.

    Each file becomes exactly one entry, named by its display name.
    """
    result = ArchiveResult(zip_file_path=file_provider.home_directory / zip_file_name)

    with file_provider.create_file(zip_file_name) as stream:
        with zipfile.ZipFile(stream, mode="w", compression=COMPRESSION, compresslevel=COMPRESS_LEVEL) as archive:
            for named_file in files:
                archive.write(named_file.file_path, arcname=named_file.display_name)
                result.entries.append(named_file.display_name)
                logger.debug("Added %s to %s", named_file.display_name, zip_file_name)

    return result


def bundle_job_artifacts(
    file_provider: FileProvider,
    zip_file_name: str,
    additional_files_dir: Optional[Path],
    gpkg_file_name: str,
    translated_file_name: Optional[str] = None,
) -> ArchiveResult:
    """Collect the job's artifacts and write them into one archive."""
    logger.info("Creating ZIP %s in %s", zip_file_name, file_provider.home_directory)

    files = collect_files_to_zip(
        file_provider,
        additional_files_dir=additional_files_dir,
        gpkg_file_name=gpkg_file_name,
        translated_file_name=translated_file_name,
    )
    result = create_zip(file_provider, zip_file_name, files)

    logger.info("Bundled %d files into %s", len(result.entries), result.zip_file_path)
    return result
