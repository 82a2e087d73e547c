"""Request and result types for ilitools invocations.

ValidationRequest drives a primary validation run.
ImportRequest / ExportRequest drive ili2gpkg sub-invocations during GWP
post-processing. ProcessResult is what every invocation returns.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

# Reported for cancelled runs and for launch/runtime failures. Real exit
# codes of the Java tools are never negative.
PROCESS_FAILED_EXIT_CODE = -1

DATASET_DATA = "Data"
DATASET_LOGS = "Logs"

GPKG_EXTENSION = ".gpkg"


class IlitoolsConfigurationError(Exception):
    """Raised when a request cannot be run with the current environment.

    Covers an uninitialized backend and unsupported request/backend
    combinations. Always raised before any process is launched.
    """


@dataclass(frozen=True)
class Profile:
    """Validation profile. Only `id` is used to resolve configuration."""

    id: str
    titles: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationRequest:
    """Input for a single primary validation run."""

    transfer_file_name: str
    transfer_file_path: str
    log_file_path: str
    xtf_log_file_path: str
    additional_catalogue_file_paths: tuple[str, ...] = ()
    gpkg_model_names: Optional[str] = None
    is_geopackage: bool = False

    @classmethod
    def for_transfer_file(
        cls,
        home_directory: Union[str, Path],
        transfer_file_name: str,
        additional_catalogue_file_names: Sequence[str] = (),
        gpkg_model_names: Optional[str] = None,
    ) -> "ValidationRequest":
        """Build a request with log paths derived from the transfer file name.

        Logs land next to the transfer file as `{stem}_log.log` and
        `{stem}_log.xtf`. The backend is picked from the file extension.
        """
        home = Path(home_directory)
        stem = Path(transfer_file_name).stem
        return cls(
            transfer_file_name=transfer_file_name,
            transfer_file_path=str(home / transfer_file_name),
            log_file_path=str(home / f"{stem}_log.log"),
            xtf_log_file_path=str(home / f"{stem}_log.xtf"),
            additional_catalogue_file_paths=tuple(
                str(home / name) for name in additional_catalogue_file_names
            ),
            gpkg_model_names=gpkg_model_names,
            is_geopackage=Path(transfer_file_name).suffix.lower() == GPKG_EXTENSION,
        )


@dataclass(frozen=True)
class ImportRequest:
    """Import `file_path` into the container `db_file_path` under `dataset`."""

    file_name: str
    file_path: str
    db_file_path: str
    dataset: str
    profile: Profile


@dataclass(frozen=True)
class ExportRequest:
    """Export `dataset` of the container `db_file_path` to `file_path`."""

    file_name: str
    file_path: str
    db_file_path: str
    dataset: str
    profile: Profile


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one external ilitools invocation.

    A run is successful if exit_code == 0. `error` carries the reason when
    the process never produced a real exit code (cancelled, failed to start).
    """

    exit_code: int
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def failed(cls, reason: str) -> "ProcessResult":
        return cls(exit_code=PROCESS_FAILED_EXIT_CODE, error=reason)
