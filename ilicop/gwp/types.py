"""Types for GWP post-processing.

GwpProcessorOptions holds the profile configuration layout.
GwpStage / GwpOutcome describe how far one job got and what it produced.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from ilicop.core.config import Settings
from ilicop.packaging.types import ArchiveResult

TRANSLATED_FILE_SUFFIX = "_translated.xtf"


@dataclass(frozen=True)
class GwpProcessorOptions:
    """Where profile configuration lives and how outputs are named.

    Profile layout:
        {config_dir}/{profile_id}/{data_gpkg_file_name}
        {config_dir}/{profile_id}/{additional_files_folder_name}/*
    """

    config_dir: Optional[str] = None
    data_gpkg_file_name: str = "data.gpkg"
    additional_files_folder_name: str = "AdditionalFiles"
    zip_file_name: str = "gwp_results_log.zip"

    @classmethod
    def from_settings(cls, settings: Settings) -> "GwpProcessorOptions":
        return cls(
            config_dir=settings.gwp_config_dir,
            data_gpkg_file_name=settings.gwp_data_gpkg_file_name,
            additional_files_folder_name=settings.gwp_additional_files_folder_name,
            zip_file_name=settings.gwp_zip_file_name,
        )


class GwpStage(str, enum.Enum):
    """Last step a GWP run reached. Steps only ever move forward."""

    NOT_STARTED = "not_started"
    TEMPLATE_COPIED = "template_copied"
    DATA_IMPORTED = "data_imported"
    LOG_IMPORTED = "log_imported"
    TRANSLATION_DECIDED = "translation_decided"
    TRANSLATED = "translated"
    BUNDLED = "bundled"


class GwpStatus(str, enum.Enum):
    SKIPPED = "skipped"
    COMPLETED = "completed"
    # A sub-invocation failed; the archive was still written.
    FAILED = "failed"


@dataclass
class GwpOutcome:
    """Result of GWP processing for one job."""

    status: GwpStatus
    stage: GwpStage = GwpStage.NOT_STARTED
    archive: Optional[ArchiveResult] = None
    translated_file_name: Optional[str] = None
    errors: list[str] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is not GwpStatus.FAILED

    def fail(self, error: str) -> None:
        self.status = GwpStatus.FAILED
        self.errors.append(error)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "stage": self.stage.value,
            "zip_file_path": str(self.archive.zip_file_path) if self.archive else None,
            "artifacts": list(self.archive.entries) if self.archive else [],
            "translated_file_name": self.translated_file_name,
            "errors": self.errors,
            "message": self.message,
        }
