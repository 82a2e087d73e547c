"""GWP post-processing of a validated transfer file.

Pipeline order for one job:
1. copy the profile's template GeoPackage into the job directory
2. import the transfer file (dataset "Data") via ili2gpkg
3. import the XTF log (dataset "Logs") via ili2gpkg
4. decide from the GeoPackage contents whether translation is needed
5. export a translated transfer file if so via ili2gpkg
6. bundle logs, additional files, GeoPackage and translation into a ZIP

Profiles without a configuration directory are skipped entirely. A missing
template skips steps 1-5 but still bundles the logs. A failed import
deletes the GeoPackage so a half-filled container never reaches the ZIP.

The processor holds no per-job state. Each run works only through the
FileProvider passed to it, which is bound to that job's directory.

Only the ili2gpkg runs observe `cancel_event`; file and database steps run
to completion once started.
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional

from ilicop.gwp import gpkg
from ilicop.gwp.types import (
    TRANSLATED_FILE_SUFFIX,
    GwpOutcome,
    GwpProcessorOptions,
    GwpStage,
    GwpStatus,
)
from ilicop.ilitools.executor import IlitoolsExecutor
from ilicop.ilitools.types import (
    DATASET_DATA,
    DATASET_LOGS,
    ExportRequest,
    ImportRequest,
    ProcessResult,
    Profile,
)
from ilicop.packaging.bundler import bundle_job_artifacts
from ilicop.storage.file_provider import FileProvider, LogType

logger = logging.getLogger(__name__)


def translated_file_name_for(transfer_file_name: str) -> str:
    """`lines.xtf` → `lines_translated.xtf`."""
    return f"{Path(transfer_file_name).stem}{TRANSLATED_FILE_SUFFIX}"


class GwpProcessor:
    """Runs GWP post-processing for validated jobs."""

    def __init__(self, options: GwpProcessorOptions, executor: IlitoolsExecutor):
        self.options = options
        self.executor = executor
        self.config_dir = Path(options.config_dir) if options.config_dir else None

    async def run(
        self,
        file_provider: FileProvider,
        job_id: str,
        transfer_file_name: str,
        profile: Profile,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GwpOutcome:
        """Post-process job `job_id` inside the directory of `file_provider`."""
        profile_dir = self._profile_config_dir(profile)
        if profile_dir is None:
            logger.info(
                "No configuration directory found for profile <%s>. Skipping GWP processing for job <%s>.",
                profile.id, job_id,
            )
            return GwpOutcome(
                status=GwpStatus.SKIPPED,
                message=f"No GWP configuration for profile {profile.id}",
            )

        file_provider.initialize(job_id)
        outcome = GwpOutcome(status=GwpStatus.COMPLETED)

        if self._copy_template_gpkg(file_provider, profile_dir):
            outcome.stage = GwpStage.TEMPLATE_COPIED
            await self._populate_gpkg(file_provider, transfer_file_name, profile, cancel_event, outcome)
        else:
            logger.warning(
                "No data GeoPackage file found for profile <%s>. Skipping GWP GeoPackage creation for job <%s>.",
                profile.id, job_id,
            )
            outcome.message = "No template GeoPackage for profile"

        logger.info("Creating ZIP for job <%s>.", job_id)
        outcome.archive = bundle_job_artifacts(
            file_provider,
            zip_file_name=self.options.zip_file_name,
            additional_files_dir=profile_dir / self.options.additional_files_folder_name,
            gpkg_file_name=self.options.data_gpkg_file_name,
            translated_file_name=outcome.translated_file_name,
        )
        outcome.stage = GwpStage.BUNDLED
        logger.info("Successfully created ZIP for job <%s>.", job_id)

        return outcome

    def _profile_config_dir(self, profile: Profile) -> Optional[Path]:
        if self.config_dir is None:
            return None
        profile_dir = self.config_dir / profile.id
        return profile_dir if profile_dir.is_dir() else None

    def _copy_template_gpkg(self, file_provider: FileProvider, profile_dir: Path) -> bool:
        template = profile_dir / self.options.data_gpkg_file_name
        if not template.is_file():
            return False

        with template.open("rb") as src, file_provider.create_file(self.options.data_gpkg_file_name) as dest:
            shutil.copyfileobj(src, dest)
        logger.debug("Copied template GeoPackage %s", template)
        return True

    def _gpkg_path(self, file_provider: FileProvider) -> Path:
        return file_provider.home_directory / self.options.data_gpkg_file_name

    async def _populate_gpkg(
        self,
        file_provider: FileProvider,
        transfer_file_name: str,
        profile: Profile,
        cancel_event: Optional[asyncio.Event],
        outcome: GwpOutcome,
    ) -> None:
        data_result = await self._import_transfer_file(file_provider, transfer_file_name, profile, cancel_event)
        if data_result.is_success:
            outcome.stage = GwpStage.DATA_IMPORTED
        else:
            outcome.fail(f"Import of {transfer_file_name} failed (exit code {data_result.exit_code})")

        log_result = await self._import_log_file(file_provider, profile, cancel_event)
        if not log_result.is_success:
            outcome.fail(f"Import of XTF log failed (exit code {log_result.exit_code})")

        gpkg_path = self._gpkg_path(file_provider)
        if not (data_result.is_success and log_result.is_success):
            file_provider.delete_file(self.options.data_gpkg_file_name)
            logger.warning("Removed incomplete GeoPackage %s", gpkg_path)
            return
        outcome.stage = GwpStage.LOG_IMPORTED

        needed = gpkg.gpkg_needs_translation(gpkg_path)
        outcome.stage = GwpStage.TRANSLATION_DECIDED
        if not needed:
            return

        output_name = translated_file_name_for(transfer_file_name)
        export_result = await self._create_translated_transfer_file(file_provider, output_name, profile, cancel_event)
        if not export_result.is_success:
            file_provider.delete_file(output_name)
            outcome.fail(f"Translation to {output_name} failed (exit code {export_result.exit_code})")
            return

        outcome.translated_file_name = output_name
        outcome.stage = GwpStage.TRANSLATED

    async def _import_transfer_file(
        self,
        file_provider: FileProvider,
        transfer_file_name: str,
        profile: Profile,
        cancel_event: Optional[asyncio.Event],
    ) -> ProcessResult:
        request = ImportRequest(
            file_name=transfer_file_name,
            file_path=str(file_provider.home_directory / transfer_file_name),
            db_file_path=str(self._gpkg_path(file_provider)),
            dataset=DATASET_DATA,
            profile=profile,
        )
        return await self.executor.import_to_gpkg(request, cancel_event)

    async def _import_log_file(
        self,
        file_provider: FileProvider,
        profile: Profile,
        cancel_event: Optional[asyncio.Event],
    ) -> ProcessResult:
        log_file = file_provider.get_log_file(LogType.XTF)
        if log_file is None:
            logger.warning("No XTF log file found in %s, cannot import logs", file_provider.home_directory)
            return ProcessResult.failed("XTF log file not found")

        request = ImportRequest(
            file_name=log_file.name,
            file_path=str(log_file),
            db_file_path=str(self._gpkg_path(file_provider)),
            dataset=DATASET_LOGS,
            profile=profile,
        )
        return await self.executor.import_to_gpkg(request, cancel_event)

    async def _create_translated_transfer_file(
        self,
        file_provider: FileProvider,
        output_name: str,
        profile: Profile,
        cancel_event: Optional[asyncio.Event],
    ) -> ProcessResult:
        request = ExportRequest(
            file_name=output_name,
            file_path=str(file_provider.home_directory / output_name),
            db_file_path=str(self._gpkg_path(file_provider)),
            dataset=DATASET_DATA,
            profile=profile,
        )
        return await self.executor.export_from_gpkg(request, cancel_event)
