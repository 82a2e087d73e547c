"""Runs one validation job end to end.

validate (ilivalidator or ili2gpkg) → on exit code 0 → GWP processing.

Configuration errors (backend missing, catalogues with a GeoPackage)
propagate to the caller. Failed or cancelled tool runs come back inside the
JobOutcome, and GWP processing is not started for them.

Every run gets a fresh FileProvider from the factory, so jobs running
concurrently on one service each stay in their own directory.
"""

import asyncio
import functools
import logging
from typing import Callable, Optional, Sequence

from ilicop.core.config import Settings
from ilicop.core.logging import bind_job_id, configure_structlog
from ilicop.gwp.processor import GwpProcessor
from ilicop.gwp.types import GwpProcessorOptions
from ilicop.ilitools.environment import IlitoolsEnvironment
from ilicop.ilitools.executor import IlitoolsExecutor
from ilicop.ilitools.types import Profile, ValidationRequest
from ilicop.storage.file_provider import FileProvider, LocalFileProvider
from ilicop.validation.types import JobOutcome

logger = logging.getLogger(__name__)

FileProviderFactory = Callable[[], FileProvider]


class ValidatorService:
    def __init__(
        self,
        file_provider_factory: FileProviderFactory,
        executor: IlitoolsExecutor,
        processor: GwpProcessor,
    ):
        self.file_provider_factory = file_provider_factory
        self.executor = executor
        self.processor = processor

    @classmethod
    def from_settings(cls, settings: Settings) -> "ValidatorService":
        """Configure logging and wire up the service from one Settings instance."""
        configure_structlog(debug=settings.debug)

        env = IlitoolsEnvironment.from_settings(settings)
        logger.info("%s", env)
        executor = IlitoolsExecutor(env)
        processor = GwpProcessor(GwpProcessorOptions.from_settings(settings), executor)
        return cls(functools.partial(LocalFileProvider, settings.upload_dir), executor, processor)

    async def run(
        self,
        job_id: str,
        transfer_file_name: str,
        profile: Profile,
        catalogue_file_names: Sequence[str] = (),
        gpkg_model_names: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> JobOutcome:
        """Validate `transfer_file_name` of job `job_id` and post-process it.

        The transfer file and any catalogue files must already be in the
        job directory.
        """
        job_id = str(job_id)
        with bind_job_id(job_id):
            file_provider = self.file_provider_factory()
            file_provider.initialize(job_id)
            request = ValidationRequest.for_transfer_file(
                file_provider.home_directory,
                transfer_file_name,
                additional_catalogue_file_names=catalogue_file_names,
                gpkg_model_names=gpkg_model_names,
            )

            validation = await self.executor.validate(request, cancel_event)
            outcome = JobOutcome(job_id=job_id, validation=validation)

            if not validation.is_success:
                logger.warning(
                    "Validation of %s failed (exit code %d), skipping GWP processing for job <%s>.",
                    transfer_file_name, validation.exit_code, job_id,
                )
                return outcome

            outcome.gwp = await self.processor.run(
                file_provider, job_id, transfer_file_name, profile, cancel_event,
            )
            return outcome
