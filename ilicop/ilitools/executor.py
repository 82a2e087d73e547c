"""Runs ilivalidator / ili2gpkg for validation and GWP sub-steps.

Configuration problems (tool not installed, unsupported request) raise
IlitoolsConfigurationError before anything is launched. Everything that
happens once the process is running comes back as a ProcessResult.
"""

import asyncio
import logging
from typing import Optional

from ilicop.ilitools import process
from ilicop.ilitools.commands import (
    create_export_command,
    create_ili2gpkg_command,
    create_ilivalidator_command,
    create_import_command,
)
from ilicop.ilitools.environment import IlitoolsEnvironment
from ilicop.ilitools.types import (
    ExportRequest,
    IlitoolsConfigurationError,
    ImportRequest,
    ProcessResult,
    ValidationRequest,
)

logger = logging.getLogger(__name__)


class IlitoolsExecutor:
    """Executes ilitools commands against one resolved environment."""

    def __init__(self, env: IlitoolsEnvironment):
        self.env = env

    async def validate(
        self,
        request: ValidationRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ProcessResult:
        """Validate a transfer file with the backend the request selects."""
        if request.is_geopackage:
            self._require_ili2gpkg()
            command = create_ili2gpkg_command(self.env, request)
            tool = "ili2gpkg"
        else:
            if not self.env.is_ilivalidator_initialized:
                raise IlitoolsConfigurationError("ilivalidator is not properly initialized.")
            command = create_ilivalidator_command(self.env, request)
            tool = "ilivalidator"

        logger.info("Starting validation of %s using %s.", request.transfer_file_name, tool)
        result = await self._run(command, cancel_event, request.transfer_file_name)
        logger.info(
            "Validation completed for %s with exit code %d.",
            request.transfer_file_name, result.exit_code,
        )
        return result

    async def import_to_gpkg(
        self,
        request: ImportRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ProcessResult:
        """Import a transfer or log file into an existing GeoPackage."""
        self._require_ili2gpkg()
        logger.info(
            "Importing %s into %s (dataset=%s, profile=%s).",
            request.file_name, request.db_file_path, request.dataset, request.profile.id,
        )
        result = await self._run(
            create_import_command(self.env, request), cancel_event, request.file_name,
        )
        if not result.is_success:
            logger.warning(
                "Import of %s into dataset %s failed with exit code %d.",
                request.file_name, request.dataset, result.exit_code,
            )
        return result

    async def export_from_gpkg(
        self,
        request: ExportRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ProcessResult:
        """Export a GeoPackage dataset to a transfer file."""
        self._require_ili2gpkg()
        logger.info(
            "Exporting dataset %s of %s to %s (profile=%s).",
            request.dataset, request.db_file_path, request.file_name, request.profile.id,
        )
        result = await self._run(
            create_export_command(self.env, request), cancel_event, request.file_name,
        )
        if not result.is_success:
            logger.warning(
                "Export of dataset %s to %s failed with exit code %d.",
                request.dataset, request.file_name, result.exit_code,
            )
        return result

    def _require_ili2gpkg(self) -> None:
        if not self.env.is_ili2gpkg_initialized:
            raise IlitoolsConfigurationError("ili2gpkg is not properly initialized.")

    async def _run(
        self,
        command: list[str],
        cancel_event: Optional[asyncio.Event],
        context: str,
    ) -> ProcessResult:
        return await process.run_java_command(
            self.env.java_executable, command, cancel_event, context=context,
        )
