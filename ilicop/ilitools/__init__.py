"""ilivalidator / ili2gpkg command construction and execution."""

from ilicop.ilitools.commands import (
    CommonArguments,
    build_validation_command,
    create_export_command,
    create_ili2gpkg_command,
    create_ilivalidator_command,
    create_import_command,
    pretty_print_command,
)
from ilicop.ilitools.environment import IlitoolsEnvironment
from ilicop.ilitools.executor import IlitoolsExecutor
from ilicop.ilitools.process import run_java_command
from ilicop.ilitools.types import (
    DATASET_DATA,
    DATASET_LOGS,
    PROCESS_FAILED_EXIT_CODE,
    ExportRequest,
    IlitoolsConfigurationError,
    ImportRequest,
    ProcessResult,
    Profile,
    ValidationRequest,
)

__all__ = [
    "CommonArguments",
    "build_validation_command",
    "create_export_command",
    "create_ili2gpkg_command",
    "create_ilivalidator_command",
    "create_import_command",
    "pretty_print_command",
    "IlitoolsEnvironment",
    "IlitoolsExecutor",
    "run_java_command",
    "DATASET_DATA",
    "DATASET_LOGS",
    "PROCESS_FAILED_EXIT_CODE",
    "ExportRequest",
    "IlitoolsConfigurationError",
    "ImportRequest",
    "ProcessResult",
    "Profile",
    "ValidationRequest",
]
