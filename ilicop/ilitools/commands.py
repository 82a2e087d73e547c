"""Command-line construction for ilivalidator and ili2gpkg.

All functions here are pure: they read the environment and the request and
return the argument list that follows the Java executable, i.e. everything
starting at `-jar`. Token order matters: the tools are positional after
the flags, and the golden tests compare full command strings.

ilivalidator:
    -jar <jar> --allObjectsAccessible [--plugins <dir>] [--config <toml>]
    <common> <transfer file> [<catalogue file> ...]

ili2gpkg (validation):
    -jar <jar> --validate [--models <names>] <common> --dbfile <gpkg>

ili2gpkg (import / export into an existing GeoPackage):
    -jar <jar> --import|--export --dbfile <gpkg> --dataset <label>
    [--disableValidation] <tool options> <file>

<common> is `--log <log> --xtflog <xtflog> --verbose` followed by the tool
options: `[--proxy <host>] [--proxyPort <port>] [--trace] [--modeldir <dir>]`.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional
from urllib.parse import urlparse

from ilicop.ilitools.environment import IlitoolsEnvironment
from ilicop.ilitools.types import (
    ExportRequest,
    IlitoolsConfigurationError,
    ImportRequest,
    ValidationRequest,
)

logger = logging.getLogger(__name__)

_DEFAULT_PROXY_PORTS = {"http": 80, "https": 443}

PLUGIN_GLOB = "*.jar"


def parse_proxy(proxy: Optional[str]) -> tuple[Optional[str], Optional[int]]:
    """Split a proxy URL into (host, port).

    The port falls back to the scheme default when the URL has none.
    Returns (None, None) for an empty or malformed proxy; the latter is
    logged as a warning.
    """
    if not proxy:
        return None, None

    try:
        parsed = urlparse(proxy)
        host = parsed.hostname
        port = parsed.port
    except ValueError as exc:
        logger.warning("Failed to parse proxy configuration %r: %s", proxy, exc)
        return None, None

    if not host:
        logger.warning("Failed to parse proxy configuration %r: no host", proxy)
        return None, None

    if port is None:
        port = _DEFAULT_PROXY_PORTS.get(parsed.scheme.lower())
    return host, port


def iter_tool_options(env: IlitoolsEnvironment) -> Iterator[str]:
    """Yield the proxy, trace and model directory options shared by all tools."""
    host, port = parse_proxy(env.proxy)
    if host:
        yield "--proxy"
        yield host
    if port is not None:
        yield "--proxyPort"
        yield str(port)

    if env.trace_enabled:
        yield "--trace"

    if env.model_repository_dir:
        yield "--modeldir"
        yield env.model_repository_dir


class CommonArguments:
    """Arguments shared by both validation backends.

    Iterating produces the tokens lazily; each new iteration starts over,
    so the same instance can be consumed more than once.
    """

    def __init__(self, env: IlitoolsEnvironment, request: ValidationRequest):
        self.env = env
        self.request = request

    def __iter__(self) -> Iterator[str]:
        yield "--log"
        yield self.request.log_file_path
        yield "--xtflog"
        yield self.request.xtf_log_file_path
        yield "--verbose"
        yield from iter_tool_options(self.env)


def _plugin_jars(plugins_dir: Optional[str]) -> list[Path]:
    if not plugins_dir:
        return []
    directory = Path(plugins_dir)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.glob(PLUGIN_GLOB) if p.is_file())


def create_ilivalidator_command(
    env: IlitoolsEnvironment,
    request: ValidationRequest,
) -> list[str]:
    """Build the ilivalidator arguments for `request`."""
    args = ["-jar", env.ilivalidator_path, "--allObjectsAccessible"]

    jars = _plugin_jars(env.plugins_dir)
    if jars:
        args.extend(["--plugins", env.plugins_dir])
        logger.debug("Added plugins directory with %d JAR files", len(jars))

    if env.ilivalidator_config_path:
        args.extend(["--config", env.ilivalidator_config_path])

    args.extend(CommonArguments(env, request))

    # Transfer file and catalogues are positional
    args.append(request.transfer_file_path)
    args.extend(request.additional_catalogue_file_paths)

    return args


def create_ili2gpkg_command(
    env: IlitoolsEnvironment,
    request: ValidationRequest,
) -> list[str]:
    """Build the ili2gpkg validation arguments for `request`.

    Raises:
        IlitoolsConfigurationError: If the request carries catalogue files.
    """
    if request.additional_catalogue_file_paths:
        raise IlitoolsConfigurationError(
            "Additional catalogue files are not supported for GPKG validation, "
            "aborting validation."
        )

    args = ["-jar", env.ili2gpkg_path, "--validate"]

    if request.gpkg_model_names:
        args.extend(["--models", request.gpkg_model_names])

    args.extend(CommonArguments(env, request))
    args.extend(["--dbfile", request.transfer_file_path])

    return args


def build_validation_command(
    env: IlitoolsEnvironment,
    request: ValidationRequest,
) -> list[str]:
    """Pick the backend grammar from the request discriminator."""
    if request.is_geopackage:
        return create_ili2gpkg_command(env, request)
    return create_ilivalidator_command(env, request)


def create_import_command(
    env: IlitoolsEnvironment,
    request: ImportRequest,
) -> list[str]:
    """Build the ili2gpkg arguments importing a transfer file into a GeoPackage.

    The data has already been validated at this point, so ili2gpkg's own
    validation is switched off.
    """
    args = [
        "-jar", env.ili2gpkg_path,
        "--import",
        "--dbfile", request.db_file_path,
        "--dataset", request.dataset,
        "--disableValidation",
    ]
    args.extend(iter_tool_options(env))
    args.append(request.file_path)
    return args


def create_export_command(
    env: IlitoolsEnvironment,
    request: ExportRequest,
) -> list[str]:
    """Build the ili2gpkg arguments exporting a dataset to a transfer file."""
    args = [
        "-jar", env.ili2gpkg_path,
        "--export",
        "--dbfile", request.db_file_path,
        "--dataset", request.dataset,
    ]
    args.extend(iter_tool_options(env))
    args.append(request.file_path)
    return args


def pretty_print_command(command: Iterable[str]) -> str:
    """Render arguments for log output.

    Options stay bare, everything else is double-quoted. Not safe to use as
    process arguments.
    """
    return " ".join(
        arg if arg.startswith("-") else f'"{arg}"'
        for arg in command
        if arg
    )
