"""Resolved metadata about the installed ilitools.

`IlitoolsEnvironment` is built once from `Settings` at startup and handed
to every component that needs tool paths. It is frozen; nothing mutates it
after construction.
"""

from dataclasses import dataclass
from typing import Optional

from ilicop.core.config import Settings


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class IlitoolsEnvironment:
    """Paths, versions and flags of the ilivalidator / ili2gpkg installation."""

    installation_dir: Optional[str] = None
    cache_dir: Optional[str] = None
    model_repository_dir: Optional[str] = None
    plugins_dir: Optional[str] = None
    enable_gpkg_validation: bool = False
    ilivalidator_version: Optional[str] = None
    ilivalidator_path: Optional[str] = None
    ilivalidator_config_path: Optional[str] = None
    ili2gpkg_version: Optional[str] = None
    ili2gpkg_path: Optional[str] = None
    trace_enabled: bool = False
    proxy: Optional[str] = None
    java_executable: str = "java"

    @property
    def is_ilivalidator_initialized(self) -> bool:
        return not _is_blank(self.ilivalidator_path)

    @property
    def is_ili2gpkg_initialized(self) -> bool:
        return self.enable_gpkg_validation and not _is_blank(self.ili2gpkg_path)

    @classmethod
    def from_settings(cls, settings: Settings) -> "IlitoolsEnvironment":
        return cls(
            installation_dir=settings.ilitools_home_dir,
            cache_dir=settings.ilitools_cache_dir,
            model_repository_dir=settings.ilitools_model_repository_dir,
            plugins_dir=settings.ilitools_plugins_dir,
            enable_gpkg_validation=settings.enable_gpkg_validation,
            ilivalidator_version=settings.ilivalidator_version,
            ilivalidator_path=settings.ilivalidator_path,
            ilivalidator_config_path=settings.ilivalidator_config_path,
            ili2gpkg_version=settings.ili2gpkg_version,
            ili2gpkg_path=settings.ili2gpkg_path,
            trace_enabled=settings.ilitools_trace_enabled,
            proxy=settings.proxy,
            java_executable=settings.java_executable,
        )

    def __str__(self) -> str:
        def value(v: Optional[str]) -> str:
            return v or "unset"

        def yes_no(flag: bool) -> str:
            return "yes" if flag else "no"

        rule = "-" * 74
        rows = [
            ("home directory", value(self.installation_dir)),
            ("cache directory", value(self.cache_dir)),
            ("model repository directory", value(self.model_repository_dir)),
            ("plugins directory", value(self.plugins_dir)),
            ("gpkg validation", "enabled" if self.enable_gpkg_validation else "disabled"),
            ("ilivalidator version", value(self.ilivalidator_version)),
            ("ilivalidator initialized", yes_no(self.is_ilivalidator_initialized)),
            ("ili2gpkg version", value(self.ili2gpkg_version)),
            ("ili2gpkg initialized", yes_no(self.is_ili2gpkg_initialized)),
            ("trace messages enabled", yes_no(self.trace_enabled)),
        ]
        body = "\n".join(f"{label + ':':<34}{text}" for label, text in rows)
        return f"\n{rule}\nilitools environment:\n{body}\n{rule}\n"
