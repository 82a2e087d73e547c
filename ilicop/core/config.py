from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runner settings loaded from environment variables.

    The ilitools paths are normally resolved by the container entrypoint
    (download + unpack of ilivalidator / ili2gpkg) and exported as env vars
    before the runner starts. Anything left blank counts as "not installed".

    GWP processing
    ──────────────
    GWP_CONFIG_DIR holds one sub-directory per profile:

        {GWP_CONFIG_DIR}/{profile_id}/{GWP_DATA_GPKG_FILE_NAME}
        {GWP_CONFIG_DIR}/{profile_id}/{GWP_ADDITIONAL_FILES_FOLDER_NAME}/*

    Profiles without a directory are not post-processed.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ilitools installation
    ilitools_home_dir: Optional[str] = None
    ilitools_cache_dir: Optional[str] = None
    ilitools_model_repository_dir: Optional[str] = None
    ilitools_plugins_dir: Optional[str] = None
    ilitools_trace_enabled: bool = False

    ilivalidator_version: Optional[str] = None
    ilivalidator_path: Optional[str] = None
    ilivalidator_config_path: Optional[str] = None

    # ili2gpkg is only usable when the feature flag is on as well.
    enable_gpkg_validation: bool = False
    ili2gpkg_version: Optional[str] = None
    ili2gpkg_path: Optional[str] = None

    java_executable: str = "java"

    # HTTP proxy forwarded to the ilitools, e.g. "http://proxy.local:8080".
    proxy: Optional[str] = None

    # GWP post-processing
    gwp_config_dir: Optional[str] = None
    gwp_data_gpkg_file_name: str = "data.gpkg"
    gwp_additional_files_folder_name: str = "AdditionalFiles"
    gwp_zip_file_name: str = "gwp_results_log.zip"

    # Per-job working directories live below this root.
    upload_dir: str = "/uploads"

    debug: bool = True

    @field_validator(
        "ilitools_home_dir",
        "ilitools_cache_dir",
        "ilitools_model_repository_dir",
        "ilitools_plugins_dir",
        "ilivalidator_version",
        "ilivalidator_path",
        "ilivalidator_config_path",
        "ili2gpkg_version",
        "ili2gpkg_path",
        "proxy",
        "gwp_config_dir",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def get_settings() -> Settings:
    return Settings()
