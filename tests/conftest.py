"""Shared test fixtures for the runner test suite.

GeoPackages are plain SQLite files carrying the two ili2db metadata tables
the translation decision reads. No Java tools are ever launched; executor
calls are mocked wherever a test needs an ili2gpkg result.
"""

from pathlib import Path
from typing import Iterable, Optional

import pytest
from sqlalchemy import Column, MetaData, String, Table, create_engine, insert

from ilicop.ilitools.environment import IlitoolsEnvironment
from ilicop.ilitools.types import Profile, ValidationRequest

ILIVALIDATOR_PATH = "/path/to/ilivalidator.jar"
ILI2GPKG_PATH = "/path/to/ili2gpkg.jar"


def make_gpkg(path: Path, model_names: Iterable[str], topics: Iterable[str]) -> Path:
    """Create a minimal GeoPackage with ili2db model and basket metadata."""
    metadata = MetaData()
    models = Table("T_ILI2DB_MODEL", metadata, Column("modelName", String))
    baskets = Table("T_ILI2DB_BASKET", metadata, Column("topic", String))

    engine = create_engine(f"sqlite:///{path}")
    try:
        metadata.create_all(engine)
        with engine.begin() as conn:
            for name in model_names:
                conn.execute(insert(models).values(modelName=name))
            for topic in topics:
                conn.execute(insert(baskets).values(topic=topic))
    finally:
        engine.dispose()
    return path


def make_request(
    home_directory: str,
    transfer_file: str,
    model_names: Optional[str] = None,
    catalogue_files: Iterable[str] = (),
) -> ValidationRequest:
    stem = Path(transfer_file).stem
    return ValidationRequest(
        transfer_file_name=transfer_file,
        transfer_file_path=str(Path(home_directory) / transfer_file),
        log_file_path=str(Path(home_directory) / f"{stem}_log.log"),
        xtf_log_file_path=str(Path(home_directory) / f"{stem}_log.xtf"),
        additional_catalogue_file_paths=tuple(catalogue_files),
        gpkg_model_names=model_names,
        is_geopackage=transfer_file.lower().endswith(".gpkg"),
    )


@pytest.fixture
def ilitools_env(tmp_path) -> IlitoolsEnvironment:
    return IlitoolsEnvironment(
        installation_dir=str(tmp_path / "FALLOUT"),
        cache_dir=str(tmp_path / "ARKSHARK"),
        model_repository_dir=str(tmp_path / "OLYMPIAVIEW"),
        enable_gpkg_validation=True,
        ilivalidator_path=ILIVALIDATOR_PATH,
        ili2gpkg_path=ILI2GPKG_PATH,
    )


@pytest.fixture
def profile() -> Profile:
    return Profile(id="DEFAULT")
