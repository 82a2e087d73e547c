"""GeoPackage metadata access for the translation decision.

ili2gpkg records the INTERLIS models of a schema in T_ILI2DB_MODEL and one
row per imported basket in T_ILI2DB_BASKET. Comparing both tells whether
the imported data uses a topic from a model the template does not know,
i.e. whether the data must be translated.

Connection handling:
  Every call creates its own engine and disposes it before returning.
  A pooled SQLite connection left open keeps the GeoPackage file locked,
  which breaks the ili2gpkg export and the ZIP step that follow.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

from sqlalchemy import column, create_engine, select, table
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

MODEL_TABLE = "T_ILI2DB_MODEL"
MODEL_NAME_COLUMN = "modelName"
BASKET_TABLE = "T_ILI2DB_BASKET"
TOPIC_COLUMN = "topic"

TOPIC_SEPARATOR = "."


def is_translation_needed(topics: Iterable[str], model_names: Iterable[str]) -> bool:
    """Return True if any topic's model prefix matches none of the models.

    The prefix is the text before the first separator ("Model.Topic" →
    "Model"); it matches a model name if it is a substring of it.
    """
    model_names = list(model_names)
    for topic in topics:
        prefix = topic.split(TOPIC_SEPARATOR, 1)[0]
        if not any(prefix in name for name in model_names):
            return True
    return False


def _read_column(conn: Connection, table_name: str, column_name: str) -> list[str]:
    query = select(column(column_name)).select_from(table(table_name))
    return [str(value) for (value,) in conn.execute(query) if value is not None]


def read_models_and_topics(gpkg_path: Union[str, Path]) -> tuple[list[str], list[str]]:
    """Return (model names, basket topics) stored in the GeoPackage."""
    engine = create_engine(f"sqlite:///{Path(gpkg_path)}")
    try:
        with engine.connect() as conn:
            model_names = _read_column(conn, MODEL_TABLE, MODEL_NAME_COLUMN)
            topics = _read_column(conn, BASKET_TABLE, TOPIC_COLUMN)
    finally:
        engine.dispose()
    return model_names, topics


def gpkg_needs_translation(gpkg_path: Union[str, Path]) -> bool:
    """Decide from the GeoPackage contents whether a translated export is needed.

    A GeoPackage without the ili2db metadata tables cannot be translated
    and is reported as not needing it.
    """
    try:
        model_names, topics = read_models_and_topics(gpkg_path)
    except SQLAlchemyError as exc:
        logger.warning("Could not read ili2db metadata from %s: %s", gpkg_path, exc)
        return False

    needed = is_translation_needed(topics, model_names)
    logger.info(
        "Translation %s for %s (models=%s, topics=%s)",
        "needed" if needed else "not needed", Path(gpkg_path).name,
        sorted(set(model_names)), sorted(set(topics)),
    )
    return needed
