"""GWP post-processing: GeoPackage population, translation and bundling."""

from ilicop.gwp.gpkg import gpkg_needs_translation, is_translation_needed
from ilicop.gwp.processor import GwpProcessor, translated_file_name_for
from ilicop.gwp.types import GwpOutcome, GwpProcessorOptions, GwpStage, GwpStatus

__all__ = [
    "gpkg_needs_translation",
    "is_translation_needed",
    "GwpProcessor",
    "translated_file_name_for",
    "GwpOutcome",
    "GwpProcessorOptions",
    "GwpStage",
    "GwpStatus",
]
