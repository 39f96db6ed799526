"""GeoJSON corpus adapter."""

from __future__ import annotations

from .iterate import (
    DirectoryFeatureSource,
    GeoJSONDirectoryReader,
    compile_records,
    decode_records,
    is_record_path,
    iter_record_paths,
    populate_index,
    read_feature,
)
from .properties import DECODERS, decoder_for
from .write import GeoJSONDirectoryWriter, format_feature, id_to_relpath

__all__ = [
    "DECODERS",
    "DirectoryFeatureSource",
    "GeoJSONDirectoryReader",
    "GeoJSONDirectoryWriter",
    "compile_records",
    "decode_records",
    "decoder_for",
    "format_feature",
    "id_to_relpath",
    "is_record_path",
    "iter_record_paths",
    "populate_index",
    "read_feature",
]
