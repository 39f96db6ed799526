"""Ports consumed by the resolution engine and application services."""

from __future__ import annotations

from .sources import FeatureReader, FeatureSource, FeatureWriter, SourcedFeature

__all__ = ["FeatureReader", "FeatureSource", "FeatureWriter", "SourcedFeature"]
