"""
plag - Photo Location As GeoJSON

Extracts the EXIF GPS position of photos and writes them as a GeoJSON
FeatureCollection of Point features.
"""

__version__ = "0.1.0"

from .exceptions import (
    ExtractionError,
    FileUnreadable,
    MalformedCoordinate,
    NoLocationData,
    NoMetadataContainer,
    PlagError,
)
from .geojson_builder import GeoJSONBuilder
from .metadata_extractor import MetadataExtractor
from .models import Coordinate, GpsAxis, GpsRecord

__all__ = [
    "Coordinate",
    "ExtractionError",
    "FileUnreadable",
    "GeoJSONBuilder",
    "GpsAxis",
    "GpsRecord",
    "MalformedCoordinate",
    "MetadataExtractor",
    "NoLocationData",
    "NoMetadataContainer",
    "PlagError",
]
