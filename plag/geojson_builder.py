"""
GeoJSON output module.

Builds RFC 7946 Point features from extracted coordinates and serializes them
as a FeatureCollection, either compact or indented.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, TextIO

from .exceptions import GeoJSONEncodingError
from .models import Coordinate

# Two spaces per level, as most JSON pretty printers do.
PRETTY_INDENT = 2
COMPACT_SEPARATORS = (',', ':')


class GeoJSONBuilder:
    """Turns an ordered sequence of coordinates into a GeoJSON document."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def feature(coordinate: Coordinate) -> Dict[str, Any]:
        """
        Build a Point feature with an empty properties object.

        Args:
            coordinate: Position of the feature

        Returns:
            GeoJSON Feature mapping
        """
        return {
            "type": "Feature",
            "geometry": {
                "type": "Point",
                "coordinates": coordinate.as_position(),
            },
            "properties": {},
        }

    def feature_collection(self, coordinates: Iterable[Coordinate]) -> Dict[str, Any]:
        """
        Wrap coordinates in a FeatureCollection, preserving their order.

        Args:
            coordinates: Coordinates in output order

        Returns:
            GeoJSON FeatureCollection mapping
        """
        features: List[Dict[str, Any]] = [self.feature(c) for c in coordinates]
        return {
            "type": "FeatureCollection",
            "features": features,
        }

    def dumps(self, coordinates: Iterable[Coordinate], pretty: bool = False) -> str:
        """
        Serialize coordinates as a GeoJSON FeatureCollection.

        Args:
            coordinates: Coordinates in output order
            pretty: Indent nested structures instead of the compact form

        Returns:
            GeoJSON text
        """
        collection = self.feature_collection(coordinates)
        self.logger.debug(f"Serializing {len(collection['features'])} features (pretty={pretty})")

        try:
            if pretty:
                return json.dumps(collection, indent=PRETTY_INDENT, allow_nan=False, ensure_ascii=False)
            return json.dumps(collection, separators=COMPACT_SEPARATORS, allow_nan=False, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise GeoJSONEncodingError(f"cannot encode feature collection: {e}") from e

    def write(self, coordinates: Iterable[Coordinate], stream: TextIO, pretty: bool = False) -> None:
        """Write the GeoJSON document followed by a newline to ``stream``."""
        stream.write(self.dumps(coordinates, pretty=pretty))
        stream.write('\n')
        stream.flush()
