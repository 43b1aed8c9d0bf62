"""
Typed records passed between the metadata extractor and the GeoJSON builder.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Coordinate:
    """A point in signed decimal degrees, longitude first as in GeoJSON."""

    longitude: float
    latitude: float

    def as_position(self) -> List[float]:
        """Return the GeoJSON position ``[longitude, latitude]``."""
        return [self.longitude, self.latitude]


@dataclass(frozen=True)
class GpsAxis:
    """
    Raw degrees/minutes/seconds and hemisphere reference for one axis.

    Any field may be None when the corresponding EXIF tag is absent.
    """

    degrees: Optional[float] = None
    minutes: Optional[float] = None
    seconds: Optional[float] = None
    ref: Optional[str] = None

    @property
    def has_value(self) -> bool:
        return None not in (self.degrees, self.minutes, self.seconds)


@dataclass(frozen=True)
class GpsRecord:
    """Decoded GPS IFD of one file."""

    latitude: GpsAxis
    longitude: GpsAxis
    source: str = "pillow"
