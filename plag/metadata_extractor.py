"""
Metadata extraction module for photos.

This module locates the EXIF block of an image, decodes its GPS IFD into a
typed ``GpsRecord`` and converts the degrees/minutes/seconds triples into a
signed decimal-degree ``Coordinate``.

Pillow is used first as it covers the common formats (JPEG, TIFF, PNG, WebP).
Files Pillow cannot identify (HEIC, most camera raw formats) or refuses to
open as decompression bombs (very large panoramas) are handed to exifread
instead; the pixel data is never decoded.
"""

import logging
import math
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import exifread
from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import GPS, IFD

from .exceptions import (
    FileUnreadable,
    MalformedCoordinate,
    NoLocationData,
    NoMetadataContainer,
)
from .models import Coordinate, GpsAxis, GpsRecord

PathLike = Union[str, Path]
Dms = Tuple[Optional[float], Optional[float], Optional[float]]


class MetadataExtractor:
    """
    Extracts GPS coordinates from image files.

    Each call opens the file, reads its metadata and closes it again before
    returning; the extractor itself holds no per-file state and can be shared
    between threads.
    """

    # Extensions known to carry EXIF. Anything else is still attempted.
    IMAGE_EXTENSIONS = {
        '.jpg', '.jpeg', '.jpe', '.tif', '.tiff', '.png', '.webp',
        '.heic', '.heif', '.dng', '.nef', '.cr2', '.arw', '.orf', '.rw2',
    }

    def __init__(self):
        """Initialize the metadata extractor."""
        self.logger = logging.getLogger(__name__)

    def is_supported_file(self, file_path: PathLike) -> bool:
        """
        Check if the file has an extension known to carry EXIF metadata.

        Args:
            file_path: Path to the file to check

        Returns:
            True if the extension is a known EXIF-bearing format
        """
        return Path(file_path).suffix.lower() in self.IMAGE_EXTENSIONS

    def extract_coordinate(self, file_path: PathLike) -> Coordinate:
        """
        Extract the GPS position of a photo.

        Args:
            file_path: Path to the image file

        Returns:
            Coordinate in signed decimal degrees

        Raises:
            FileUnreadable: The file does not exist or cannot be opened
            NoMetadataContainer: The file has no EXIF block
            NoLocationData: The EXIF block has no latitude/longitude
            MalformedCoordinate: The GPS tags cannot be decoded
        """
        if not self.is_supported_file(file_path):
            self.logger.debug(f"Unrecognised extension, trying anyway: {file_path}")

        record = self.read_gps_record(file_path)
        try:
            return self.to_coordinate(record)
        except (NoLocationData, MalformedCoordinate) as e:
            e.path = str(file_path)
            raise

    def read_gps_record(self, file_path: PathLike) -> GpsRecord:
        """
        Read the GPS IFD of a file into a typed record.

        Args:
            file_path: Path to the image file

        Returns:
            GpsRecord with whatever latitude/longitude fields were present
        """
        path = Path(file_path)
        if path.is_dir():
            raise FileUnreadable("Is a directory", path=str(file_path))

        try:
            with Image.open(path) as img:
                exif = img.getexif()
                if not exif:
                    raise NoMetadataContainer("no EXIF metadata found", path=str(file_path))
                gps_info = exif.get_ifd(IFD.GPSInfo)
        except (UnidentifiedImageError, Image.DecompressionBombError) as e:
            self.logger.debug(f"Pillow cannot read {file_path} ({e}), falling back to exifread")
            return self._read_with_exifread(path, str(file_path))
        except OSError as e:
            raise FileUnreadable(e.strerror or str(e), path=str(file_path)) from e

        self.logger.debug(f"Read GPS IFD with Pillow from {file_path}: {len(gps_info)} tags")
        return GpsRecord(
            latitude=self._axis(
                gps_info.get(GPS.GPSLatitude), gps_info.get(GPS.GPSLatitudeRef),
                "GPSLatitude", str(file_path),
            ),
            longitude=self._axis(
                gps_info.get(GPS.GPSLongitude), gps_info.get(GPS.GPSLongitudeRef),
                "GPSLongitude", str(file_path),
            ),
            source="pillow",
        )

    def _read_with_exifread(self, path: Path, display_path: str) -> GpsRecord:
        try:
            with open(path, 'rb') as f:
                tags = exifread.process_file(f, details=False)
        except OSError as e:
            raise FileUnreadable(e.strerror or str(e), path=display_path) from e
        except Exception as e:
            raise NoMetadataContainer(f"unable to parse metadata: {e}", path=display_path) from e

        if not tags:
            raise NoMetadataContainer("no EXIF metadata found", path=display_path)

        def values(name: str) -> Any:
            tag = tags.get(name)
            return tag.values if tag is not None else None

        self.logger.debug(f"Read GPS tags with exifread from {display_path}")
        return GpsRecord(
            latitude=self._axis(
                values('GPS GPSLatitude'), values('GPS GPSLatitudeRef'),
                "GPSLatitude", display_path,
            ),
            longitude=self._axis(
                values('GPS GPSLongitude'), values('GPS GPSLongitudeRef'),
                "GPSLongitude", display_path,
            ),
            source="exifread",
        )

    def _axis(self, dms: Any, ref: Any, tag: str, display_path: str) -> GpsAxis:
        degrees, minutes, seconds = self._dms_values(dms, tag, display_path)
        return GpsAxis(
            degrees=degrees,
            minutes=minutes,
            seconds=seconds,
            ref=self._ref_value(ref, f"{tag}Ref", display_path),
        )

    @staticmethod
    def _dms_values(dms: Any, tag: str, display_path: str) -> Dms:
        """Convert a sequence of three EXIF rationals into floats."""
        if dms is None:
            return None, None, None
        if isinstance(dms, (str, bytes)):
            raise MalformedCoordinate("invalid field type", path=display_path, tag=tag)

        try:
            parts = [float(value) for value in dms]
        except (TypeError, ValueError, ZeroDivisionError) as e:
            raise MalformedCoordinate("invalid field type", path=display_path, tag=tag) from e

        if len(parts) != 3:
            raise MalformedCoordinate("expected 3 rationals", path=display_path, tag=tag)
        if not all(math.isfinite(part) for part in parts):
            raise MalformedCoordinate("zero denominator", path=display_path, tag=tag)

        return parts[0], parts[1], parts[2]

    @staticmethod
    def _ref_value(ref: Any, tag: str, display_path: str) -> Optional[str]:
        if ref is None:
            return None
        if isinstance(ref, bytes):
            try:
                ref = ref.decode('ascii')
            except UnicodeDecodeError as e:
                raise MalformedCoordinate("field is not a string", path=display_path, tag=tag) from e
        if not isinstance(ref, str):
            raise MalformedCoordinate("field is not a string", path=display_path, tag=tag)
        return ref

    @staticmethod
    def dms_to_decimal(axis: GpsAxis, negative_ref: str, tag: str) -> float:
        """
        Convert degrees/minutes/seconds to signed decimal degrees.

        Args:
            axis: Raw values for one axis
            negative_ref: Hemisphere letter that makes the value negative ('S' or 'W')
            tag: EXIF tag name of the axis, used in error messages

        Returns:
            Decimal degrees, negative for the southern/western hemisphere
        """
        if not axis.has_value:
            raise NoLocationData(tag=tag)
        if axis.ref is None:
            raise NoLocationData(tag=f"{tag}Ref")

        decimal = axis.degrees + axis.minutes / 60.0 + axis.seconds / 3600.0

        if axis.ref.strip('\x00 ').upper().endswith(negative_ref):
            decimal = -decimal

        return decimal

    def to_coordinate(self, record: GpsRecord) -> Coordinate:
        """
        Convert a decoded GPS record into a validated coordinate.

        Args:
            record: GPS record read from a file

        Returns:
            Coordinate in signed decimal degrees
        """
        latitude = self.dms_to_decimal(record.latitude, 'S', "GPSLatitude")
        longitude = self.dms_to_decimal(record.longitude, 'W', "GPSLongitude")

        if not -90.0 <= latitude <= 90.0:
            raise MalformedCoordinate(f"latitude {latitude} out of range", tag="GPSLatitude")
        if not -180.0 <= longitude <= 180.0:
            raise MalformedCoordinate(f"longitude {longitude} out of range", tag="GPSLongitude")

        return Coordinate(longitude=longitude, latitude=latitude)
