"""
Exception taxonomy for the plag application.

Every error raised by the extractor, the GeoJSON builder or the configuration
layer derives from ``PlagError`` and carries a stable machine-readable code
so the command line can report failures consistently.

Per-file extraction failures
----------------------------
- ``FileUnreadable``       path missing, not a file, or cannot be opened.
- ``NoMetadataContainer``  file has no EXIF block any reader understands.
- ``NoLocationData``       EXIF present but latitude/longitude tags are not.
- ``MalformedCoordinate``  GPS tags present but unusable or out of range.
"""

from typing import Optional


class PlagError(Exception):
    """
    Base exception for all plag errors.

    Attributes:
        message: Human-readable error description
        path: File the error is associated with, if any
        code: Machine-readable error code
    """

    default_code = "PLAG_ERROR"

    def __init__(self, message: str = "", path: Optional[str] = None, code: str = ""):
        self.message = message
        self.path = path
        self.code = code or self.default_code
        super().__init__(message)


class ExtractionError(PlagError):
    """Base class for failures extracting a coordinate from a single file."""

    default_code = "EXTRACTION_FAILED"


class FileUnreadable(ExtractionError):
    """The path does not exist or cannot be opened for reading."""

    default_code = "FILE_UNREADABLE"


class NoMetadataContainer(ExtractionError):
    """The file carries no parseable EXIF block."""

    default_code = "NO_METADATA_CONTAINER"


class NoLocationData(ExtractionError):
    """The EXIF block is present but lacks the GPS latitude/longitude tags."""

    default_code = "NO_LOCATION_DATA"

    def __init__(self, message: str = "", path: Optional[str] = None,
                 tag: Optional[str] = None):
        self.tag = tag
        super().__init__(message or f"missing field: {tag}", path=path)


class MalformedCoordinate(ExtractionError):
    """GPS tags are present but cannot be decoded into a valid coordinate."""

    default_code = "MALFORMED_COORDINATE"

    def __init__(self, message: str = "", path: Optional[str] = None,
                 tag: Optional[str] = None):
        self.tag = tag
        if tag and message:
            message = f"invalid field {tag}: {message}"
        super().__init__(message, path=path)


class GeoJSONEncodingError(PlagError):
    """The feature collection could not be serialized."""

    default_code = "GEOJSON_ENCODING_FAILED"


class ConfigValidationError(PlagError):
    """
    Raised when a configuration value is out of its valid range.

    Attributes:
        key: The configuration key that failed validation
        value: The invalid value
    """

    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")
