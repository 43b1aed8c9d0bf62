import logging
import os
from pathlib import Path

import pytest

from tests.photo_factory import EXIF_MAKE, gps_ifd, make_photo


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PLAG_* variables of the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("PLAG_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def mountain_photo(tmp_path):
    """JPEG tagged 48°28'17.0"N 121°03'39.0"W."""
    return make_photo(
        tmp_path / "mountain.jpg",
        gps=gps_ifd((48, 28, 17), "N", (121, 3, 39), "W"),
        exif_tags={EXIF_MAKE: "TestCam"},
    )


@pytest.fixture
def harbour_photo(tmp_path):
    """JPEG tagged 33°51'35.0"S 151°12'40.0"E."""
    return make_photo(
        tmp_path / "harbour.jpg",
        gps=gps_ifd((33, 51, 35), "S", (151, 12, 40), "E"),
    )


@pytest.fixture
def plain_photo(tmp_path):
    """JPEG without any EXIF block."""
    return make_photo(tmp_path / "plain.jpg")


@pytest.fixture
def no_gps_photo(tmp_path):
    """JPEG with EXIF but no GPS IFD."""
    return make_photo(tmp_path / "nogps.jpg", exif_tags={EXIF_MAKE: "TestCam"})


@pytest.fixture
def out_of_range_photo(tmp_path):
    """JPEG whose latitude is beyond the pole."""
    return make_photo(
        tmp_path / "broken.jpg",
        gps=gps_ifd((91, 0, 0), "N", (10, 0, 0), "E"),
    )


@pytest.fixture
def text_file(tmp_path):
    path = Path(tmp_path) / "notes.txt"
    path.write_text("not a photo\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def panorama_photo(tmp_path):
    """Wide JPEG tagged 46°33'32.0"N 7°58'29.0"E."""
    return make_photo(
        tmp_path / "panorama.jpg",
        gps=gps_ifd((46, 33, 32), "N", (7, 58, 29), "E"),
        size=(64, 16),
    )
