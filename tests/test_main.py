import json

import pytest
from PIL import Image

from plag import __version__
from plag.config import PlagConfig
from plag.logger import Logger
from plag.main import PhotoLocator, build_parser, main

EXPECTED_MOUNTAIN = [-121.06083333333333, 48.47138888888889]


def run_cli(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    captured = capsys.readouterr()
    return exc_info.value.code, captured.out, captured.err


def positions(document):
    return [f["geometry"]["coordinates"] for f in json.loads(document)["features"]]


def test_scenario_photo(mountain_photo, capsys):
    code, out, err = run_cli([mountain_photo], capsys)

    assert code == 0
    assert out == (
        '{"type":"FeatureCollection","features":[{"type":"Feature","geometry":'
        '{"type":"Point","coordinates":[-121.06083333333333,48.47138888888889]},'
        '"properties":{}}]}\n'
    )
    assert err == ""


def test_input_order_is_preserved(mountain_photo, harbour_photo, capsys):
    code, out, _ = run_cli([harbour_photo, mountain_photo, harbour_photo], capsys)

    assert code == 0
    coordinates = positions(out)
    assert len(coordinates) == 3
    assert coordinates[1] == EXPECTED_MOUNTAIN
    assert coordinates[0] == coordinates[2]


def test_bad_files_are_skipped(mountain_photo, plain_photo, no_gps_photo, text_file, tmp_path, capsys):
    missing = str(tmp_path / "missing.jpg")
    code, out, err = run_cli([plain_photo, missing, mountain_photo, no_gps_photo, text_file], capsys)

    assert code == 0
    assert positions(out) == [EXPECTED_MOUNTAIN]
    for path in (plain_photo, missing, no_gps_photo, text_file):
        assert f"{path}: " in err
    assert "missing field: GPSLatitude" in err


def test_no_valid_files_gives_empty_collection(plain_photo, capsys):
    code, out, _ = run_cli([plain_photo], capsys)

    assert code == 0
    assert json.loads(out) == {"type": "FeatureCollection", "features": []}


def test_fail_policy_aborts_without_output(mountain_photo, plain_photo, capsys):
    code, out, err = run_cli(["--on-error", "fail", mountain_photo, plain_photo], capsys)

    assert code == 1
    assert out == ""
    assert f"{plain_photo}: no EXIF metadata found" in err


def test_fail_policy_from_environment(plain_photo, monkeypatch, capsys):
    monkeypatch.setenv("PLAG_ON_ERROR", "fail")
    code, out, _ = run_cli([plain_photo], capsys)

    assert code == 1
    assert out == ""


def test_pretty_matches_compact(mountain_photo, harbour_photo, capsys):
    _, compact, _ = run_cli([mountain_photo, harbour_photo], capsys)
    _, pretty, _ = run_cli(["--pretty", mountain_photo, harbour_photo], capsys)

    assert pretty != compact
    assert json.loads(pretty) == json.loads(compact)
    assert '\n  "features": [' in pretty


def test_runs_are_byte_identical(mountain_photo, harbour_photo, capsys):
    _, first, _ = run_cli([mountain_photo, harbour_photo], capsys)
    _, second, _ = run_cli([mountain_photo, harbour_photo], capsys)

    assert first == second


def test_workers_preserve_order(mountain_photo, harbour_photo, plain_photo, capsys):
    files = [harbour_photo, plain_photo, mountain_photo] * 4
    _, sequential, _ = run_cli(files, capsys)
    _, threaded, _ = run_cli(["--workers", "4"] + files, capsys)

    assert threaded == sequential
    assert len(positions(threaded)) == 8


def test_invalid_workers(mountain_photo, capsys):
    code, out, err = run_cli(["--workers", "0", mountain_photo], capsys)

    assert code == 1
    assert out == ""
    assert "workers" in err


def test_files_are_required(capsys):
    code, _, err = run_cli([], capsys)

    assert code == 2
    assert "FILE" in err


def test_version(capsys):
    code, out, _ = run_cli(["--version"], capsys)

    assert code == 0
    assert out.strip() == f"plag {__version__}"


def test_log_file(mountain_photo, plain_photo, tmp_path, capsys):
    log_file = tmp_path / "plag.log"
    code, _, _ = run_cli(["--log-level", "info", "--log-file", str(log_file), mountain_photo, plain_photo], capsys)

    assert code == 0
    content = log_file.read_text(encoding="utf-8")
    assert "GPS found in" in content
    assert "Features written: 1" in content


def test_progress_bar_goes_to_stderr(mountain_photo, capsys):
    code, out, err = run_cli(["--progress", mountain_photo], capsys)

    assert code == 0
    assert positions(out) == [EXPECTED_MOUNTAIN]
    assert "Reading photos" in err


def test_parser_defaults_defer_to_config():
    args = build_parser().parse_args(["a.jpg"])
    assert args.pretty is None
    assert args.on_error is None
    assert args.workers is None


def test_extract_all_counts(mountain_photo, plain_photo):
    locator = PhotoLocator(PlagConfig(), Logger())
    coordinates = locator.extract_all([plain_photo, mountain_photo])

    assert [c.as_position() for c in coordinates] == [EXPECTED_MOUNTAIN]


def test_oversized_photo_does_not_abort_run(panorama_photo, mountain_photo, capsys, monkeypatch):
    # Only the 64x16 panorama exceeds twice this limit.
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 300)
    code, out, _ = run_cli([panorama_photo, mountain_photo], capsys)

    assert code == 0
    coordinates = positions(out)
    assert len(coordinates) == 2
    assert coordinates[0] == pytest.approx([7.97472, 46.55889], abs=1e-5)
    assert coordinates[1] == EXPECTED_MOUNTAIN
