"""
Main entry point for plag.

Parses the command line, extracts the GPS position of every photo in input
order and writes the resulting GeoJSON FeatureCollection to standard output.
"""

import argparse
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Sequence, TextIO, Tuple

from . import __version__
from .config import ON_ERROR_POLICIES, PlagConfig
from .exceptions import ConfigValidationError, ExtractionError, GeoJSONEncodingError
from .geojson_builder import GeoJSONBuilder
from .logger import Logger
from .metadata_extractor import MetadataExtractor
from .models import Coordinate

ExtractionResult = Tuple[str, Optional[Coordinate], Optional[ExtractionError]]


class PhotoLocator:
    """
    Orchestrates a run: extraction of every input file, then serialization.

    Per-file failures are reported on stderr and either skipped or turned
    into a failed run, depending on the ``on_error`` policy.
    """

    def __init__(self, config: PlagConfig, logger: Logger):
        """
        Initialize the locator.

        Args:
            config: Validated run configuration
            logger: Configured application logger
        """
        self.config = config
        self.logger = logger
        self.log = logger.get_logger(__name__)

        self.metadata_extractor = MetadataExtractor()
        self.geojson_builder = GeoJSONBuilder()

    def _extract_one(self, file_path: str) -> ExtractionResult:
        try:
            return file_path, self.metadata_extractor.extract_coordinate(file_path), None
        except ExtractionError as e:
            return file_path, None, e

    def _results(self, file_paths: Sequence[str]) -> Iterator[ExtractionResult]:
        if self.config.workers > 1 and len(file_paths) > 1:
            # map() yields in submission order whatever order the reads finish in.
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                yield from executor.map(self._extract_one, file_paths)
        else:
            for file_path in file_paths:
                yield self._extract_one(file_path)

    def extract_all(self, file_paths: Sequence[str]) -> List[Coordinate]:
        """
        Extract coordinates from every file, preserving input order.

        Args:
            file_paths: Photos to read

        Returns:
            Coordinates of the files that carried a usable location

        Raises:
            ExtractionError: The first failure, when the run is fail-fast
        """
        coordinates = []
        failed = 0
        progress_bar = self.logger.create_progress_bar(len(file_paths))

        try:
            for file_path, coordinate, error in self._results(file_paths):
                if progress_bar:
                    progress_bar.update(1)

                if error is None:
                    self.logger.log_extraction(file_path, coordinate)
                    coordinates.append(coordinate)
                    continue

                if self.config.fail_fast:
                    raise error

                failed += 1
                self.logger.log_extraction(file_path, None, error)
        finally:
            if progress_bar:
                progress_bar.close()

        self.logger.log_run_summary(len(file_paths), len(coordinates), failed)
        return coordinates

    def run(self, file_paths: Sequence[str], stream: TextIO) -> int:
        """
        Run plag over the given files.

        Args:
            file_paths: Photos to read
            stream: Text stream receiving the GeoJSON document

        Returns:
            Process exit code
        """
        try:
            coordinates = self.extract_all(file_paths)
        except ExtractionError as e:
            self.log.error(f"{e.path}: {e}")
            return 1

        try:
            self.geojson_builder.write(coordinates, stream, pretty=self.config.pretty)
        except GeoJSONEncodingError as e:
            self.log.error(str(e))
            return 1

        return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog='plag',
        description='Photo Location As GeoJSON - Extract GPS location from photos to GeoJSON',
    )
    parser.add_argument('files', nargs='+', metavar='FILE', help='A list of photos')
    parser.add_argument('--pretty', action='store_true', default=None,
                        help='Output human-readable GeoJSON')
    parser.add_argument('--on-error', choices=ON_ERROR_POLICIES, default=None,
                        help='skip: report unreadable photos and continue (default); '
                             'fail: stop at the first one and write nothing')
    parser.add_argument('-w', '--workers', type=int, default=None,
                        help='Number of threads reading photos (default: 1)')
    parser.add_argument('--log-level', type=str.upper, default=None,
                        help='Diagnostic level on stderr (default: WARNING)')
    parser.add_argument('--log-file', default=None, help='Also write diagnostics to this file')
    parser.add_argument('--progress', action='store_true', default=None,
                        help='Show a progress bar on stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)

    try:
        config = PlagConfig.from_env().with_overrides(
            pretty=args.pretty,
            on_error=args.on_error,
            workers=args.workers,
            log_level=args.log_level,
            log_file=args.log_file,
            progress=args.progress,
        )
    except ConfigValidationError as e:
        print(f"plag: {e}", file=sys.stderr)
        sys.exit(1)

    logger = Logger(config.log_level, config.log_file, progress=config.progress)
    locator = PhotoLocator(config, logger)
    sys.exit(locator.run(args.files, sys.stdout))


if __name__ == "__main__":
    main()
