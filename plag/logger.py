"""
Logging module for plag.

Standard output carries the GeoJSON document, so every diagnostic, progress
bar and summary goes to standard error (and optionally a log file).
"""

import logging
import sys
from typing import Optional

from tqdm import tqdm

from .models import Coordinate


class Logger:
    """
    Centralized logging configuration for a plag run.

    Provides consistent logging across all modules with configurable
    log levels and an optional log file.
    """

    def __init__(self, log_level: str = "WARNING", log_file: Optional[str] = None,
                 progress: bool = False):
        """
        Initialize the logger.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional log file path
            progress: Whether progress bars are shown
        """
        self.log_level = getattr(logging, log_level.upper(), logging.WARNING)
        self.log_file = log_file
        self.progress = progress
        self._setup_logging()

    def _setup_logging(self):
        """Set up logging configuration."""
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.log_file:
            try:
                file_handler = logging.FileHandler(self.log_file, mode='w', encoding='utf-8')
            except OSError as e:
                logging.error(f"Failed to set up file logging: {e}")
            else:
                file_handler.setLevel(self.log_level)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)
                logging.info(f"Logging to file: {self.log_file}")

        # Pillow logs every chunk it parses at DEBUG.
        logging.getLogger('PIL').setLevel(max(self.log_level, logging.INFO))
        logging.getLogger('exifread').setLevel(max(self.log_level, logging.WARNING))

        logging.debug("Logging system initialized")

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger instance for a specific module.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Configured logger instance
        """
        return logging.getLogger(name)

    def log_extraction(self, file_path: str, coordinate: Optional[Coordinate],
                       error: Optional[Exception] = None, level: int = logging.WARNING):
        """
        Log the outcome of extracting one file.

        Args:
            file_path: Path to the file
            coordinate: Extracted coordinate, None on failure
            error: Failure reason when no coordinate was extracted
            level: Level used for failures
        """
        logger = logging.getLogger(__name__)

        if coordinate is not None:
            logger.info(f"GPS found in {file_path}: "
                        f"({coordinate.latitude:.6f}, {coordinate.longitude:.6f})")
        else:
            logger.log(level, f"{file_path}: {error}")

    def log_run_summary(self, total_files: int, extracted: int, failed: int):
        """
        Log a summary of the run.

        Args:
            total_files: Number of input paths
            extracted: Number of features produced
            failed: Number of files without a usable location
        """
        logger = logging.getLogger(__name__)

        logger.info("=" * 50)
        logger.info("RUN SUMMARY")
        logger.info("=" * 50)
        logger.info(f"Input files: {total_files}")
        logger.info(f"Features written: {extracted}")
        logger.info(f"Files skipped: {failed}")
        logger.info("=" * 50)

    def create_progress_bar(self, total: int, desc: str = "Reading photos") -> Optional[tqdm]:
        """
        Create a progress bar on stderr.

        Args:
            total: Total number of items to process
            desc: Description for the progress bar

        Returns:
            tqdm progress bar instance or None if progress is disabled
        """
        if self.progress and total > 0:
            return tqdm(total=total, desc=desc, unit="files", ncols=80, file=sys.stderr)
        return None
