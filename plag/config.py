"""
Run configuration for plag.

Defaults can be set through ``PLAG_*`` environment variables; command-line
flags override them. ``validate()`` raises ``ConfigValidationError`` for
out-of-range values so a bad setting fails before any file is read.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

from .exceptions import ConfigValidationError

ON_ERROR_SKIP = "skip"
ON_ERROR_FAIL = "fail"
ON_ERROR_POLICIES = (ON_ERROR_SKIP, ON_ERROR_FAIL)

MAX_WORKERS = 32
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class PlagConfig:
    """
    Immutable run configuration.

    Attributes:
        pretty: Indent the GeoJSON output
        on_error: ``skip`` to report a failing file and continue, ``fail`` to abort the run
        workers: Number of threads used to read files (1 reads sequentially)
        log_level: Level for diagnostics written to stderr
        log_file: Optional file receiving the same diagnostics
        progress: Show a progress bar on stderr
    """

    pretty: bool = False
    on_error: str = ON_ERROR_SKIP
    workers: int = 1
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    progress: bool = False

    @classmethod
    def from_env(cls) -> "PlagConfig":
        """
        Load configuration from ``PLAG_*`` environment variables.

        Raises:
            ConfigValidationError: If a value is invalid
        """
        workers = os.getenv("PLAG_WORKERS", "1")
        try:
            workers_value = int(workers)
        except ValueError as e:
            raise ConfigValidationError("PLAG_WORKERS", workers, "must be an integer") from e

        config = cls(
            pretty=_env_flag("PLAG_PRETTY"),
            on_error=os.getenv("PLAG_ON_ERROR", ON_ERROR_SKIP).strip().lower(),
            workers=workers_value,
            log_level=os.getenv("PLAG_LOG_LEVEL", "WARNING").strip().upper(),
            log_file=os.getenv("PLAG_LOG_FILE") or None,
            progress=_env_flag("PLAG_PROGRESS"),
        )
        config.validate()
        return config

    def with_overrides(self, **overrides) -> "PlagConfig":
        """Return a copy with every non-None override applied, validated."""
        values = {key: value for key, value in overrides.items() if value is not None}
        config = replace(self, **values)
        config.validate()
        return config

    @property
    def fail_fast(self) -> bool:
        return self.on_error == ON_ERROR_FAIL

    def validate(self) -> None:
        """
        Check every value is in its valid range.

        Raises:
            ConfigValidationError: On the first invalid value
        """
        if self.on_error not in ON_ERROR_POLICIES:
            raise ConfigValidationError(
                "on_error", self.on_error, f"must be one of {', '.join(ON_ERROR_POLICIES)}"
            )
        if not 1 <= self.workers <= MAX_WORKERS:
            raise ConfigValidationError("workers", self.workers, f"must be between 1 and {MAX_WORKERS}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigValidationError(
                "log_level", self.log_level, f"must be one of {', '.join(LOG_LEVELS)}"
            )
