"""Focused constants organization for pkgctx."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ExtractionDefaults:
    """Default extraction and output settings."""
    MAX_EXAMPLES: int = 3
    FORMAT: str = "yaml"
    LOG_LEVEL: str = "WARNING"
    LOG_DIR: str = "logs"
    LANGUAGE: str = "R"


@dataclass(frozen=True)
class ExtractionLimits:
    """Thresholds used by the post-processing transforms."""
    HOIST_MIN_OCCURRENCES: int = 3
    COMPACT_MAX_CHARS: int = 100
    MIN_EXAMPLES: int = 0


@dataclass(frozen=True)
class NetworkSettings:
    """Package acquisition settings."""
    CRAN_MIRROR: str = "https://cloud.r-project.org"
    GITHUB_ARCHIVE: str = "https://github.com/{owner}/{repo}/archive/{ref}.tar.gz"
    DEFAULT_REF: str = "HEAD"
    PYPI_INDEX: str = "https://pypi.org"
    PYPI_JSON: str = "{index}/pypi/{name}/json"
    PYPI_RELEASE_JSON: str = "{index}/pypi/{name}/{version}/json"
    TIMEOUT: int = 60


@dataclass(frozen=True)
class ApplicationMetadata:
    """Application metadata and system constants."""
    NAME: str = "pkgctx"
    VERSION: str = "pkgctx 0.3.0"
    EXIT_SUCCESS: int = 0
    EXIT_FAILURE: int = 1

    @property
    def output_formats(self) -> Tuple[str, ...]:
        """Supported output formats."""
        return ("yaml", "json")

    @property
    def languages(self) -> Tuple[str, ...]:
        """Subcommand names, one per supported package language."""
        return ("r", "python")

    @property
    def log_levels(self) -> Tuple[str, ...]:
        """Accepted log level names."""
        return ("DEBUG", "INFO", "WARNING", "ERROR")


# Singleton instances for easy access
DEFAULTS = ExtractionDefaults()
LIMITS = ExtractionLimits()
NETWORK = NetworkSettings()
APP = ApplicationMetadata()
