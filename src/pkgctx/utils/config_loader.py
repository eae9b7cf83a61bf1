"""Configuration loader for extraction settings from a YAML file."""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from pkgctx.config.constants import DEFAULTS, LIMITS, NETWORK
from pkgctx.data_models import ExtractOptions
from pkgctx.utils.error_handler import ConfigurationError


class ConfigLoader:
    """Load and manage configuration from YAML file.

    Without a path every getter returns the built-in defaults.
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize config loader.

        Args:
            config_path: Path to YAML configuration file, or None for defaults
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file.

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is not a YAML mapping
        """
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in {self.config_path}: {e}",
                    suggestions=["Validate the file with a YAML linter"],
                    error_code="bad_config"
                ) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Config file {self.config_path} must contain a mapping",
                error_code="bad_config"
            )
        return config

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Config section '{name}' must be a mapping",
                error_code="bad_config"
            )
        return section

    @staticmethod
    def _int_setting(section: str, key: str, value: Any) -> int:
        """Convert a numeric setting, reporting bad values as configuration errors."""
        if isinstance(value, bool):
            value = None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"{section}.{key} must be an integer, got {value!r}",
                suggestions=[f"Set {section}.{key} to a whole number"],
                error_code="bad_config"
            ) from e

    def get_extraction_config(self) -> Dict[str, Any]:
        """Get extraction configuration.

        Returns:
            Dictionary with extraction settings
        """
        return self._section('extraction')

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration.

        Returns:
            Dictionary with output settings
        """
        return self._section('output')

    def get_network_config(self) -> Dict[str, Any]:
        """Get network configuration.

        Returns:
            Dictionary with network settings
        """
        return self._section('network')

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.

        Returns:
            Dictionary with logging settings
        """
        return self._section('logging')

    def get_cran_mirror(self) -> str:
        """Get the CRAN mirror base URL."""
        return self.get_network_config().get('cran_mirror', NETWORK.CRAN_MIRROR)

    def get_pypi_index(self) -> str:
        """Get the PyPI index base URL."""
        return self.get_network_config().get('pypi_index', NETWORK.PYPI_INDEX)

    def get_timeout(self) -> int:
        """Get the HTTP timeout in seconds."""
        return self._int_setting('network', 'timeout', self.get_network_config().get('timeout', NETWORK.TIMEOUT))

    def get_log_level(self) -> str:
        """Get the configured log level."""
        return str(self.get_logging_config().get('level', DEFAULTS.LOG_LEVEL)).upper()

    def build_extract_options(self, overrides: Optional[Dict[str, Any]] = None) -> ExtractOptions:
        """Resolve extraction options.

        Precedence is overrides (typically CLI flags), then the config
        file, then built-in defaults. Override values of None are ignored.

        Args:
            overrides: Option values keyed by ExtractOptions field name

        Returns:
            Resolved ExtractOptions
        """
        extraction = self.get_extraction_config()
        output = self.get_output_config()
        resolved: Dict[str, Any] = {
            'include_internal': bool(extraction.get('include_internal', False)),
            'max_examples': self._int_setting(
                'extraction', 'max_examples', extraction.get('max_examples', DEFAULTS.MAX_EXAMPLES)
            ),
            'compact': bool(extraction.get('compact', False)),
            'hoist_common_args': bool(extraction.get('hoist_common_args', False)),
            'emit_classes': bool(extraction.get('emit_classes', False)),
            'output_format': str(output.get('format', DEFAULTS.FORMAT)),
        }
        for key, value in (overrides or {}).items():
            if value is not None:
                resolved[key] = value

        if resolved['max_examples'] < LIMITS.MIN_EXAMPLES:
            raise ConfigurationError("max_examples must not be negative", error_code="bad_config")
        if resolved['output_format'] not in ('yaml', 'json'):
            raise ConfigurationError(
                f"Unknown output format: {resolved['output_format']}",
                suggestions=["Use 'yaml' or 'json'"],
                error_code="bad_config"
            )
        return ExtractOptions(**resolved)
