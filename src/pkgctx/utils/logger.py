"""Logging utility for pkgctx."""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

from pkgctx.config.constants import APP, DEFAULTS


class Logger:
    """Centralized logging utility."""

    _instance: Optional[logging.Logger] = None

    @classmethod
    def get_logger(cls, name: str = APP.NAME,
                   level: str = DEFAULTS.LOG_LEVEL,
                   log_to_file: bool = False,
                   log_dir: str = DEFAULTS.LOG_DIR) -> logging.Logger:
        """Get or create the package logger.

        Console output goes to stderr; stdout is reserved for records.

        Args:
            name: Logger name
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Whether to log to file
            log_dir: Directory for log files

        Returns:
            Configured logger instance
        """
        if cls._instance is not None:
            return cls._instance

        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper()))

        # Clear existing handlers
        logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_to_file:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = log_path / f"{APP.NAME}_{timestamp}.log"

            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            logger.info(f"Logging to file: {log_file}")

        cls._instance = logger
        return logger

    @classmethod
    def reset(cls):
        """Reset the logger instance."""
        if cls._instance is not None:
            cls._instance.handlers.clear()
        cls._instance = None

    @classmethod
    def format_record_summary(cls, records: list) -> str:
        """Summarize a record list for logging."""
        functions = [r for r in records if getattr(r, "kind", "") == "function"]
        exported = sum(1 for r in functions if getattr(r, "exported", False))
        documented = sum(1 for r in functions if getattr(r, "purpose", None))
        classes = sum(1 for r in records if getattr(r, "kind", "") == "class")
        return (
            f"{len(records)} records | functions={len(functions)} "
            f"exported={exported} documented={documented} classes={classes}"
        )


def get_logger(name: str = APP.NAME, **kwargs) -> logging.Logger:
    """Convenience function to get logger.

    Args:
        name: Logger name
        **kwargs: Additional arguments for Logger.get_logger()

    Returns:
        Logger instance
    """
    return Logger.get_logger(name, **kwargs)
