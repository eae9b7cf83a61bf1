"""Utility modules for pkgctx."""

from .logger import get_logger, Logger
from .file_reader import (
    read_file,
    write_file,
    list_files,
    walk_files
)
from .error_handler import (
    PkgctxError,
    FetchError,
    ExtractionError,
    IntrospectionError,
    ConfigurationError,
    graceful_error,
    report_error
)

__all__ = [
    'get_logger',
    'Logger',
    'read_file',
    'write_file',
    'list_files',
    'walk_files',
    'PkgctxError',
    'FetchError',
    'ExtractionError',
    'IntrospectionError',
    'ConfigurationError',
    'graceful_error',
    'report_error',
]
