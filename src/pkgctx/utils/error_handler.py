"""Error types and user-facing error reporting."""

import logging
import sys
import traceback
from functools import wraps
from typing import List, Optional, TextIO

logger = logging.getLogger(__name__)


class PkgctxError(Exception):
    """Base error carrying a user-facing message and suggestions."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None,
                 error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggestions = suggestions or []
        self.error_code = error_code


class FetchError(PkgctxError):
    """Package could not be acquired."""
    pass


class ExtractionError(PkgctxError):
    """Package source tree could not be read."""
    pass


class IntrospectionError(PkgctxError):
    """The R introspection subprocess failed or produced unusable output."""
    pass


class ConfigurationError(PkgctxError):
    """Configuration file is malformed."""
    pass


def report_error(error: PkgctxError, stream: Optional[TextIO] = None) -> None:
    """Print an error and its suggestions."""
    stream = stream or sys.stderr
    code = f" [{error.error_code}]" if error.error_code else ""
    print(f"error{code}: {error.message}", file=stream)
    for suggestion in error.suggestions:
        print(f"  hint: {suggestion}", file=stream)


def graceful_error(func):
    """Decorator: turn common failures into PkgctxError with suggestions."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PkgctxError:
            raise
        except FileNotFoundError as e:
            raise PkgctxError(
                f"File not found: {e.filename or e}",
                suggestions=["Check the path", "Pass --config only for files that exist"],
                error_code="file_not_found"
            ) from e
        except Exception as e:
            logger.error(f"{func.__name__} failed: {e}")
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(traceback.format_exc())
            raise
    return wrapper
