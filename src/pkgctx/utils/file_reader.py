"""File reading utilities with error handling."""

from pathlib import Path
import os
from typing import Collection, List, Optional, Sequence, Union
import logging

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_file(file_path: PathLike, encoding: str = 'utf-8') -> Optional[str]:
    """Read file content with error handling.

    Undecodable bytes are replaced rather than rejected; Rd and R sources
    in the wild are not always valid UTF-8.

    Args:
        file_path: Path to the file
        encoding: File encoding (default: utf-8)

    Returns:
        File content as string, or None if error occurs
    """
    try:
        path = Path(file_path)
        if not path.exists():
            logger.error(f"File not found: {file_path}")
            return None

        if not path.is_file():
            logger.error(f"Not a file: {file_path}")
            return None

        with open(path, 'r', encoding=encoding, errors='replace') as f:
            content = f.read()

        logger.debug(f"Successfully read {len(content)} characters from {file_path}")
        return content

    except PermissionError as e:
        logger.error(f"Permission denied reading {file_path}: {e}")
        return None
    except OSError as e:
        logger.error(f"Unexpected error reading {file_path}: {e}")
        return None


def write_file(file_path: PathLike, content: str, encoding: str = 'utf-8') -> bool:
    """Write content to file with error handling.

    Args:
        file_path: Path to the file
        content: Content to write
        encoding: File encoding (default: utf-8)

    Returns:
        True if successful, False otherwise
    """
    try:
        path = Path(file_path)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding=encoding) as f:
            f.write(content)

        logger.debug(f"Successfully wrote {len(content)} characters to {file_path}")
        return True

    except PermissionError as e:
        logger.error(f"Permission denied writing {file_path}: {e}")
        return False
    except OSError as e:
        logger.error(f"Unexpected error writing {file_path}: {e}")
        return False


def list_files(directory: PathLike, extensions: Sequence[str]) -> List[Path]:
    """List regular files in ``directory`` with one of ``extensions``.

    Args:
        directory: Directory to scan (not recursive)
        extensions: Accepted suffixes, compared case-sensitively (``.R`` and ``.r``)

    Returns:
        Sorted list of matching paths; empty if the directory is missing
    """
    path = Path(directory)
    if not path.is_dir():
        logger.debug(f"Directory not found: {directory}")
        return []
    return sorted(p for p in path.iterdir() if p.is_file() and p.suffix in extensions)


def walk_files(directory: PathLike, extensions: Sequence[str],
               skip_dirs: Collection[str] = ()) -> List[Path]:
    """Recursively list files with one of ``extensions``.

    Hidden directories and those named in ``skip_dirs`` are not entered.

    Returns:
        Matching paths in sorted directory-walk order
    """
    found: List[Path] = []
    for current, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if not d.startswith(".") and d not in skip_dirs)
        found.extend(Path(current) / name for name in sorted(files) if Path(name).suffix in extensions)
    return found
