"""Project metadata for Python source trees.

Sources are consulted in order: ``PKG-INFO`` (present in every sdist),
``pyproject.toml``, ``setup.cfg`` and finally string literals in
``setup.py``. A field missing from one source is filled from the next.
"""

import configparser
import re
import tomllib
from dataclasses import dataclass, fields
from email.parser import HeaderParser
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from pkgctx.utils.file_reader import read_file

logger = logging.getLogger(__name__)

PROJECT_FILES = ("PKG-INFO", "pyproject.toml", "setup.cfg", "setup.py")
PYTHON_PACKAGE_NAME = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?")
_SETUP_FIELD = re.compile(r"""\b(name|version|description)\s*=\s*(['"])(.*?)\2""")


@dataclass
class ProjectMetadata:
    """Name, version and one-line summary of a Python project."""
    name: Optional[str] = None
    version: Optional[str] = None
    summary: Optional[str] = None

    def merge(self, other: "ProjectMetadata") -> "ProjectMetadata":
        """Fill fields missing here from ``other``."""
        return ProjectMetadata(**{
            f.name: getattr(self, f.name) or getattr(other, f.name) for f in fields(self)
        })


def is_distribution_name(name: str) -> bool:
    """Whether ``name`` is a syntactically valid PyPI project name."""
    return PYTHON_PACKAGE_NAME.fullmatch(name) is not None


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    text = " ".join(value.split())
    return text or None


def parse_pkg_info(content: str) -> ProjectMetadata:
    """Parse core metadata headers (``PKG-INFO`` / ``METADATA``)."""
    headers = HeaderParser().parsestr(content)
    summary = headers.get("Summary")
    return ProjectMetadata(
        name=_text(headers.get("Name")),
        version=_text(headers.get("Version")),
        summary=None if summary in (None, "UNKNOWN") else _text(summary)
    )


def parse_pyproject(content: str) -> ProjectMetadata:
    """Read ``[project]``, falling back to ``[tool.poetry]``."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Invalid pyproject.toml: {e}")
        return ProjectMetadata()

    tables = [data.get("project"), data.get("tool", {}).get("poetry")]
    metadata = ProjectMetadata()
    for table in tables:
        if isinstance(table, dict):
            metadata = metadata.merge(ProjectMetadata(
                name=_text(table.get("name")),
                version=_text(table.get("version")),
                summary=_text(table.get("description"))
            ))
    return metadata


def parse_setup_cfg(content: str) -> ProjectMetadata:
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read_string(content)
    except configparser.Error as e:
        logger.warning(f"Invalid setup.cfg: {e}")
        return ProjectMetadata()
    if not parser.has_section("metadata"):
        return ProjectMetadata()
    section = parser["metadata"]
    version = section.get("version")
    # "attr:" and "file:" directives need the project imported or read
    if version is not None and version.startswith(("attr:", "file:")):
        version = None
    return ProjectMetadata(
        name=_text(section.get("name")),
        version=_text(version),
        summary=_text(section.get("description"))
    )


def parse_setup_py(content: str) -> ProjectMetadata:
    """Pick literal ``name=``, ``version=`` and ``description=`` keywords."""
    found: Dict[str, str] = {}
    for match in _SETUP_FIELD.finditer(content):
        found.setdefault(match.group(1), match.group(3))
    return ProjectMetadata(
        name=_text(found.get("name")),
        version=_text(found.get("version")),
        summary=_text(found.get("description"))
    )


_PARSERS = {
    "PKG-INFO": parse_pkg_info,
    "pyproject.toml": parse_pyproject,
    "setup.cfg": parse_setup_cfg,
    "setup.py": parse_setup_py,
}


def read_project_metadata(root: Path) -> ProjectMetadata:
    """Merge metadata from every project file present under ``root``."""
    metadata = ProjectMetadata()
    for filename in PROJECT_FILES:
        path = Path(root) / filename
        if not path.is_file():
            continue
        content = read_file(path)
        if content is None:
            continue
        metadata = metadata.merge(_PARSERS[filename](content))
    logger.debug(f"Project metadata for {root}: {metadata}")
    return metadata
