"""DESCRIPTION and NAMESPACE parsing for R package source trees."""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

_FIELD = re.compile(r"^([A-Za-z0-9@/._-]+):(.*)$")
_DIRECTIVE = re.compile(r"\b(export|S3method)\s*\(")
_QUOTES = "\"'`"
R_PACKAGE_NAME = re.compile(r"[A-Za-z][A-Za-z0-9.]*")


@dataclass
class PackageDescription:
    """The DESCRIPTION fields the extractor uses."""
    package: Optional[str] = None
    version: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    @property
    def summary(self) -> Optional[str]:
        """Title if present, otherwise Description."""
        return self.title or self.description


def is_package_name(name: str) -> bool:
    """Whether ``name`` is a syntactically valid R package name."""
    return R_PACKAGE_NAME.fullmatch(name) is not None


def _normalize(value: str) -> str:
    return " ".join(value.split())


def parse_dcf(content: str) -> Dict[str, str]:
    """Parse Debian-control-format text into a field mapping.

    Continuation lines start with whitespace and are joined to the field
    above them. Fields appearing before any field name are ignored.

    Args:
        content: DESCRIPTION text

    Returns:
        Mapping of field name to whitespace-normalized value
    """
    fields: Dict[str, List[str]] = {}
    current: Optional[str] = None

    for line in content.splitlines():
        if not line.strip():
            current = None
            continue
        if line[0] in " \t":
            if current is not None:
                fields[current].append(line.strip())
            continue
        match = _FIELD.match(line)
        if match is None:
            logger.debug(f"Ignoring DESCRIPTION line: {line!r}")
            current = None
            continue
        current = match.group(1)
        fields.setdefault(current, []).append(match.group(2).strip())

    return {name: _normalize(" ".join(parts)) for name, parts in fields.items()}


def parse_description(content: str) -> PackageDescription:
    """Parse DESCRIPTION text.

    Args:
        content: DESCRIPTION text

    Returns:
        PackageDescription with empty fields as None
    """
    fields = parse_dcf(content)
    return PackageDescription(
        package=fields.get("Package") or None,
        version=fields.get("Version") or None,
        title=fields.get("Title") or None,
        description=fields.get("Description") or None
    )


def _strip_comments(content: str) -> str:
    lines = []
    for line in content.splitlines():
        position = line.find("#")
        lines.append(line if position == -1 else line[:position])
    return "\n".join(lines)


def _unquote(name: str) -> str:
    name = name.strip()
    if len(name) >= 2 and name[0] in _QUOTES and name[-1] == name[0]:
        return name[1:-1]
    return name


def parse_namespace(content: str) -> List[str]:
    """Collect exported names from NAMESPACE text.

    ``export(a, b)`` directives may span lines and quote their names.
    ``S3method(generic, class)`` registers ``generic.class``.
    ``exportPattern()`` is not evaluated.

    Args:
        content: NAMESPACE text

    Returns:
        Exported names in first-seen order
    """
    text = _strip_comments(content)
    exports: List[str] = []

    for match in _DIRECTIVE.finditer(text):
        start = match.end()
        end = text.find(")", start)
        if end == -1:
            logger.debug(f"Unterminated {match.group(1)}() in NAMESPACE")
            break
        names = [_unquote(part) for part in text[start:end].split(",")]
        names = [name for name in names if name]

        if match.group(1) == "export":
            found = names
        elif len(names) >= 2:
            found = [f"{names[0]}.{names[1]}"]
        else:
            found = []

        for name in found:
            if name not in exports:
                exports.append(name)

    return exports
