"""Docstring sections (Google and NumPy layouts) and doctest examples."""

import doctest
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

ARGS_SECTION = "args"
RETURNS_SECTION = "returns"
OTHER_SECTION = "other"

_SECTION_HEADERS = {
    ARGS_SECTION: {"args", "arguments", "parameters", "params", "keyword args",
                   "keyword arguments", "other parameters"},
    RETURNS_SECTION: {"returns", "return", "yields"},
}
_GENERIC_HEADER = re.compile(r"^[A-Z][A-Za-z ]{0,30}:$")
_NUMPY_RULE = re.compile(r"^-{3,}$")
_PARAM_LINE = re.compile(r"^\*{0,2}([A-Za-z_][A-Za-z0-9_]*)\s*(?:\(([^)]*)\))?\s*:\s*(.*)$")

_DOCTEST_PARSER = doctest.DocTestParser()


@dataclass
class DocstringInfo:
    """Structured view of a docstring.

    Attributes:
        summary: First paragraph, whitespace-normalized
        parameters: Parameter name (without ``*``) to description
        returns: Returns or Yields section text
        examples: Source of each doctest example, in order
    """
    summary: Optional[str] = None
    parameters: Dict[str, str] = field(default_factory=dict)
    returns: Optional[str] = None
    examples: List[str] = field(default_factory=list)


def _normalize(parts: List[str]) -> Optional[str]:
    text = " ".join(" ".join(parts).split())
    return text or None


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def match_section_header(line: str, following: str = "") -> Optional[str]:
    """Classify ``line`` as a section header.

    Google headers are unindented and end with a colon; NumPy headers are
    underlined with dashes on the next line.

    Returns:
        ``args``, ``returns``, ``other`` or None if the line is not a header
    """
    stripped = line.strip()
    if not stripped or line[:1].isspace():
        return None
    numpy = bool(_NUMPY_RULE.match(following.strip()))
    if numpy:
        name = stripped.lower()
    elif stripped.endswith(":"):
        name = stripped[:-1].strip().lower()
    else:
        return None
    for section, aliases in _SECTION_HEADERS.items():
        if name in aliases:
            return section
    if numpy or _GENERIC_HEADER.match(stripped):
        return OTHER_SECTION
    return None


def doctest_examples(docstring: str) -> List[str]:
    """Source code of the ``>>>`` examples in ``docstring``."""
    try:
        examples = _DOCTEST_PARSER.get_examples(docstring)
    except ValueError as e:
        logger.debug(f"Malformed doctest skipped: {e}")
        return []
    return [example.source.rstrip("\n") for example in examples]


def parse_docstring(docstring: Optional[str]) -> DocstringInfo:
    """Parse a cleaned docstring (as from ``inspect.cleandoc``).

    Args:
        docstring: Docstring text, or None

    Returns:
        DocstringInfo; empty when there is no docstring
    """
    if not docstring or not docstring.strip():
        return DocstringInfo()

    lines = docstring.expandtabs().splitlines()
    summary: List[str] = []
    returns: List[str] = []
    parameters: Dict[str, List[str]] = {}
    types: Dict[str, str] = {}

    section = "summary"
    numpy = False
    current: Optional[str] = None
    base_indent: Optional[int] = None

    index = 0
    while index < len(lines):
        line = lines[index]
        following = lines[index + 1] if index + 1 < len(lines) else ""
        header = match_section_header(line, following)
        if header is not None:
            section = header
            numpy = bool(_NUMPY_RULE.match(following.strip()))
            current = None
            base_indent = None
            index += 2 if numpy else 1
            continue
        index += 1

        stripped = line.strip()
        if not stripped:
            if section == "summary" and summary:
                section = OTHER_SECTION
            continue
        if stripped.startswith(">>>"):
            section = OTHER_SECTION
            current = None
            continue

        if section == "summary":
            summary.append(stripped)
        elif section == RETURNS_SECTION:
            returns.append(stripped)
        elif section == ARGS_SECTION:
            if base_indent is None:
                base_indent = _indent(line)
            match = _PARAM_LINE.match(stripped) if _indent(line) <= base_indent else None
            if match is not None:
                current = match.group(1)
                if numpy:
                    types[current] = match.group(3).strip()
                    parameters[current] = []
                else:
                    parameters[current] = [match.group(3)]
            elif current is not None:
                parameters[current].append(stripped)

    described: Dict[str, str] = {}
    for name, parts in parameters.items():
        text = _normalize(parts) or types.get(name)
        if text:
            described[name] = text

    return DocstringInfo(
        summary=_normalize(summary),
        parameters=described,
        returns=_normalize(returns),
        examples=doctest_examples(docstring)
    )
