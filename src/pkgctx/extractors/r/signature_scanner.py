"""Best-effort location of ``name <- function(...)`` definitions in R source."""

from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple
import logging

from pkgctx.data_models import SignatureRecord
from pkgctx.extractors.rd.depth_scanner import DepthScanner

logger = logging.getLogger(__name__)

ASSIGNMENT_PATTERNS = ("<- function(", "= function(", "<-function(", "=function(")
INTERNAL_PREFIX = "."
COMMENT = "#"
BACKTICK = "`"
_OPENERS = "([{"
_CLOSERS = ")]}"
_QUOTES = ('"', "'", BACKTICK)


def _unquote_name(name: str) -> str:
    name = name.strip()
    if len(name) >= 2 and name.startswith(BACKTICK) and name.endswith(BACKTICK):
        return name[1:-1]
    return name


def _join_pieces(pieces: Sequence[str]) -> str:
    """Join per-line parameter fragments with single spaces."""
    text = ""
    for piece in pieces:
        piece = piece.strip()
        if not piece:
            continue
        if text and not text.endswith("("):
            text += " "
        text += piece
    return text


class SignatureScanner:
    """Line scanner for assignment-style function definitions.

    Parentheses are counted without regard to strings or comments, so a
    string literal holding an unbalanced parenthesis throws the count off
    and the definition is skipped. Every definition is kept, including
    repeats of the same name.
    """

    def __init__(self, exports: Optional[Iterable[str]] = None, include_internal: bool = False):
        """Initialize the scanner.

        Args:
            exports: Exported names; empty or None means everything is exported
            include_internal: Keep dot-prefixed and non-exported definitions
        """
        self.exports: FrozenSet[str] = frozenset(exports or ())
        self.include_internal = include_internal

    def is_exported(self, name: str) -> bool:
        return not self.exports or name in self.exports

    def scan(self, text: str, source_file: str = "") -> List[SignatureRecord]:
        """Find function definitions in ``text``.

        Args:
            text: R source text
            source_file: Path recorded on each SignatureRecord

        Returns:
            SignatureRecords in source order
        """
        lines = text.splitlines()
        records: List[SignatureRecord] = []

        for index, line in enumerate(lines):
            stripped = line.strip()
            if stripped.startswith(COMMENT):
                continue

            for pattern in ASSIGNMENT_PATTERNS:
                position = stripped.find(pattern)
                if position == -1:
                    continue

                name = _unquote_name(stripped[:position])
                if not name or any(ch.isspace() for ch in name):
                    continue

                exported = self.is_exported(name)
                if not self.include_internal and (name.startswith(INTERNAL_PREFIX) or not exported):
                    logger.debug(f"{source_file}:{index + 1}: internal function {name} skipped")
                    break

                parameters = self._collect_parameters(lines, index, stripped[position + len(pattern):])
                if parameters is None:
                    logger.debug(f"{source_file}:{index + 1}: parameter list of {name} never closes")
                    break

                records.append(SignatureRecord(
                    name=name,
                    exported=exported,
                    raw_parameter_text=parameters,
                    source_file=source_file,
                    line=index + 1
                ))
                break

        return records

    @staticmethod
    def _collect_parameters(lines: Sequence[str], index: int, rest: str) -> Optional[str]:
        """Accumulate lines until the parameter list's parenthesis closes.

        Returns:
            Parameter text without the enclosing parentheses, or None if
            the input ends first
        """
        scanner = DepthScanner(depth=1, open_char="(", close_char=")")
        pieces: List[str] = []
        segment = rest
        while True:
            close = scanner.find_close(segment)
            if close is not None:
                pieces.append(segment[:close])
                return _join_pieces(pieces)
            pieces.append(segment)
            index += 1
            if index >= len(lines):
                return None
            segment = lines[index].strip()


def split_parameters(raw_parameter_text: str) -> List[Tuple[str, Optional[str]]]:
    """Split a parameter list into ``(name, default)`` pairs.

    Commas and ``=`` only count at nesting depth zero and outside quotes.

    Args:
        raw_parameter_text: Text such as ``x, y = c(1, 2), ...``

    Returns:
        List of ``(name, default)``; default is None when absent
    """
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    quote: Optional[str] = None
    escaped = False

    for ch in raw_parameter_text:
        if quote is not None:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))

    parameters: List[Tuple[str, Optional[str]]] = []
    for part in parts:
        part = part.strip()
        if not part:
            continue
        split_at = _default_position(part)
        if split_at is None:
            parameters.append((_unquote_name(part), None))
        else:
            parameters.append((_unquote_name(part[:split_at]), part[split_at + 1:].strip()))
    return parameters


def _default_position(parameter: str) -> Optional[int]:
    """Index of the ``=`` separating a parameter name from its default."""
    index = 0
    if parameter.startswith(BACKTICK):
        close = parameter.find(BACKTICK, 1)
        if close == -1:
            return None
        index = close + 1

    while index < len(parameter):
        ch = parameter[index]
        if ch in _OPENERS or ch in _QUOTES:
            return None
        following = parameter[index + 1:index + 2]
        preceding = parameter[index - 1:index] if index else ""
        if ch == "=" and following != "=" and preceding not in ("<", ">", "!", "="):
            return index
        index += 1
    return None
