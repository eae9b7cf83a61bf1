"""Delimiter-depth scanning shared by the Rd parsers.

Braces are never treated as escaped: ``\\{`` still opens a level. This
matches how the parsers built on top of it recover from malformed input.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

OPEN_BRACE = "{"
CLOSE_BRACE = "}"


def net_depth(text: str, open_char: str = OPEN_BRACE, close_char: str = CLOSE_BRACE) -> int:
    """Return the count of ``open_char`` minus the count of ``close_char``."""
    return text.count(open_char) - text.count(close_char)


@dataclass
class DepthScanner:
    """Incremental nesting-depth counter.

    Drive it one character or one line at a time and inspect ``depth``
    to find the point where a group closes.
    """
    depth: int = 0
    open_char: str = OPEN_BRACE
    close_char: str = CLOSE_BRACE

    def feed(self, ch: str) -> int:
        """Account for a single character and return the new depth."""
        if ch == self.open_char:
            self.depth += 1
        elif ch == self.close_char:
            self.depth -= 1
        return self.depth

    def feed_line(self, line: str) -> int:
        """Account for a whole line and return the new depth."""
        self.depth += net_depth(line, self.open_char, self.close_char)
        return self.depth

    def find_close(self, text: str, start: int = 0) -> Optional[int]:
        """Feed ``text[start:]`` until depth drops to zero.

        Returns:
            Index of the character that closed the group, or None if the
            text ran out first (the scanner keeps the depth reached)
        """
        for index in range(start, len(text)):
            if self.feed(text[index]) <= 0:
                return index
        return None

    @property
    def closed(self) -> bool:
        return self.depth <= 0


def read_brace_group(text: str, start: int) -> Optional[Tuple[str, int]]:
    """Read the brace group that opens at ``text[start]``.

    Args:
        text: Text being scanned
        start: Index of the opening brace

    Returns:
        ``(content, end)`` where content excludes the outer braces and
        ``end`` is the index just past the closing brace, or None when
        ``text[start]`` is not ``{`` or the group is never closed
    """
    if start >= len(text) or text[start] != OPEN_BRACE:
        return None
    close = DepthScanner(depth=1).find_close(text, start + 1)
    if close is None:
        return None
    return text[start + 1:close], close + 1
