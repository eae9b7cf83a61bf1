"""Split an ``\\examples{}`` body into short runnable snippets."""

import re
import textwrap
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from pkgctx.config.constants import DEFAULTS
from pkgctx.data_models import ExampleBlock
from pkgctx.extractors.rd.depth_scanner import DepthScanner

logger = logging.getLogger(__name__)

WRAPPER_COMMANDS = ("dontrun", "donttest", "dontshow", "donteval")
_WRAPPER_OPEN = re.compile(r"\\(?:%s)\{" % "|".join(WRAPPER_COMMANDS))
_RD_ESCAPE = re.compile(r"\\([\\%])")

QUOTES = ('"', "'", "`")
COMMENT = "#"
CONTINUATION_SUFFIXES = (",", "(", "[", "{", "+", "-", "*", "/", "^", "|", "&", "=", "~", "%", "<", ">")
STRAY_BRACES = ("{", "}")


def remove_wrappers(text: str) -> str:
    """Drop ``\\dontrun{}``-style wrappers but keep their content verbatim.

    A wrapper that never closes loses only its opening marker.
    """
    out: List[str] = []
    index = 0
    while True:
        match = _WRAPPER_OPEN.search(text, index)
        if match is None:
            out.append(text[index:])
            return "".join(out)
        out.append(text[index:match.start()])
        close = DepthScanner(depth=1).find_close(text, match.end())
        if close is None:
            logger.debug(f"Unterminated {match.group()} wrapper at offset {match.start()}")
            index = match.end()
            continue
        out.append(remove_wrappers(text[match.end():close]))
        index = close + 1


@dataclass
class _BlockState:
    """Lines and nesting state of the block being built."""
    lines: List[str] = field(default_factory=list)
    parens: DepthScanner = field(default_factory=lambda: DepthScanner(open_char="(", close_char=")"))
    braces: DepthScanner = field(default_factory=DepthScanner)
    quote: Optional[str] = None

    @property
    def closed(self) -> bool:
        return self.parens.closed and self.braces.closed and self.quote is None


class ExampleSegmenter:
    """Line-oriented segmenter that never splits inside a call or string.

    A blank line ends the current block only while every delimiter is
    closed. A non-blank line ends it when, after the line, delimiters are
    closed, the line does not end in a continuation character, and it
    either ends with ``)`` or contains no parenthesis at all.
    """

    def __init__(self, max_blocks: int = DEFAULTS.MAX_EXAMPLES):
        self.max_blocks = max_blocks

    def segment(self, text: str) -> List[ExampleBlock]:
        """Segment the raw examples section ``text``.

        Args:
            text: Body of the examples section, wrappers included

        Returns:
            At most ``max_blocks`` valid blocks in source order
        """
        blocks: List[ExampleBlock] = []
        state = _BlockState()

        for raw_line in remove_wrappers(text).splitlines():
            if len(blocks) >= self.max_blocks:
                break
            line = _RD_ESCAPE.sub(r"\1", raw_line.rstrip())

            if not line.strip():
                if state.closed and state.lines:
                    state = self._close(state, blocks)
                continue
            if not state.lines and line.lstrip().startswith(COMMENT):
                continue

            state.lines.append(line)
            code, has_paren = self._scan(line, state)
            if state.closed and self._completes_statement(code, has_paren):
                state = self._close(state, blocks)

        if state.lines and len(blocks) < self.max_blocks:
            if state.closed:
                self._close(state, blocks)
            else:
                logger.debug(f"Unbalanced trailing example block of {len(state.lines)} lines discarded")

        return blocks[:self.max_blocks]

    @staticmethod
    def _scan(line: str, state: _BlockState) -> Tuple[str, bool]:
        """Update nesting state from ``line``.

        Returns:
            The line without any trailing comment, and whether the code
            part contains a parenthesis
        """
        has_paren = False
        escaped = False
        for index, ch in enumerate(line):
            if state.quote is not None:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == state.quote:
                    state.quote = None
                continue
            if ch in QUOTES:
                state.quote = ch
            elif ch == COMMENT:
                return line[:index].rstrip(), has_paren
            else:
                if ch in "()":
                    has_paren = True
                state.parens.feed(ch)
                state.braces.feed(ch)
        return line, has_paren

    @staticmethod
    def _completes_statement(code: str, has_paren: bool) -> bool:
        if code.endswith(CONTINUATION_SUFFIXES):
            return False
        return code.endswith(")") or not has_paren

    @staticmethod
    def _close(state: _BlockState, blocks: List[ExampleBlock]) -> _BlockState:
        """Validate the finished block, keep it if valid, and start a new one."""
        code = textwrap.dedent("\n".join(state.lines)).strip("\n")
        stripped = code.strip()

        if not stripped or stripped in STRAY_BRACES or stripped.startswith("\\"):
            logger.debug(f"Example block discarded: {stripped[:40]!r}")
        elif state.parens.depth != 0 or state.braces.depth != 0:
            logger.debug(f"Unbalanced example block discarded: {stripped[:40]!r}")
        else:
            blocks.append(ExampleBlock(lines=tuple(code.splitlines())))
        return _BlockState()


def segment_examples(text: str, max_blocks: int = DEFAULTS.MAX_EXAMPLES) -> List[ExampleBlock]:
    """Convenience wrapper around :class:`ExampleSegmenter`."""
    return ExampleSegmenter(max_blocks).segment(text)
