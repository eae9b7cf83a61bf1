"""Recursive rewriter from inline Rd markup to plain text.

The command set is fixed. Anything not listed in ``COMMANDS`` gets the
same fallback: when a brace group follows immediately its content is
rendered in place, otherwise the bare command name is emitted.
"""

import re
from typing import Dict, Iterable, List
import logging

from pkgctx.data_models import CommandKind, MarkupCommand
from pkgctx.extractors.rd.depth_scanner import CLOSE_BRACE, OPEN_BRACE, read_brace_group

logger = logging.getLogger(__name__)

COMMAND_MARKER = "\\"
_COMMAND_NAME = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_PLAIN_RUN = re.compile(r"[^\\{}]+")


def _table(kind: CommandKind, names: Iterable[str], replacement: str = "") -> Dict[str, MarkupCommand]:
    return {name: MarkupCommand(name, kind, replacement) for name in names}


COMMANDS: Dict[str, MarkupCommand] = {
    **_table(CommandKind.KEEP_CONTENT, [
        "code", "link", "pkg", "emph", "strong", "bold", "sQuote", "dQuote",
        "file", "option", "var", "env", "command", "dfn", "cite", "acronym",
        "samp", "kbd", "email", "preformatted",
    ]),
    **_table(CommandKind.EXTRACT_SECOND_OF_TWO, ["href", "url", "eqn", "deqn"]),
    **_table(CommandKind.EXTRACT_FIRST_ARG, ["linkS4class", "linkS3class", "enc"]),
    **_table(CommandKind.EXTRACT_NAMED_THEN_DESCRIPTION, ["item"]),
    **_table(CommandKind.DROP_ENTIRELY, [
        "section", "subsection", "seealso", "author", "references", "source",
        "format", "note", "keyword", "concept", "alias", "name", "docType",
        "title", "encoding", "Rdversion",
    ]),
    **_table(CommandKind.RECURSE_CONTENT, ["describe", "itemize", "enumerate"]),
    **_table(CommandKind.SKIP_WRAPPER, ["dontrun", "donttest", "dontshow", "donteval"]),
    **_table(CommandKind.VERBATIM, ["verb"]),
    **_table(CommandKind.LITERAL_SUBSTITUTE, ["dots", "ldots"], "..."),
    **_table(CommandKind.LITERAL_SUBSTITUTE, ["R"], "R"),
    **_table(CommandKind.LITERAL_SUBSTITUTE, ["cr", "tab"], " "),
}


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to one space and trim the ends."""
    return " ".join(text.split())


class MarkupStripper:
    """Turns Rd inline markup into plain text.

    Stray braces outside any recognized command are dropped. A command
    whose brace group never closes is dropped on its own and the text
    after it is still rendered.
    """

    def strip(self, text: str) -> str:
        """Render ``text`` to plain text with whitespace normalized."""
        return normalize_whitespace(self.render(text))

    def render(self, text: str) -> str:
        """Render ``text`` to plain text, leaving whitespace untouched."""
        out: List[str] = []
        index = 0
        while index < len(text):
            ch = text[index]
            if ch == COMMAND_MARKER:
                index = self._command(text, index, out)
            elif ch in (OPEN_BRACE, CLOSE_BRACE):
                index += 1
            else:
                run = _PLAIN_RUN.match(text, index)
                out.append(run.group())
                index = run.end()
        return "".join(out)

    def _command(self, text: str, index: int, out: List[str]) -> int:
        """Handle the command starting at ``text[index]`` (the backslash).

        Returns:
            Index where rendering should resume
        """
        match = _COMMAND_NAME.match(text, index + 1)
        if match is None:
            return self._escape(text, index + 1, out)

        name = match.group()
        after_name = match.end()
        command = COMMANDS.get(name)

        if command is None:
            if after_name < len(text) and text[after_name] == OPEN_BRACE:
                group = read_brace_group(text, after_name)
                if group is None:
                    logger.debug(f"Unterminated \\{name} dropped")
                    return after_name
                out.append(self.render(group[0]))
                return group[1]
            out.append(name)
            return after_name

        if command.kind is CommandKind.LITERAL_SUBSTITUTE:
            out.append(command.replacement)
            return after_name
        if command.kind is CommandKind.VERBATIM:
            return self._verbatim(text, after_name, out)

        group_start = self._skip_option(text, after_name)
        first = read_brace_group(text, group_start)

        if command.kind is CommandKind.EXTRACT_NAMED_THEN_DESCRIPTION:
            out.append(" ")
            if first is None:
                return after_name
            second = read_brace_group(text, self._skip_space(text, first[1]))
            if second is None:
                return first[1]
            out.append(self.render(second[0]))
            out.append(" ")
            return second[1]

        if first is None:
            if group_start < len(text) and text[group_start] == OPEN_BRACE:
                logger.debug(f"Unterminated \\{name} dropped")
            return after_name
        content, end = first

        if command.kind is CommandKind.DROP_ENTIRELY:
            return end
        if command.kind is CommandKind.EXTRACT_SECOND_OF_TWO:
            second = read_brace_group(text, self._skip_space(text, end))
            if second is None:
                out.append(content)
                return end
            out.append(self.render(second[0]))
            return second[1]
        if command.kind is CommandKind.EXTRACT_FIRST_ARG:
            out.append(self.render(content))
            second = read_brace_group(text, end)
            return end if second is None else second[1]

        # KEEP_CONTENT, RECURSE_CONTENT and SKIP_WRAPPER all render in place
        out.append(self.render(content))
        return end

    @staticmethod
    def _escape(text: str, index: int, out: List[str]) -> int:
        """Handle a backslash not followed by a command name."""
        if index >= len(text):
            return index
        ch = text[index]
        if ch in (OPEN_BRACE, CLOSE_BRACE):
            return index
        out.append(ch)
        return index + 1

    @staticmethod
    def _verbatim(text: str, index: int, out: List[str]) -> int:
        """``\\verb{...}`` or ``\\verb|...|``: emit the content untouched."""
        group = read_brace_group(text, index)
        if group is not None:
            out.append(group[0])
            return group[1]
        if index < len(text) and text[index] == "|":
            close = text.find("|", index + 1)
            if close != -1:
                out.append(text[index + 1:close])
                return close + 1
        return index

    @staticmethod
    def _skip_option(text: str, index: int) -> int:
        """Skip an optional ``[...]`` argument if a brace group follows it."""
        if index >= len(text) or text[index] != "[":
            return index
        close = text.find("]", index + 1)
        if close != -1 and close + 1 < len(text) and text[close + 1] == OPEN_BRACE:
            return close + 1
        return index

    @staticmethod
    def _skip_space(text: str, index: int) -> int:
        while index < len(text) and text[index].isspace():
            index += 1
        return index


_STRIPPER = MarkupStripper()


def strip_markup(text: str) -> str:
    """Strip inline markup from ``text`` and normalize whitespace."""
    return _STRIPPER.strip(text)
