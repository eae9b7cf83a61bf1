"""Parse the body of an ``\\arguments{}`` section into name/description pairs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List
import logging

from pkgctx.data_models import Argument
from pkgctx.extractors.rd.depth_scanner import DepthScanner, OPEN_BRACE
from pkgctx.extractors.rd.markup_stripper import strip_markup

logger = logging.getLogger(__name__)

ITEM_MARKER = "\\item"


class _State(Enum):
    IDLE = "idle"
    SEEN_ITEM_OPEN = "seen_item_open"
    COLLECTING_NAME = "collecting_name"
    AWAITING_DESCRIPTION = "awaiting_description"
    COLLECTING_DESCRIPTION = "collecting_description"


@dataclass
class _ItemState:
    """Scratch state for the item currently being read."""
    state: _State = _State.IDLE
    scanner: DepthScanner = field(default_factory=DepthScanner)
    name: List[str] = field(default_factory=list)
    description: List[str] = field(default_factory=list)

    def reset(self) -> None:
        self.state = _State.IDLE
        self.scanner = DepthScanner()
        self.name = []
        self.description = []


class ArgumentListParser:
    """Character-level state machine over ``\\item{name}{description}`` entries.

    Names are captured verbatim (nested braces included). Descriptions are
    rendered through the markup stripper. An item whose braces are missing
    or never close is abandoned and scanning resumes with the next item.
    A repeated name overwrites the earlier description in place.
    """

    def parse(self, text: str) -> List[Argument]:
        """Parse ``text`` and return arguments in order of first appearance."""
        return [Argument(name, description) for name, description in self.parse_mapping(text).items()]

    def parse_mapping(self, text: str) -> Dict[str, str]:
        """Parse ``text`` into an ordered ``name -> description`` mapping."""
        arguments: Dict[str, str] = {}
        item = _ItemState()
        index = 0

        while index < len(text):
            ch = text[index]

            if item.state is _State.IDLE:
                if self._at_item_marker(text, index):
                    item.state = _State.SEEN_ITEM_OPEN
                    index += len(ITEM_MARKER)
                    continue

            elif item.state is _State.SEEN_ITEM_OPEN:
                if ch == OPEN_BRACE:
                    item.scanner = DepthScanner(depth=1)
                    item.state = _State.COLLECTING_NAME
                elif not ch.isspace():
                    # a bare \item, as used inside \itemize
                    item.reset()
                    continue

            elif item.state is _State.COLLECTING_NAME:
                if item.scanner.feed(ch) == 0:
                    item.state = _State.AWAITING_DESCRIPTION
                else:
                    item.name.append(ch)

            elif item.state is _State.AWAITING_DESCRIPTION:
                if ch == OPEN_BRACE:
                    item.scanner = DepthScanner(depth=1)
                    item.state = _State.COLLECTING_DESCRIPTION
                elif not ch.isspace():
                    logger.debug(f"Item {''.join(item.name)!r} has no description; abandoned")
                    item.reset()
                    continue

            elif item.state is _State.COLLECTING_DESCRIPTION:
                if item.scanner.feed(ch) == 0:
                    self._store(item, arguments)
                    item.reset()
                else:
                    item.description.append(ch)

            index += 1

        if item.state is not _State.IDLE:
            logger.debug(f"Item {''.join(item.name)!r} unterminated at end of section; abandoned")
        return arguments

    @staticmethod
    def _at_item_marker(text: str, index: int) -> bool:
        if not text.startswith(ITEM_MARKER, index):
            return False
        end = index + len(ITEM_MARKER)
        # \itemize and similar commands share the prefix
        return end >= len(text) or not text[end].isalnum()

    @staticmethod
    def _store(item: _ItemState, arguments: Dict[str, str]) -> None:
        name = "".join(item.name).strip()
        if not name:
            logger.debug("Item with empty name abandoned")
            return
        if name in arguments:
            logger.debug(f"Duplicate argument {name!r}; later description wins")
        arguments[name] = strip_markup("".join(item.description))


def parse_arguments(text: str) -> List[Argument]:
    """Convenience wrapper around :class:`ArgumentListParser`."""
    return ArgumentListParser().parse(text)
