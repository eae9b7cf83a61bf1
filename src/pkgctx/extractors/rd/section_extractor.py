"""Split a raw Rd unit into its named top-level sections."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from pkgctx.data_models import Section, SectionName
from pkgctx.extractors.rd.depth_scanner import DepthScanner

logger = logging.getLogger(__name__)

RD_COMMENT = "%"


def match_section_opener(line: str) -> Optional[SectionName]:
    """Return the section whose opener starts ``line``, if any."""
    for name in SectionName:
        if line.startswith(name.opener):
            return name
    return None


@dataclass
class _SectionState:
    """Per-call accumulator for the section currently being collected."""
    name: Optional[SectionName] = None
    parts: List[str] = field(default_factory=list)
    scanner: DepthScanner = field(default_factory=DepthScanner)
    start_line: int = 0


class SectionExtractor:
    """Line-oriented extractor for ``\\title{``, ``\\description{`` and friends.

    Only openers at the start of a line (after indentation) and at brace
    depth zero are recognized. Everything else outside an open section,
    such as ``\\alias{}`` or ``\\name{}``, is ignored. Sections that never
    close are dropped and the remaining sections are still returned.
    When the same section appears twice the later one replaces the earlier.
    """

    def extract(self, text: str) -> Dict[SectionName, Section]:
        """Extract all well-formed sections from ``text``.

        Args:
            text: Raw Rd unit

        Returns:
            Mapping of section name to Section, in order of appearance
        """
        sections: Dict[SectionName, Section] = {}
        state = _SectionState()

        for line_no, line in enumerate(text.splitlines(), start=1):
            if line.lstrip().startswith(RD_COMMENT):
                continue

            if state.name is not None:
                if match_section_opener(line.lstrip()) is not None:
                    logger.debug(
                        f"Section {state.name.value} opened at line {state.start_line} "
                        f"never closed; dropped at line {line_no}"
                    )
                    state = _SectionState()
                else:
                    remainder = self._collect(line, state, sections)
                    if remainder is None:
                        continue
                    line = remainder

            self._scan_top_level(line, line_no, state, sections)

        if state.name is not None:
            logger.debug(
                f"Section {state.name.value} opened at line {state.start_line} "
                f"unterminated at end of input; dropped"
            )
        return sections

    def _scan_top_level(self, segment: str, line_no: int, state: _SectionState,
                        sections: Dict[SectionName, Section]) -> None:
        """Open sections found at depth zero, possibly several on one line."""
        while True:
            segment = segment.lstrip()
            name = match_section_opener(segment)
            if name is None:
                return
            state.name = name
            state.parts = []
            state.scanner = DepthScanner(depth=1)
            state.start_line = line_no
            remainder = self._collect(segment[len(name.opener):], state, sections)
            if remainder is None:
                return
            segment = remainder

    def _collect(self, segment: str, state: _SectionState,
                 sections: Dict[SectionName, Section]) -> Optional[str]:
        """Append ``segment`` to the open section.

        Returns:
            Text following the closing brace if the section closed on this
            segment, otherwise None
        """
        close = state.scanner.find_close(segment)
        if close is None:
            state.parts.append(segment)
            return None

        state.parts.append(segment[:close])
        self._finalize(state, sections)
        return segment[close + 1:]

    def _finalize(self, state: _SectionState, sections: Dict[SectionName, Section]) -> None:
        name = state.name
        if name in sections:
            logger.debug(f"Duplicate {name.value} section at line {state.start_line} replaces the earlier one")
        sections[name] = Section(name=name, content="\n".join(state.parts))
        state.name = None
        state.parts = []


def extract_sections(text: str) -> Dict[SectionName, Section]:
    """Convenience wrapper around :class:`SectionExtractor`."""
    return SectionExtractor().extract(text)
