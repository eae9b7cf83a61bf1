"""Rd documentation unit extraction."""

import re
from pathlib import Path
from typing import List, Optional
import logging

from pkgctx.config.constants import DEFAULTS
from pkgctx.data_models import RdDoc, SectionName
from pkgctx.extractors.base_extractor import BaseExtractor
from pkgctx.extractors.rd.argument_parser import ArgumentListParser
from pkgctx.extractors.rd.example_segmenter import ExampleSegmenter
from pkgctx.extractors.rd.markup_stripper import MarkupStripper
from pkgctx.extractors.rd.section_extractor import SectionExtractor

logger = logging.getLogger(__name__)

_ALIAS_LINE = re.compile(r"^\s*\\(alias|name)\{([^{}]*)\}")


class RdExtractor(BaseExtractor[RdDoc]):
    """Extracts an :class:`RdDoc` from one ``.Rd`` documentation unit.

    Runs the section extractor first, then the argument parser, markup
    stripper and example segmenter over the relevant sections.
    """

    def __init__(self, max_examples: int = DEFAULTS.MAX_EXAMPLES):
        """Initialize the Rd extractor.

        Args:
            max_examples: Cap on example blocks kept per unit
        """
        super().__init__(language="rd", supported_extensions=['.rd'])
        self.sections = SectionExtractor()
        self.arguments = ArgumentListParser()
        self.stripper = MarkupStripper()
        self.examples = ExampleSegmenter(max_examples)

    def parse_content(self, content: str, source_file: str) -> RdDoc:
        """Parse one Rd unit.

        Args:
            content: Raw Rd text
            source_file: Path of the unit; its stem is the fallback name

        Returns:
            RdDoc with every field that could be recovered
        """
        sections = self.sections.extract(content)
        aliases = self._aliases(content)
        doc = RdDoc(name=Path(source_file).stem if source_file else "", aliases=aliases)

        doc.title = self._text(sections, SectionName.TITLE)
        doc.description = self._text(sections, SectionName.DESCRIPTION)
        doc.value = self._text(sections, SectionName.VALUE)
        doc.details = self._text(sections, SectionName.DETAILS)

        usage = sections.get(SectionName.USAGE)
        if usage is not None:
            doc.usage = usage.content.strip("\n") or None

        arguments = sections.get(SectionName.ARGUMENTS)
        if arguments is not None:
            doc.arguments = self.arguments.parse_mapping(arguments.content)

        examples = sections.get(SectionName.EXAMPLES)
        if examples is not None:
            doc.examples = self.examples.segment(examples.content)

        logger.debug(
            f"{source_file}: sections={[name.value for name in sections]} "
            f"arguments={len(doc.arguments)} examples={len(doc.examples)}"
        )
        return doc

    def _text(self, sections, name: SectionName) -> Optional[str]:
        section = sections.get(name)
        if section is None:
            return None
        return self.stripper.strip(section.content) or None

    @staticmethod
    def _aliases(content: str) -> List[str]:
        """Collect top-level ``\\name{}`` and ``\\alias{}`` values."""
        aliases: List[str] = []
        for line in content.splitlines():
            match = _ALIAS_LINE.match(line)
            if match is None:
                continue
            alias = match.group(2).replace("\\%", "%").strip()
            if alias and alias not in aliases:
                aliases.append(alias)
        return aliases
