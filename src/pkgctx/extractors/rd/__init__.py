"""Tolerant parsing of Rd documentation markup."""

from .depth_scanner import DepthScanner, net_depth, read_brace_group
from .section_extractor import SectionExtractor, extract_sections
from .argument_parser import ArgumentListParser, parse_arguments
from .markup_stripper import MarkupStripper, strip_markup
from .example_segmenter import ExampleSegmenter, segment_examples
from .rd_extractor import RdExtractor

__all__ = [
    'DepthScanner',
    'net_depth',
    'read_brace_group',
    'SectionExtractor',
    'extract_sections',
    'ArgumentListParser',
    'parse_arguments',
    'MarkupStripper',
    'strip_markup',
    'ExampleSegmenter',
    'segment_examples',
    'RdExtractor',
]
