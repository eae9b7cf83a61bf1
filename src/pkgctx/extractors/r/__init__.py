"""R source and installed-package extraction."""

from .signature_scanner import SignatureScanner, split_parameters
from .metadata import PackageDescription, parse_dcf, parse_description, parse_namespace
from .source_extractor import RSourceExtractor
from .introspection import RIntrospectionExtractor

__all__ = [
    'SignatureScanner',
    'split_parameters',
    'PackageDescription',
    'parse_dcf',
    'parse_description',
    'parse_namespace',
    'RSourceExtractor',
    'RIntrospectionExtractor',
]
