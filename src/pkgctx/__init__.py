"""pkgctx: compile R and Python packages into compact, machine-readable API context.

The Rd parsers in :mod:`pkgctx.extractors.rd` never raise on malformed
markup; they recover what they can and drop the rest.
"""

__version__ = "0.3.0"

from .data_models import (
    Argument,
    ClassRecord,
    Example,
    ExampleBlock,
    ExtractOptions,
    FunctionRecord,
    PackageRecord,
    RdDoc,
    Section,
    SectionName,
    SignatureRecord,
)
from .package_extractor import PythonSourcePackageExtractor, RSourcePackageExtractor, extract_package

__all__ = [
    '__version__',
    'Argument',
    'ClassRecord',
    'Example',
    'ExampleBlock',
    'ExtractOptions',
    'FunctionRecord',
    'PackageRecord',
    'RdDoc',
    'Section',
    'SectionName',
    'SignatureRecord',
    'RSourcePackageExtractor',
    'PythonSourcePackageExtractor',
    'extract_package',
]
