"""Extractors for R and Python package documentation and source.

Each file extractor inherits from BaseExtractor and implements
``parse_content`` for one kind of file.
"""

from .base_extractor import BaseExtractor
from .rd.rd_extractor import RdExtractor
from .r.source_extractor import RSourceExtractor
from .r.introspection import RIntrospectionExtractor
from .python.source_extractor import PythonSourceExtractor
from .python.introspection import PythonIntrospectionExtractor

__all__ = [
    'BaseExtractor',
    'RdExtractor',
    'RSourceExtractor',
    'RIntrospectionExtractor',
    'PythonSourceExtractor',
    'PythonIntrospectionExtractor',
]
