"""Python source and installed-package extraction."""

from .docstrings import DocstringInfo, parse_docstring
from .metadata import ProjectMetadata, is_distribution_name, read_project_metadata
from .source_extractor import PythonSourceExtractor
from .records import build_class_record, build_python_function_record, module_records
from .introspection import PythonIntrospectionExtractor

__all__ = [
    'DocstringInfo',
    'parse_docstring',
    'ProjectMetadata',
    'is_distribution_name',
    'read_project_metadata',
    'PythonSourceExtractor',
    'build_class_record',
    'build_python_function_record',
    'module_records',
    'PythonIntrospectionExtractor',
]
