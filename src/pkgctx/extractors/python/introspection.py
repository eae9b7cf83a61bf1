"""Installed-package extraction by importing the package and reading ``inspect`` signatures.

Only members whose ``__module__`` lies inside the package are reported,
so names re-exported from other libraries do not show up.
"""

import importlib
import importlib.metadata
import inspect
import re
from typing import Any, List, Optional
import logging

from pkgctx.data_models import (
    ExtractOptions,
    PackageRecord,
    PythonClass,
    PythonFunction,
    PythonModule,
    PythonParameter,
    Record,
)
from pkgctx.extractors.python.docstrings import parse_docstring
from pkgctx.extractors.python.records import LANGUAGE, module_records
from pkgctx.utils.error_handler import IntrospectionError

logger = logging.getLogger(__name__)

MODULE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*")

_VARIADIC_PREFIX = {
    inspect.Parameter.VAR_POSITIONAL: "*",
    inspect.Parameter.VAR_KEYWORD: "**",
}


def is_module_name(name: str) -> bool:
    """Whether ``name`` is an importable dotted module path."""
    return MODULE_NAME.fullmatch(name) is not None


def _annotation(value: Any) -> Optional[str]:
    if value is inspect.Parameter.empty:
        return None
    return inspect.formatannotation(value)


def _default(value: Any) -> Optional[str]:
    if value is inspect.Parameter.empty:
        return None
    try:
        return repr(value)
    except Exception:
        return "..."


def parameters_from_signature(signature: inspect.Signature) -> List[PythonParameter]:
    """Convert a signature to parameters, adding ``/`` and ``*`` markers."""
    parameters: List[PythonParameter] = []
    values = list(signature.parameters.values())
    has_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in values)
    for index, parameter in enumerate(values):
        if parameter.kind is inspect.Parameter.KEYWORD_ONLY and not has_varargs:
            if index == 0 or values[index - 1].kind is not inspect.Parameter.KEYWORD_ONLY:
                parameters.append(PythonParameter("*"))
        parameters.append(PythonParameter(
            _VARIADIC_PREFIX.get(parameter.kind, "") + parameter.name,
            _annotation(parameter.annotation),
            _default(parameter.default)
        ))
        if parameter.kind is inspect.Parameter.POSITIONAL_ONLY and (
                index + 1 == len(values) or values[index + 1].kind is not inspect.Parameter.POSITIONAL_ONLY):
            parameters.append(PythonParameter("/"))
    return parameters


def _doc(obj: Any) -> Optional[str]:
    # inspect.getdoc would inherit object.__init__ and similar base docstrings
    doc = getattr(obj, "__doc__", None)
    return inspect.cleandoc(doc) if isinstance(doc, str) else None


def function_from_object(name: str, obj: Any) -> PythonFunction:
    """Describe a callable; builtins without a signature render as ``name(...)``."""
    try:
        signature = inspect.signature(obj)
    except (TypeError, ValueError):
        return PythonFunction(name=name, parameters=[PythonParameter("...")], docstring=_doc(obj))
    return PythonFunction(
        name=name,
        parameters=parameters_from_signature(signature),
        docstring=_doc(obj),
        return_annotation=_annotation(signature.return_annotation)
    )


def _defined_in(obj: Any, package: str) -> bool:
    module = getattr(obj, "__module__", None) or ""
    return module == package or module.startswith(package + ".")


def class_from_object(name: str, cls: type, include_internal: bool = False) -> PythonClass:
    methods = [
        function_from_object(method_name, method)
        for method_name, method in inspect.getmembers(cls, inspect.isfunction)
        if method_name == "__init__" or include_internal or not method_name.startswith("_")
    ]
    return PythonClass(name=name, docstring=_doc(cls), methods=methods)


def module_from_object(module: Any, package: str, include_internal: bool = False) -> PythonModule:
    """Collect the public functions and classes a module defines."""
    contents = PythonModule(name=module.__name__, docstring=_doc(module))
    for name, obj in inspect.getmembers(module):
        if name.startswith("_") and not include_internal:
            continue
        if not _defined_in(obj, package):
            continue
        if inspect.isfunction(obj) or inspect.isbuiltin(obj):
            contents.functions.append(function_from_object(name, obj))
        elif inspect.isclass(obj):
            contents.classes.append(class_from_object(name, obj, include_internal))
    return contents


def installed_version(module: Any, package: str) -> str:
    version = getattr(module, "__version__", None)
    if isinstance(version, str) and version:
        return version
    try:
        return importlib.metadata.version(package.split(".")[0])
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


class PythonIntrospectionExtractor:
    """Extracts records for a package importable from the running interpreter."""

    def extract(self, package: str, options: Optional[ExtractOptions] = None) -> List[Record]:
        """Import and introspect a package.

        Args:
            package: Importable module name, e.g. ``json`` or ``email.parser``
            options: Extraction options

        Returns:
            Package record followed by function (and class) records

        Raises:
            IntrospectionError: If the name is invalid or the import fails
        """
        options = options or ExtractOptions()
        if not is_module_name(package):
            raise IntrospectionError(
                f"Invalid installed package name: '{package}'",
                suggestions=["--installed takes an importable module name such as 'json'"],
                error_code="bad_spec"
            )

        logger.debug(f"Importing {package} for introspection")
        try:
            module = importlib.import_module(package)
        except ImportError as e:
            raise IntrospectionError(
                f"Package '{package}' is not installed: {e}",
                suggestions=[f"pip install {package}", "Drop --installed to extract from package sources"],
                error_code="not_found"
            ) from e
        except Exception as e:
            raise IntrospectionError(
                f"Importing '{package}' failed: {e}",
                error_code="introspection_failed"
            ) from e

        contents = module_from_object(module, package, options.include_internal)
        records: List[Record] = [PackageRecord(
            name=package,
            version=installed_version(module, package),
            language=LANGUAGE,
            description=parse_docstring(contents.docstring).summary
        )]
        records.extend(module_records([contents], options))
        logger.info(f"Introspected {package}: {len(contents.functions)} functions, "
                    f"{len(contents.classes)} classes")
        return records
