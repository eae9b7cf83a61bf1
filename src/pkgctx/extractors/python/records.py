"""Record building for Python functions and classes."""

from typing import Dict, Iterable, List
import logging

from pkgctx.data_models import (
    ClassRecord,
    Example,
    ExtractOptions,
    FunctionRecord,
    PythonClass,
    PythonFunction,
    PythonModule,
    Record,
)
from pkgctx.extractors.python.docstrings import parse_docstring

logger = logging.getLogger(__name__)

LANGUAGE = "Python"


def describe_parameters(function: PythonFunction, documented: Dict[str, str]) -> Dict[str, str]:
    """Pair each parameter with a description.

    The docstring entry wins, then the annotation, then ``default: <expr>``.
    Parameters with none of these are left out, as are the ``*`` and
    ``/`` markers.
    """
    arguments: Dict[str, str] = {}
    for parameter in function.parameters:
        if parameter.is_marker:
            continue
        description = documented.get(parameter.name.lstrip("*")) or parameter.annotation
        if description is None and parameter.default is not None:
            description = f"default: {parameter.default}"
        if description:
            arguments[parameter.name] = description
    return arguments


def build_python_function_record(function: PythonFunction, max_examples: int) -> FunctionRecord:
    doc = parse_docstring(function.docstring)
    return FunctionRecord(
        name=function.name,
        exported=not function.name.startswith("_"),
        signature=function.signature,
        purpose=doc.summary,
        arguments=describe_parameters(function, doc.parameters),
        returns=doc.returns,
        return_type=function.return_annotation,
        examples=[Example(code=code) for code in doc.examples[:max_examples]]
    )


def build_class_record(cls: PythonClass) -> ClassRecord:
    """Describe each method by its docstring summary, or its signature when undocumented."""
    methods = {
        method.name: parse_docstring(method.docstring).summary or method.signature
        for method in cls.methods
    }
    return ClassRecord(name=cls.name, purpose=parse_docstring(cls.docstring).summary, methods=methods)


def module_records(modules: Iterable[PythonModule], options: ExtractOptions) -> List[Record]:
    """Function records for every module, then class records when enabled."""
    modules = list(modules)
    records: List[Record] = [
        build_python_function_record(function, options.max_examples)
        for module in modules
        for function in module.functions
    ]
    if options.emit_classes:
        records.extend(build_class_record(cls) for module in modules for cls in module.classes)
    logger.debug(f"Built {len(records)} records from {len(modules)} modules")
    return records
