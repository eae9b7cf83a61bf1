"""Python source file extraction using the AST parser."""

import ast
from pathlib import Path
from typing import List, Optional, Union
import logging

from pkgctx.data_models import PythonClass, PythonFunction, PythonModule, PythonParameter
from pkgctx.extractors.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


def is_public_name(name: str) -> bool:
    return not name.startswith("_")


def _source(node: Optional[ast.AST]) -> Optional[str]:
    if node is None:
        return None
    return " ".join(ast.unparse(node).split())


def parameters_from_arguments(arguments: ast.arguments) -> List[PythonParameter]:
    """Convert an ``ast.arguments`` node to parameters in declaration order.

    Positional-only parameters are followed by a ``/`` marker, and
    keyword-only parameters without a ``*args`` are preceded by ``*``.
    """
    parameters: List[PythonParameter] = []
    positional = arguments.posonlyargs + arguments.args
    defaults: List[Optional[ast.expr]] = [None] * (len(positional) - len(arguments.defaults))
    defaults.extend(arguments.defaults)

    for index, (arg, default) in enumerate(zip(positional, defaults)):
        parameters.append(PythonParameter(arg.arg, _source(arg.annotation), _source(default)))
        if index == len(arguments.posonlyargs) - 1:
            parameters.append(PythonParameter("/"))

    if arguments.vararg is not None:
        parameters.append(PythonParameter("*" + arguments.vararg.arg, _source(arguments.vararg.annotation)))
    elif arguments.kwonlyargs:
        parameters.append(PythonParameter("*"))

    for arg, default in zip(arguments.kwonlyargs, arguments.kw_defaults):
        parameters.append(PythonParameter(arg.arg, _source(arg.annotation), _source(default)))

    if arguments.kwarg is not None:
        parameters.append(PythonParameter("**" + arguments.kwarg.arg, _source(arguments.kwarg.annotation)))
    return parameters


def function_from_node(node: FunctionNode, source_file: str = "") -> PythonFunction:
    return PythonFunction(
        name=node.name,
        parameters=parameters_from_arguments(node.args),
        docstring=ast.get_docstring(node),
        return_annotation=_source(node.returns),
        source_file=source_file,
        line=node.lineno
    )


class PythonSourceExtractor(BaseExtractor[Optional[PythonModule]]):
    """Extracts the top-level functions and classes of one ``.py`` file.

    Only definitions directly in the module body count; functions defined
    under ``if`` or ``try`` blocks are not part of the public surface.
    Names starting with ``_`` are dropped unless ``include_internal`` is
    set, but ``__init__`` is always kept as a method.
    """

    def __init__(self, include_internal: bool = False):
        """Initialize the Python source extractor.

        Args:
            include_internal: Keep underscore-prefixed functions, classes and methods
        """
        super().__init__(language="python", supported_extensions=['.py'])
        self.include_internal = include_internal

    def _keep(self, name: str) -> bool:
        return self.include_internal or is_public_name(name)

    def parse_content(self, content: str, source_file: str) -> Optional[PythonModule]:
        try:
            tree = ast.parse(content, filename=source_file)
        except (SyntaxError, ValueError) as e:
            logger.warning(f"Python syntax error in {source_file}: {e}")
            return None

        module = PythonModule(name=Path(source_file).stem, docstring=ast.get_docstring(tree))
        for node in tree.body:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and self._keep(node.name):
                module.functions.append(function_from_node(node, source_file))
            elif isinstance(node, ast.ClassDef) and self._keep(node.name):
                module.classes.append(self._class_from_node(node, source_file))

        logger.debug(f"{source_file}: {len(module.functions)} functions, {len(module.classes)} classes")
        return module

    def _class_from_node(self, node: ast.ClassDef, source_file: str) -> PythonClass:
        methods = [
            function_from_node(child, source_file)
            for child in node.body
            if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef))
            and (child.name == "__init__" or self._keep(child.name))
        ]
        return PythonClass(
            name=node.name,
            docstring=ast.get_docstring(node),
            methods=methods,
            source_file=source_file,
            line=node.lineno
        )
