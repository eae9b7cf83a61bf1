"""Data models for pkgctx."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pkgctx.config.constants import DEFAULTS

SCHEMA_VERSION = "1.1"


class SectionName(Enum):
    """Top-level Rd sections the extractor recognizes."""
    TITLE = "title"
    DESCRIPTION = "description"
    VALUE = "value"
    ARGUMENTS = "arguments"
    EXAMPLES = "examples"
    USAGE = "usage"
    DETAILS = "details"

    @property
    def opener(self) -> str:
        """Literal text that opens this section, e.g. ``\\title{``."""
        return f"\\{self.value}{{"


@dataclass(frozen=True)
class Section:
    """One named top-level section of an Rd unit.

    Attributes:
        name: Which section this is
        content: Raw text between the opening and the matching closing brace
    """
    name: SectionName
    content: str


@dataclass(frozen=True)
class Argument:
    """A documented argument: ``\\item{name}{description}``."""
    name: str
    description: str


@dataclass(frozen=True)
class ExampleBlock:
    """A run of example source lines forming one complete snippet."""
    lines: Tuple[str, ...]

    @property
    def code(self) -> str:
        return "\n".join(self.lines)


class CommandKind(Enum):
    """How the markup stripper treats an inline command."""
    KEEP_CONTENT = "keep_content"
    EXTRACT_FIRST_ARG = "extract_first_arg"
    EXTRACT_SECOND_OF_TWO = "extract_second_of_two"
    EXTRACT_NAMED_THEN_DESCRIPTION = "extract_named_then_description"
    DROP_ENTIRELY = "drop_entirely"
    LITERAL_SUBSTITUTE = "literal_substitute"
    RECURSE_CONTENT = "recurse_content"
    SKIP_WRAPPER = "skip_wrapper"
    VERBATIM = "verbatim"


@dataclass(frozen=True)
class MarkupCommand:
    """An inline command and its handling class.

    Attributes:
        name: Command name without the leading backslash
        kind: Handling class
        replacement: Fixed output text for LITERAL_SUBSTITUTE commands
    """
    name: str
    kind: CommandKind
    replacement: str = ""


@dataclass(frozen=True)
class SignatureRecord:
    """A function definition located in R source text.

    Attributes:
        name: Assigned identifier
        exported: Whether the name is in the export set (always True when
            the export set is empty)
        raw_parameter_text: Parameter list without the enclosing parentheses
        source_file: File the definition was found in
        line: 1-indexed line of the assignment
    """
    name: str
    exported: bool
    raw_parameter_text: str
    source_file: str = ""
    line: int = 0

    @property
    def signature(self) -> str:
        return f"{self.name}({self.raw_parameter_text})"


@dataclass
class RdDoc:
    """Structured documentation recovered from one Rd unit."""
    name: str
    aliases: List[str] = field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None
    value: Optional[str] = None
    details: Optional[str] = None
    usage: Optional[str] = None
    arguments: Dict[str, str] = field(default_factory=dict)
    examples: List[ExampleBlock] = field(default_factory=list)


@dataclass(frozen=True)
class PythonParameter:
    """One parameter of a Python callable.

    Attributes:
        name: Parameter name, with a ``*`` or ``**`` prefix for variadic
            parameters; the bare ``*`` and ``/`` markers are kept as names
        annotation: Annotation source text
        default: Default value source text
    """
    name: str
    annotation: Optional[str] = None
    default: Optional[str] = None

    @property
    def is_marker(self) -> bool:
        return self.name in ("*", "/")

    def render(self) -> str:
        text = self.name
        if self.annotation is not None:
            text += f": {self.annotation}"
        if self.default is not None:
            text += f" = {self.default}" if self.annotation is not None else f"={self.default}"
        return text


@dataclass
class PythonFunction:
    """A function or method found in Python source or by introspection."""
    name: str
    parameters: List[PythonParameter] = field(default_factory=list)
    docstring: Optional[str] = None
    return_annotation: Optional[str] = None
    source_file: str = ""
    line: int = 0

    @property
    def signature(self) -> str:
        rendered = ", ".join(parameter.render() for parameter in self.parameters)
        text = f"{self.name}({rendered})"
        if self.return_annotation is not None:
            text += f" -> {self.return_annotation}"
        return text


@dataclass
class PythonClass:
    """A class and its methods."""
    name: str
    docstring: Optional[str] = None
    methods: List[PythonFunction] = field(default_factory=list)
    source_file: str = ""
    line: int = 0


@dataclass
class PythonModule:
    """Public contents of one Python module."""
    name: str
    docstring: Optional[str] = None
    functions: List[PythonFunction] = field(default_factory=list)
    classes: List[PythonClass] = field(default_factory=list)


@dataclass
class Example:
    """A code example attached to a function record."""
    code: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {'code': self.code}


@dataclass
class PackageRecord:
    """Package-level metadata record."""
    name: str
    version: str
    language: str = DEFAULTS.LANGUAGE
    description: Optional[str] = None
    common_arguments: Dict[str, str] = field(default_factory=dict)
    schema_version: str = SCHEMA_VERSION

    kind = "package"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting empty optional fields."""
        data: Dict[str, Any] = {
            'kind': self.kind,
            'schema_version': self.schema_version,
            'name': self.name,
            'version': self.version,
            'language': self.language,
        }
        if self.description is not None:
            data['description'] = self.description
        if self.common_arguments:
            data['common_arguments'] = dict(self.common_arguments)
        return data


@dataclass
class FunctionRecord:
    """Function-level record combining a signature with its documentation."""
    name: str
    exported: bool
    signature: str
    purpose: Optional[str] = None
    arguments: Dict[str, str] = field(default_factory=dict)
    returns: Optional[str] = None
    examples: List[Example] = field(default_factory=list)
    return_type: Optional[str] = None

    kind = "function"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting empty optional fields."""
        data: Dict[str, Any] = {
            'kind': self.kind,
            'name': self.name,
            'exported': self.exported,
            'signature': self.signature,
        }
        if self.purpose is not None:
            data['purpose'] = self.purpose
        if self.arguments:
            data['arguments'] = dict(self.arguments)
        if self.returns is not None:
            data['returns'] = self.returns
        if self.return_type is not None:
            data['return_type'] = self.return_type
        if self.examples:
            data['examples'] = [example.to_dict() for example in self.examples]
        return data


@dataclass
class ClassRecord:
    """Class record listing public methods with a one-line description each."""
    name: str
    purpose: Optional[str] = None
    methods: Dict[str, str] = field(default_factory=dict)

    kind = "class"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting empty optional fields."""
        data: Dict[str, Any] = {'kind': self.kind, 'name': self.name}
        if self.purpose is not None:
            data['purpose'] = self.purpose
        if self.methods:
            data['methods'] = dict(self.methods)
        return data


Record = Union[PackageRecord, FunctionRecord, ClassRecord]


@dataclass
class ExtractOptions:
    """Resolved extraction options.

    Attributes:
        include_internal: Keep non-exported and dot-prefixed functions
        max_examples: Maximum example blocks per function
        compact: Apply compact-mode truncation
        hoist_common_args: Move frequently repeated arguments to the package record
        output_format: ``yaml`` or ``json``
        emit_classes: Emit class records (Python packages)
    """
    include_internal: bool = False
    max_examples: int = DEFAULTS.MAX_EXAMPLES
    compact: bool = False
    hoist_common_args: bool = False
    output_format: str = DEFAULTS.FORMAT
    emit_classes: bool = False
