"""Record extraction from R and Python package source trees.

For R, DESCRIPTION gives the package record, NAMESPACE the export set,
``man/*.Rd`` the documentation and ``R/*.R`` the function signatures.
Signatures are matched to documentation by function name, via each Rd
unit's name and aliases.

For Python, project files give the package record and every ``.py`` file
outside test and build directories is parsed for top-level functions and
classes.
"""

from pathlib import Path
from typing import Dict, List, Optional
import logging

from pkgctx.data_models import (
    Example,
    ExtractOptions,
    FunctionRecord,
    PackageRecord,
    PythonModule,
    RdDoc,
    Record,
    SignatureRecord,
)
from pkgctx.extractors.python.docstrings import parse_docstring
from pkgctx.extractors.python.metadata import read_project_metadata
from pkgctx.extractors.python.records import LANGUAGE as PYTHON_LANGUAGE, module_records
from pkgctx.extractors.python.source_extractor import PythonSourceExtractor
from pkgctx.extractors.r.metadata import parse_description, parse_namespace
from pkgctx.extractors.r.signature_scanner import split_parameters
from pkgctx.extractors.r.source_extractor import RSourceExtractor
from pkgctx.extractors.rd.markup_stripper import strip_markup
from pkgctx.extractors.rd.rd_extractor import RdExtractor
from pkgctx.fetch import FetchedPackage
from pkgctx.utils.error_handler import ExtractionError
from pkgctx.utils.file_reader import PathLike, list_files, read_file, walk_files

logger = logging.getLogger(__name__)

MAN_DIR = "man"
R_DIR = "R"
RD_EXTENSIONS = ('.Rd', '.rd')
R_EXTENSIONS = ('.R', '.r')
PY_EXTENSIONS = ('.py',)
PY_SKIP_DIRS = frozenset({'tests', 'test', 'testing', 'docs', 'doc', 'examples',
                          'benchmarks', 'build', 'dist', '__pycache__', 'site-packages'})
PY_SKIP_FILES = frozenset({'setup.py', 'conftest.py', 'noxfile.py'})


def expand_documented_names(documented: Dict[str, str]) -> Dict[str, str]:
    """Split ``\\item{x, y}`` style names so each parameter gets the description.

    The first description seen for a name is kept.
    """
    expanded: Dict[str, str] = {}
    for names, description in documented.items():
        for name in names.split(","):
            name = strip_markup(name).strip()
            if name and name not in expanded:
                expanded[name] = description
    return expanded


def join_arguments(raw_parameter_text: str, documented: Dict[str, str]) -> Dict[str, str]:
    """Pair each signature parameter with its documentation.

    Undocumented parameters with a default are described as
    ``default: <expr>``; other undocumented parameters are left out.

    Args:
        raw_parameter_text: Parameter list from the signature scanner
        documented: Argument name to description from the Rd unit

    Returns:
        Parameter name to description, in signature order
    """
    descriptions = expand_documented_names(documented)
    arguments: Dict[str, str] = {}
    for name, default in split_parameters(raw_parameter_text):
        if descriptions.get(name):
            arguments[name] = descriptions[name]
        elif default is not None:
            arguments[name] = f"default: {default}"
    return arguments


def build_function_record(signature: SignatureRecord, doc: Optional[RdDoc],
                          max_examples: int) -> FunctionRecord:
    """Combine a scanned signature with its (possibly missing) documentation."""
    record = FunctionRecord(
        name=signature.name,
        exported=signature.exported,
        signature=signature.signature,
        arguments=join_arguments(signature.raw_parameter_text, doc.arguments if doc else {})
    )
    if doc is not None:
        record.purpose = doc.title
        record.returns = doc.value
        record.examples = [Example(code=block.code) for block in doc.examples[:max_examples]]
    return record


class RSourcePackageExtractor:
    """Extracts records from an unpacked R package source tree."""

    def __init__(self, options: Optional[ExtractOptions] = None):
        """Initialize the package extractor.

        Args:
            options: Extraction options; defaults apply when omitted
        """
        self.options = options or ExtractOptions()
        self.rd_extractor = RdExtractor(max_examples=self.options.max_examples)

    def extract(self, package: FetchedPackage) -> List[Record]:
        """Extract records from a fetched package."""
        return self.extract_directory(package.source_path, package.name, package.version)

    def extract_directory(self, root: PathLike, name: Optional[str] = None,
                          version: Optional[str] = None) -> List[Record]:
        """Extract records from a package source directory.

        Args:
            root: Directory holding DESCRIPTION
            name: Fallback package name when DESCRIPTION has none
            version: Fallback version when DESCRIPTION has none

        Returns:
            Package record followed by function records in source order

        Raises:
            ExtractionError: If DESCRIPTION cannot be read
        """
        root = Path(root)
        content = read_file(root / "DESCRIPTION")
        if content is None:
            raise ExtractionError(
                f"Failed to read DESCRIPTION in {root}",
                suggestions=["Check that the path is the root of an R package"],
                error_code="missing_description"
            )
        description = parse_description(content)
        package = PackageRecord(
            name=description.package or name or root.name,
            version=description.version or version or "unknown",
            description=description.summary
        )

        exports = self.read_exports(root)
        docs = self.read_docs(root)
        extractor = RSourceExtractor(exports, self.options.include_internal)

        records: List[Record] = [package]
        for path in list_files(root / R_DIR, R_EXTENSIONS):
            signatures = extractor.extract_file(path)
            if signatures is None:
                continue
            for signature in signatures:
                records.append(build_function_record(
                    signature, docs.get(signature.name), self.options.max_examples
                ))

        documented = sum(1 for record in records[1:] if record.name in docs)
        logger.info(
            f"{package.name} {package.version}: {len(records) - 1} functions, "
            f"{documented} documented, {len(exports)} exports"
        )
        return records

    @staticmethod
    def read_exports(root: Path) -> List[str]:
        """Exported names from NAMESPACE; empty when there is no NAMESPACE."""
        path = root / "NAMESPACE"
        if not path.is_file():
            logger.debug(f"No NAMESPACE in {root}; treating every function as exported")
            return []
        content = read_file(path)
        return parse_namespace(content) if content is not None else []

    def read_docs(self, root: Path) -> Dict[str, RdDoc]:
        """Parse every Rd unit and index it by name and alias.

        When several units claim the same key, the first in sorted file
        order wins.
        """
        docs: Dict[str, RdDoc] = {}
        for path in list_files(root / MAN_DIR, RD_EXTENSIONS):
            doc = self.rd_extractor.extract_file(path)
            if doc is None:
                continue
            for key in [doc.name] + doc.aliases:
                docs.setdefault(key, doc)
        logger.debug(f"Indexed {len(docs)} documentation keys from {root / MAN_DIR}")
        return docs


class PythonSourcePackageExtractor:
    """Extracts records from an unpacked Python project or sdist."""

    def __init__(self, options: Optional[ExtractOptions] = None):
        self.options = options or ExtractOptions()
        self.source_extractor = PythonSourceExtractor(self.options.include_internal)

    def extract(self, package: FetchedPackage) -> List[Record]:
        """Extract records from a fetched package."""
        return self.extract_directory(package.source_path, package.name, package.version)

    def extract_directory(self, root: PathLike, name: Optional[str] = None,
                          version: Optional[str] = None) -> List[Record]:
        """Extract records from a Python project directory.

        Args:
            root: Project root (holding pyproject.toml, setup.py or the sources)
            name: Fallback project name when no project file names one
            version: Fallback version when no project file has a literal one

        Returns:
            Package record, then function records in file order, then class
            records when ``emit_classes`` is set

        Raises:
            ExtractionError: If the directory holds no Python sources
        """
        root = Path(root)
        paths = [path for path in walk_files(root, PY_EXTENSIONS, PY_SKIP_DIRS)
                 if path.name not in PY_SKIP_FILES and not path.name.startswith("test_")]
        if not paths:
            raise ExtractionError(
                f"No Python source files found in {root}",
                suggestions=["Check that the path is the root of a Python project"],
                error_code="missing_sources"
            )

        modules: List[PythonModule] = []
        for path in paths:
            module = self.source_extractor.extract_file(path)
            if module is not None:
                modules.append(module)

        project = read_project_metadata(root)
        summary = project.summary or next(
            (parse_docstring(module.docstring).summary for module in modules if module.docstring), None
        )
        package = PackageRecord(
            name=project.name or name or root.name,
            version=project.version or version or "unknown",
            language=PYTHON_LANGUAGE,
            description=summary
        )

        records: List[Record] = [package]
        records.extend(module_records(modules, self.options))
        logger.info(
            f"{package.name} {package.version}: {len(paths)} modules, "
            f"{len(records) - 1} records"
        )
        return records


def extract_package(root: PathLike, options: Optional[ExtractOptions] = None) -> List[Record]:
    """Extract records from a package source directory."""
    return RSourcePackageExtractor(options).extract_directory(root)
