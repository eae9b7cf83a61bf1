"""Base class for file extractors."""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar
from pathlib import Path
import logging

from pkgctx.utils.file_reader import PathLike, read_file

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseExtractor(ABC, Generic[T]):
    """Abstract base class for extracting structure from one kind of file.

    Subclasses implement :meth:`parse_content`; reading and validating the
    file is shared here. The parsers behind ``parse_content`` never raise
    on malformed input, so the only failure path is an unreadable file.
    """

    def __init__(self, language: str, supported_extensions: List[str]):
        """Initialize the base extractor.

        Args:
            language: Language or document type name (e.g., 'rd', 'r')
            supported_extensions: Supported file extensions, lower case (e.g., ['.rd'])
        """
        self.language = language
        self.supported_extensions = supported_extensions
        logger.debug(f"Initialized {language} extractor with extensions: {supported_extensions}")

    def can_extract(self, file_path: PathLike) -> bool:
        """Check if this extractor can handle the given file.

        Args:
            file_path: Path to the file

        Returns:
            True if this extractor supports the file type
        """
        return Path(file_path).suffix.lower() in self.supported_extensions

    def validate_file(self, file_path: PathLike) -> bool:
        """Validate that the file exists and is readable.

        Args:
            file_path: Path to the file

        Returns:
            True if file is valid and readable
        """
        path = Path(file_path)

        if not path.exists():
            logger.error(f"File not found: {file_path}")
            return False

        if not path.is_file():
            logger.error(f"Not a file: {file_path}")
            return False

        if not self.can_extract(file_path):
            logger.warning(f"File extension not supported by {self.language} extractor: {file_path}")
            return False

        return True

    def extract_file(self, file_path: PathLike) -> Optional[T]:
        """Validate, read and parse one file.

        Args:
            file_path: Path to the file

        Returns:
            Parsed result, or None if the file could not be read
        """
        if not self.validate_file(file_path):
            return None

        content = read_file(file_path)
        if content is None:
            logger.error(f"Failed to read file: {file_path}")
            return None

        return self.parse_content(content, str(file_path))

    @abstractmethod
    def parse_content(self, content: str, source_file: str) -> T:
        """Parse already-read content.

        Args:
            content: File content as string
            source_file: Source file path for metadata and logging

        Returns:
            Extractor-specific result
        """
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(extensions={self.supported_extensions})"

    def __repr__(self) -> str:
        return self.__str__()
