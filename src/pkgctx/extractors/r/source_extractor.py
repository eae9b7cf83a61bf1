"""R source file extractor."""

from typing import Iterable, List, Optional
import logging

from pkgctx.data_models import SignatureRecord
from pkgctx.extractors.base_extractor import BaseExtractor
from pkgctx.extractors.r.signature_scanner import SignatureScanner

logger = logging.getLogger(__name__)


class RSourceExtractor(BaseExtractor[List[SignatureRecord]]):
    """Extracts function signatures from one ``.R`` file."""

    def __init__(self, exports: Optional[Iterable[str]] = None, include_internal: bool = False):
        """Initialize the R source extractor.

        Args:
            exports: Names exported by the package NAMESPACE
            include_internal: Keep dot-prefixed and non-exported functions
        """
        super().__init__(language="r", supported_extensions=['.r'])
        self.scanner = SignatureScanner(exports, include_internal)

    def parse_content(self, content: str, source_file: str) -> List[SignatureRecord]:
        records = self.scanner.scan(content, source_file)
        logger.debug(f"{source_file}: {len(records)} function definitions")
        return records
