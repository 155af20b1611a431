"""
Unified PDF extraction interface with automatic fallback.

Wraps the extraction backends and falls back to the secondary one when
the primary fails or returns no text.
"""

from pathlib import Path
from typing import List, Tuple, Union

from ..core import get_config, get_logger, ExtractionError
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend

logger = get_logger(__name__)


BACKENDS = {
    "pypdf": PyPDFBackend,
    "pdfplumber": PDFPlumberBackend
}


class PDFExtractor:
    """
    PDF extraction with automatic backend fallback.

    Tries the primary backend first, falls back to secondary
    if extraction fails or produces empty results.
    """

    def __init__(
        self,
        primary_backend: str = None,
        fallback_backend: str = None
    ):
        """
        Initialize the extractor with configured backends.

        Args:
            primary_backend: Name of primary backend ("pypdf" or "pdfplumber").
            fallback_backend: Name of fallback backend, or "" for none.

        Raises:
            ExtractionError: If a backend name is unknown.
        """
        config = get_config()

        primary_name = primary_backend or config.extraction.primary_backend
        fallback_name = (
            fallback_backend if fallback_backend is not None
            else config.extraction.fallback_backend
        )

        if primary_name not in BACKENDS:
            raise ExtractionError(f"Unknown backend: {primary_name}")
        if fallback_name and fallback_name not in BACKENDS:
            raise ExtractionError(f"Unknown backend: {fallback_name}")

        self.primary = BACKENDS[primary_name]()
        self.fallback = BACKENDS[fallback_name]() if fallback_name else None

        logger.debug(
            f"Initialized extractor: primary={primary_name}, fallback={fallback_name or 'none'}"
        )

    def extract(self, filepath: Union[str, Path]) -> List[Tuple[int, str]]:
        """
        Extract page texts from a PDF using available backends.

        Args:
            filepath: Path to the PDF file.

        Returns:
            List of (page_number, text) tuples.

        Raises:
            ExtractionError: If all backends fail or return nothing.
        """
        filepath = Path(filepath)
        primary_error = None

        try:
            results = self.primary.extract(filepath)
            if results:
                return results
            logger.debug(f"Primary backend returned empty results: {filepath.name}")
        except ExtractionError as e:
            primary_error = e
            logger.debug(f"Primary backend failed: {e.message}")

        if self.fallback:
            try:
                logger.debug(f"Trying fallback backend for: {filepath.name}")
                results = self.fallback.extract(filepath)
                if results:
                    return results
            except ExtractionError as e:
                logger.debug(f"Fallback backend also failed: {e.message}")

        if primary_error:
            raise primary_error

        raise ExtractionError(
            "All backends returned empty results",
            filepath=str(filepath)
        )
