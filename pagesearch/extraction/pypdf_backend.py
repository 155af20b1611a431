"""
pypdf-based text extraction backend.

Fast extraction suitable for most standard PDF files.
Handles encryption detection and empty password decryption.
"""

from pathlib import Path
from typing import Iterator, List, Tuple, Union

from pypdf import PdfReader

from ..core import get_logger, ExtractionError

logger = get_logger(__name__)


class PyPDFBackend:
    """PDF text extraction using the pypdf library."""

    name = "pypdf"

    def _open(self, filepath: Path) -> PdfReader:
        reader = PdfReader(filepath)

        if reader.is_encrypted:
            try:
                reader.decrypt("")
            except Exception as e:
                raise ExtractionError(
                    f"PDF is encrypted and cannot be decrypted: {e}",
                    filepath=str(filepath)
                )

        return reader

    def iter_pages(self, filepath: Union[str, Path]) -> Iterator[Tuple[int, str]]:
        """
        Yield the text of each non-empty page.

        Args:
            filepath: Path to the PDF file.

        Yields:
            (page_number, text) tuples. Page numbers are 1-indexed.

        Raises:
            ExtractionError: If the document cannot be opened.
        """
        filepath = Path(filepath)

        try:
            reader = self._open(filepath)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"pypdf extraction failed: {e}", filepath=str(filepath))

        logger.debug(f"Processing {len(reader.pages)} pages: {filepath.name}")

        for page_num, page in enumerate(reader.pages, start=1):
            try:
                text = page.extract_text() or ""
            except Exception as e:
                logger.warning(f"Failed to extract page {page_num} from {filepath.name}: {e}")
                continue

            if text.strip():
                yield page_num, text
            else:
                logger.debug(f"Empty page {page_num} in {filepath.name}")

    def extract(self, filepath: Union[str, Path]) -> List[Tuple[int, str]]:
        """
        Extract text from all pages of a PDF.

        Args:
            filepath: Path to the PDF file.

        Returns:
            List of (page_number, text) tuples.

        Raises:
            ExtractionError: If extraction fails completely.
        """
        try:
            return list(self.iter_pages(filepath))
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"pypdf extraction failed: {e}", filepath=str(filepath))
