"""
pdfplumber-based text extraction backend.

Slower than pypdf but steadier on multi-column layouts, so it serves as
the fallback. Overlapping duplicate glyphs, which some producers emit to
fake bold type, are merged before text is read so that words such as
"ffooxx" do not hide a whole-word match.
"""

from pathlib import Path
from typing import Iterator, List, Tuple, Union

import pdfplumber

from ..core import get_logger, ExtractionError

logger = get_logger(__name__)


class PDFPlumberBackend:
    """PDF text extraction using the pdfplumber library."""

    name = "pdfplumber"

    def __init__(self, dedupe_chars: bool = True):
        self.dedupe_chars = dedupe_chars

    def _page_text(self, page) -> str:
        if self.dedupe_chars:
            page = page.dedupe_chars()
        return page.extract_text() or ""

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
            pdf = pdfplumber.open(filepath)
        except Exception as e:
            raise ExtractionError(f"pdfplumber extraction failed: {e}", filepath=str(filepath))

        with pdf:
            logger.debug(f"Processing {len(pdf.pages)} pages: {filepath.name}")

            for page_num, page in enumerate(pdf.pages, start=1):
                try:
                    text = self._page_text(page)
                except Exception as e:
                    logger.warning(f"Failed to extract page {page_num} from {filepath.name}: {e}")
                    continue

                if text.strip():
                    yield page_num, text

    def extract(self, filepath: Union[str, Path]) -> List[Tuple[int, str]]:
        """
        Extract text from all pages of a PDF.

        Raises:
            ExtractionError: If extraction fails completely.
        """
        try:
            return list(self.iter_pages(filepath))
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"pdfplumber extraction failed: {e}", filepath=str(filepath))
