"""
File scanner for the subject-organized PDF library.

The data directory holds one folder per subject; every PDF below a
subject folder, however deeply nested, is a book of that subject.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Union

from ..core import get_config, get_logger
from ..utils import get_file_size_mb

logger = get_logger(__name__)


@dataclass(frozen=True)
class BookFile:
    """A PDF discovered in the library, with the names it is stored under."""
    path: Path
    subject: str
    book_title: str

    @property
    def file_name(self) -> str:
        return self.path.name


class FileScanner:
    """
    Recursively discovers book PDFs under the subject folders.

    Uses generator-based iteration for memory efficiency when
    processing large collections.
    """

    def __init__(
        self,
        root_directory: Union[str, Path] = None,
        extensions: List[str] = None,
        max_file_size_mb: float = None
    ):
        """
        Initialize the file scanner.

        Args:
            root_directory: Library directory. Defaults to config value.
            extensions: File extensions to include (e.g., [".pdf"]).
            max_file_size_mb: Skip files larger than this size.
        """
        config = get_config()

        self.root_directory = Path(root_directory or config.paths.data_directory)
        self.extensions = [
            ext.lower() for ext in (extensions or config.extraction.supported_extensions)
        ]
        self.max_file_size_mb = max_file_size_mb or config.extraction.max_file_size_mb

    def scan(self) -> Iterator[BookFile]:
        """
        Scan the library and yield every book file.

        Files directly in the root directory have no subject and are
        skipped.

        Yields:
            BookFile for each matching PDF, subject folders in name order.
        """
        if not self.root_directory.exists():
            logger.error(f"Library directory does not exist: {self.root_directory}")
            return

        logger.info(f"Scanning library: {self.root_directory}")

        file_count = 0
        skipped = 0

        for subject_dir in sorted(p for p in self.root_directory.iterdir() if p.is_dir()):
            subject = subject_dir.name

            for filepath in sorted(subject_dir.rglob("*")):
                if not filepath.is_file() or filepath.suffix.lower() not in self.extensions:
                    continue

                try:
                    size_mb = get_file_size_mb(filepath)
                except OSError as e:
                    logger.warning(f"Cannot access file {filepath}: {e}")
                    continue

                if size_mb > self.max_file_size_mb:
                    logger.debug(f"Skipping large file ({size_mb}MB): {filepath.name}")
                    skipped += 1
                    continue

                file_count += 1
                yield BookFile(path=filepath, subject=subject, book_title=filepath.stem)

        logger.info(f"Scan complete: {file_count} books found, {skipped} skipped (too large)")

    def list_all(self) -> List[BookFile]:
        """Get all book files as a list."""
        return list(self.scan())
