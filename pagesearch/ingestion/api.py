"""
Ingestion API used by import pipelines to write books and pages.

Accepts raw mappings (camelCase keys as produced by external importers,
or snake_case keys) or typed records, validates them, and upserts them
into the document store.
"""

from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..core import get_logger, InvalidInputError
from ..database import Book, Page, DocumentStore, WriteOutcome
from ..database.models import utc_now

logger = get_logger(__name__)


FIELD_ALIASES = {
    "subject": ("subject",),
    "book_title": ("bookTitle", "book_title"),
    "file_name": ("fileName", "file_name"),
    "page_num": ("pageNum", "page_num"),
    "text": ("text",),
    "imported_at": ("importedAt", "imported_at"),
}


def _lookup(data: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        if key in data:
            return data[key]
    return None


def _require_string(data: Mapping[str, Any], field: str, allow_empty: bool = False) -> str:
    value = _lookup(data, field)
    if value is None:
        raise InvalidInputError(f"Missing required field: {field}", field=field)
    if not isinstance(value, str):
        raise InvalidInputError(
            f"Field {field} must be a string, got {type(value).__name__}",
            field=field
        )
    if not allow_empty and not value.strip():
        raise InvalidInputError(f"Field {field} must not be empty", field=field)
    return value


def _require_page_num(data: Mapping[str, Any]) -> int:
    value = _lookup(data, "page_num")
    if value is None:
        raise InvalidInputError("Missing required field: page_num", field="page_num")
    # bool is an int subclass but never a page number
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(
            f"Field page_num must be an integer, got {type(value).__name__}",
            field="page_num"
        )
    if value < 0:
        raise InvalidInputError("Field page_num must be >= 0", field="page_num")
    return value


def _optional_timestamp(data: Mapping[str, Any]) -> datetime:
    value = _lookup(data, "imported_at")
    if value is None:
        return utc_now()
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    raise InvalidInputError(
        "Field imported_at must be a datetime or ISO 8601 string",
        field="imported_at"
    )


def parse_book(data: Union[Book, Mapping[str, Any]]) -> Book:
    """
    Validate raw book data and build a Book.

    Args:
        data: Book record or mapping with subject, bookTitle, fileName and
            optional importedAt (defaults to now).

    Returns:
        Validated Book.

    Raises:
        InvalidInputError: If a required field is missing or malformed.
    """
    if isinstance(data, Book):
        data = {
            "subject": data.subject,
            "book_title": data.book_title,
            "file_name": data.file_name,
            "imported_at": data.imported_at,
        }
    elif not isinstance(data, Mapping):
        raise InvalidInputError(f"Book data must be a mapping, got {type(data).__name__}")

    return Book(
        subject=_require_string(data, "subject"),
        book_title=_require_string(data, "book_title"),
        file_name=_require_string(data, "file_name"),
        imported_at=_optional_timestamp(data)
    )


def parse_page(data: Union[Page, Mapping[str, Any]]) -> Page:
    """
    Validate raw page data and build a Page.

    Args:
        data: Page record or mapping with subject, bookTitle, pageNum, text
            and optional importedAt (defaults to now).

    Returns:
        Validated Page.

    Raises:
        InvalidInputError: If a required field is missing or malformed.
    """
    if isinstance(data, Page):
        data = {
            "subject": data.subject,
            "book_title": data.book_title,
            "page_num": data.page_num,
            "text": data.text,
            "imported_at": data.imported_at,
        }
    elif not isinstance(data, Mapping):
        raise InvalidInputError(f"Page data must be a mapping, got {type(data).__name__}")

    return Page(
        subject=_require_string(data, "subject"),
        book_title=_require_string(data, "book_title"),
        page_num=_require_page_num(data),
        text=_require_string(data, "text", allow_empty=True),
        imported_at=_optional_timestamp(data)
    )


class IngestionAPI:
    """
    Write path for external import pipelines.

    Each call validates its input and passes it straight through to the
    matching DocumentStore upsert. Store errors propagate unchanged.
    """

    def __init__(self, store: Optional[DocumentStore] = None):
        """
        Initialize the ingestion API.

        Args:
            store: Document store to write to. Defaults to a new DocumentStore.
        """
        self.store = store or DocumentStore()

    def import_book(self, data: Union[Book, Mapping[str, Any]]) -> WriteOutcome:
        """
        Upsert a book.

        Args:
            data: Book record or raw mapping.

        Returns:
            WriteOutcome of the upsert.

        Raises:
            InvalidInputError: If natural-key fields are missing or malformed.
        """
        book = parse_book(data)
        outcome = self.store.upsert_book(book)
        logger.debug(
            f"Imported book {book.subject}/{book.book_title} "
            f"({'inserted' if outcome.upserted else 'updated'})"
        )
        return outcome

    def import_page(self, data: Union[Page, Mapping[str, Any]]) -> WriteOutcome:
        """
        Upsert a page.

        Args:
            data: Page record or raw mapping.

        Returns:
            WriteOutcome of the upsert.

        Raises:
            InvalidInputError: If natural-key fields are missing or malformed.
        """
        page = parse_page(data)
        return self.store.upsert_page(page)
