"""
Typed records persisted by the document store.

Book and Page declare every stored field. Upserts go through
``merge_into``, which overwrites all declared fields of the stored record
with the incoming values and stamps ``updated_at``.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional, Tuple


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime for storage."""
    if value is None:
        return None
    return value.isoformat()


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp back into a datetime."""
    if not value:
        return None
    return datetime.fromisoformat(value)


@dataclass
class Book:
    """A single source document identified by title within a subject."""
    subject: str
    book_title: str
    file_name: str
    imported_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.subject, self.book_title)

    def merge_into(self, existing: Optional["Book"], now: datetime = None) -> "Book":
        """
        Produce the record to store when upserting self over existing.

        Args:
            existing: Currently stored record with the same key, if any.
            now: Timestamp to stamp as updated_at.

        Returns:
            New Book carrying every field of self and a fresh updated_at.
        """
        if existing is not None and existing.key != self.key:
            raise ValueError(f"Cannot merge book {self.key} into {existing.key}")
        return replace(self, updated_at=now or utc_now())


@dataclass
class Page:
    """One page of extracted text belonging to a Book."""
    subject: str
    book_title: str
    page_num: int
    text: str
    imported_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> Tuple[str, str, int]:
        return (self.subject, self.book_title, self.page_num)

    def merge_into(self, existing: Optional["Page"], now: datetime = None) -> "Page":
        """
        Produce the record to store when upserting self over existing.

        Args:
            existing: Currently stored record with the same key, if any.
            now: Timestamp to stamp as updated_at.

        Returns:
            New Page carrying every field of self and a fresh updated_at.
        """
        if existing is not None and existing.key != self.key:
            raise ValueError(f"Cannot merge page {self.key} into {existing.key}")
        return replace(self, updated_at=now or utc_now())


@dataclass(frozen=True)
class WriteOutcome:
    """
    Result of an upsert.

    Attributes:
        matched_count: 1 if a record with the same key already existed.
        modified_count: 1 if that record was overwritten.
        upserted: True if a new record was inserted.
    """
    matched_count: int
    modified_count: int
    upserted: bool

    @classmethod
    def inserted(cls) -> "WriteOutcome":
        return cls(matched_count=0, modified_count=0, upserted=True)

    @classmethod
    def updated(cls) -> "WriteOutcome":
        return cls(matched_count=1, modified_count=1, upserted=False)


@dataclass(frozen=True)
class PagePredicate:
    """
    Conjunction of constraints evaluated by DocumentStore.find_pages.

    Attributes:
        subject: Pages must belong to this subject.
        book_titles: Pages must belong to one of these titles.
        text_pattern: Regular expression the page text must match.
        fts_phrase: Optional FTS5 phrase used to narrow candidates before
            text_pattern is applied. Must match a superset of text_pattern.
    """
    subject: str
    book_titles: Tuple[str, ...]
    text_pattern: Optional[str] = None
    fts_phrase: Optional[str] = None
