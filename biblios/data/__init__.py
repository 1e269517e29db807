"""Data types and Bible metadata."""

from biblios.data.types import (
    Bookmark,
    Chapter,
    Location,
    Translation,
    Verse,
    VerseReference,
    make_chapter,
)
from biblios.data.canon import (
    CanonBook,
    BOOK_ORDER,
    all_books,
    book_chapters,
    book_index,
    book_name,
    filter_books,
    first_book,
    get_book,
    last_book,
    next_book,
    prev_book,
    resolve_alias,
    testament_label,
)

__all__ = [
    "Bookmark",
    "Chapter",
    "Location",
    "Translation",
    "Verse",
    "VerseReference",
    "make_chapter",
    "CanonBook",
    "BOOK_ORDER",
    "all_books",
    "book_chapters",
    "book_index",
    "book_name",
    "filter_books",
    "first_book",
    "get_book",
    "last_book",
    "next_book",
    "prev_book",
    "resolve_alias",
    "testament_label",
]
