"""Three step book/chapter/verse picker."""

from enum import Enum
from typing import List, Optional

from biblios.data.canon import CanonBook, book_chapters, filter_books
from biblios.data.types import Chapter, Location
from biblios.errors import ChapterNotFound
from biblios.keymap import Intent, IntentKind
from biblios.logger import get_logger

logger = get_logger(__name__)

# Verse count shown when the chosen chapter could not be loaded
PLACEHOLDER_VERSE_COUNT = 50


class PickerStep(str, Enum):
    BOOK = "book"
    CHAPTER = "chapter"
    VERSE = "verse"


class LocationPicker:
    """Book -> chapter -> verse wizard.

    The book step filters the canon by a typed substring. Each step has a
    selection index that is clamped against the step's candidate count
    whenever it is read or moved.
    """

    def __init__(self) -> None:
        self.step = PickerStep.BOOK
        self.text_filter = ""
        self._selection = 0
        self.chosen_book: Optional[str] = None
        self.chosen_chapter: Optional[int] = None
        self.chapter: Optional[Chapter] = None

    def open(self) -> None:
        """Reset to the book step with an empty filter."""
        self.close()

    def close(self) -> None:
        """Clear all transient fields."""
        self.step = PickerStep.BOOK
        self.text_filter = ""
        self._selection = 0
        self.chosen_book = None
        self.chosen_chapter = None
        self.chapter = None

    def candidates(self) -> List[CanonBook]:
        """Books matching the current filter, in canonical order."""
        return filter_books(self.text_filter)

    def candidate_count(self) -> int:
        if self.step is PickerStep.BOOK:
            return len(self.candidates())
        if self.step is PickerStep.CHAPTER:
            return book_chapters(self.chosen_book) if self.chosen_book else 0
        if self.chapter is not None and len(self.chapter) > 0:
            return len(self.chapter)
        return PLACEHOLDER_VERSE_COUNT

    @property
    def selection_index(self) -> int:
        """The selection, clamped to the current candidate list."""
        self._selection = self._clamp(self._selection)
        return self._selection

    def _clamp(self, index: int) -> int:
        count = self.candidate_count()
        if count <= 0:
            return 0
        return max(0, min(index, count - 1))

    def selected_book(self) -> Optional[CanonBook]:
        books = self.candidates()
        if not books:
            return None
        return books[self.selection_index]

    def handle(self, intent: Intent, provider) -> Optional[Location]:
        """Apply an intent; returns the chosen location once the verse is confirmed."""
        kind = intent.kind

        if kind is IntentKind.UP:
            self._selection = self._clamp(self.selection_index - 1)
        elif kind is IntentKind.DOWN:
            self._selection = self._clamp(self.selection_index + 1)
        elif kind is IntentKind.DIGIT and intent.digit >= 1:
            self._selection = self._clamp(intent.digit - 1)
        elif kind is IntentKind.CHAR and self.step is PickerStep.BOOK:
            self.text_filter += intent.char
            self._selection = 0
        elif kind is IntentKind.BACKSPACE and self.step is PickerStep.BOOK:
            self.text_filter = self.text_filter[:-1]
            self._selection = 0
        elif kind is IntentKind.CONFIRM:
            return self._confirm(provider)
        elif kind is IntentKind.CANCEL:
            self._back()
        return None

    def _confirm(self, provider) -> Optional[Location]:
        if self.step is PickerStep.BOOK:
            book = self.selected_book()
            if book is None:
                return None
            self.chosen_book = book.abbr
            self.text_filter = ""
            self.step = PickerStep.CHAPTER
            self._selection = 0
            return None

        if self.step is PickerStep.CHAPTER:
            self.chosen_chapter = self.selection_index + 1
            try:
                self.chapter = provider.load_chapter(self.chosen_book, self.chosen_chapter)
            except ChapterNotFound as exc:
                logger.debug(f"Picker could not preload {exc}")
                self.chapter = None
            self.step = PickerStep.VERSE
            self._selection = 0
            return None

        location = Location(self.chosen_book, self.chosen_chapter, self.selection_index)
        logger.debug(f"Picker chose {location}")
        return location

    def _back(self) -> None:
        if self.step is PickerStep.VERSE:
            self.step = PickerStep.CHAPTER
            self.chosen_chapter = None
            self.chapter = None
        elif self.step is PickerStep.CHAPTER:
            self.step = PickerStep.BOOK
            self.chosen_book = None
        self._selection = 0

