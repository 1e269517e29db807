"""Navigation and modal state machine.

The navigator owns the reading position, the loaded chapter, the viewport
offset and the surface that currently receives input. Every key press
arrives as an :class:`~biblios.keymap.Intent` through :meth:`Navigator.dispatch`;
the renderer only reads the navigator's fields.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from biblios.bookmarks import BookmarkManager, bookmarks_path
from biblios.config import Settings, settings_path
from biblios.data.canon import (
    BOOK_ORDER,
    book_chapters,
    get_book,
    next_book,
    prev_book,
)
from biblios.data.types import Bookmark, Chapter, Location, Verse, VerseReference
from biblios.errors import ChapterNotFound, EmptyChapter, PersistenceError
from biblios.keymap import Intent, IntentKind
from biblios.logger import get_logger
from biblios.picker import LocationPicker, PickerStep
from biblios.state import ReadingState, state_path
from biblios.themes import available_themes

logger = get_logger(__name__)

DEFAULT_LOCATION = Location("John", 1, 0)
MIN_QUERY_LENGTH = 2

SETTINGS_ROWS = (
    "input_mode",
    "theme",
    "focus_mode",
    "show_verse_numbers",
    "verse_spacing",
)


class ModalSurface(str, Enum):
    READER = "reader"
    SEARCH = "search"
    BOOKMARKS = "bookmarks"
    LOCATION_PICKER = "location_picker"
    SETTINGS = "settings"
    THEME_PICKER = "theme_picker"
    HELP = "help"


BASE_VIEWS = (ModalSurface.READER, ModalSurface.SEARCH, ModalSurface.BOOKMARKS)


@dataclass
class Session:
    """Settings, bookmarks and reading position plus where they are stored."""

    settings: Settings = field(default_factory=Settings)
    bookmarks: BookmarkManager = field(default_factory=BookmarkManager)
    reading: ReadingState = field(default_factory=ReadingState)
    settings_file: Optional[Path] = None
    bookmarks_file: Optional[Path] = None
    state_file: Optional[Path] = None

    @classmethod
    def load(cls) -> "Session":
        """Load everything from the config directory, using defaults on failure."""
        settings_file = settings_path()
        bookmarks_file = bookmarks_path()
        state_file = state_path()
        return cls(
            settings=Settings.load(settings_file),
            bookmarks=BookmarkManager.load(bookmarks_file),
            reading=ReadingState.load(state_file),
            settings_file=settings_file,
            bookmarks_file=bookmarks_file,
            state_file=state_file,
        )

    def _write(self, what: str, save: Callable[[], None], path: Optional[Path]) -> None:
        try:
            save()
        except OSError as exc:
            raise PersistenceError(path, exc) from exc
        logger.debug(f"Saved {what}")

    def save_settings(self) -> None:
        self._write("settings", lambda: self.settings.save(self.settings_file), self.settings_file)

    def save_bookmarks(self) -> None:
        self._write("bookmarks", lambda: self.bookmarks.save(self.bookmarks_file), self.bookmarks_file)

    def save_reading(self) -> None:
        self._write("reading position", lambda: self.reading.save(self.state_file), self.state_file)

    def commit_position(self, location: Location) -> None:
        """Record the position and write it to disk."""
        self.reading.update_position(location)
        self.save_reading()

    def flush(self) -> List[PersistenceError]:
        """Write settings, bookmarks and position; return whatever failed."""
        failures: List[PersistenceError] = []
        for save in (self.save_settings, self.save_bookmarks, self.save_reading):
            try:
                save()
            except PersistenceError as exc:
                failures.append(exc)
        return failures


def copy_to_clipboard(text: str) -> bool:
    """Copy text to the system clipboard. Returns False if no clipboard is available."""
    try:
        import pyperclip
    except ImportError:
        return False
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        logger.warning(f"Clipboard copy failed: {exc}")
        return False
    return True


class Navigator:
    """Routes intents to the active surface and keeps the position consistent."""

    def __init__(
        self,
        provider,
        session: Optional[Session] = None,
        viewport_height: Optional[int] = None,
        clipboard: Callable[[str], bool] = copy_to_clipboard,
    ) -> None:
        self.provider = provider
        self.session = session or Session()
        self.clipboard = clipboard

        self.location: Optional[Location] = None
        self.chapter: Optional[Chapter] = None
        self.offset = 0
        self.viewport_height = max(1, viewport_height or self.settings.verses_per_page)

        self.surface = ModalSurface.READER
        self.base_view = ModalSurface.READER
        self.picker = LocationPicker()

        self.search_query = ""
        self.search_results: List[Verse] = []
        self.search_selection = 0
        self.search_cursor = -1

        self.bookmark_selection = 0
        self.settings_row = 0
        self.theme_selection = 0

        self.message = ""
        self.should_quit = False

    @property
    def settings(self) -> Settings:
        return self.session.settings

    @property
    def bookmarks(self) -> BookmarkManager:
        return self.session.bookmarks

    @property
    def current_verse(self) -> Optional[Verse]:
        if self.chapter is None or self.location is None or len(self.chapter) == 0:
            return None
        return self.chapter.verses[self.location.verse_index]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Seed the position from the saved record, the default, or the first loadable chapter."""
        saved = self.session.reading.location
        if saved is not None and self._goto(saved.book, saved.chapter, saved.verse_index):
            logger.info(f"Resuming at {self.location}")
            return
        if saved is not None:
            logger.warning(f"Saved position {saved} is not available, using default")

        if self._goto(DEFAULT_LOCATION.book, DEFAULT_LOCATION.chapter, DEFAULT_LOCATION.verse_index):
            logger.info(f"Starting at {self.location}")
            return

        for book in BOOK_ORDER:
            for number in range(1, book_chapters(book) + 1):
                if self._goto(book, number, 0):
                    logger.info(f"Starting at first available chapter {self.location}")
                    return
        logger.warning("No readable chapters in the verse store")

    def shutdown(self) -> List[PersistenceError]:
        """Flush settings, bookmarks and position. Failures are logged and returned."""
        if self.location is not None:
            self.session.reading.update_position(self.location)
        failures = self.session.flush()
        for failure in failures:
            logger.error(f"Shutdown flush failed: {failure}")
        return failures

    def set_viewport_height(self, height: int) -> None:
        self.viewport_height = max(1, height)
        self.follow()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, intent: Intent) -> None:
        """Deliver an intent to the surface that owns input, then persist the position."""
        before = self.location
        self.message = ""

        handler = {
            ModalSurface.LOCATION_PICKER: self._handle_picker,
            ModalSurface.THEME_PICKER: self._handle_theme_picker,
            ModalSurface.SETTINGS: self._handle_settings,
            ModalSurface.HELP: self._handle_help,
            ModalSurface.SEARCH: self._handle_search,
            ModalSurface.BOOKMARKS: self._handle_bookmarks,
            ModalSurface.READER: self._handle_reader,
        }[self.surface]
        handler(intent)

        if self.location is not None and self.location != before:
            try:
                self.session.commit_position(self.location)
            except PersistenceError as exc:
                logger.warning(f"Could not save reading position: {exc}")

    def _open(self, surface: ModalSurface) -> None:
        if surface in BASE_VIEWS:
            self.base_view = surface
        self.surface = surface

    def _close(self) -> None:
        self.surface = self.base_view

    # ------------------------------------------------------------------
    # Reader
    # ------------------------------------------------------------------

    def _handle_reader(self, intent: Intent) -> None:
        kind = intent.kind
        simple = {
            IntentKind.NEXT_VERSE: self.advance,
            IntentKind.PREV_VERSE: self.retreat,
            IntentKind.PAGE_DOWN: self.page_down,
            IntentKind.PAGE_UP: self.page_up,
            IntentKind.GO_TOP: self.go_top,
            IntentKind.GO_BOTTOM: self.go_bottom,
            IntentKind.NEXT_CHAPTER: self.next_chapter,
            IntentKind.PREV_CHAPTER: self.prev_chapter,
            IntentKind.NEXT_BOOK: self.next_book,
            IntentKind.PREV_BOOK: self.prev_book,
            IntentKind.TOGGLE_BOOKMARK: self.toggle_bookmark,
            IntentKind.TOGGLE_INPUT_MODE: self.toggle_input_mode,
            IntentKind.TOGGLE_FOCUS_MODE: self.toggle_focus_mode,
            IntentKind.COPY_VERSE: self.copy_verse,
        }
        if kind in simple:
            simple[kind]()
        elif kind is IntentKind.SEARCH_NEXT:
            self.cycle_search(1)
        elif kind is IntentKind.SEARCH_PREV:
            self.cycle_search(-1)
        elif kind is IntentKind.OPEN_SEARCH:
            self.search_query = ""
            self.search_results = []
            self.search_selection = 0
            self.search_cursor = -1
            self._open(ModalSurface.SEARCH)
        elif kind is IntentKind.OPEN_BOOKMARKS:
            self.bookmark_selection = 0
            self._open(ModalSurface.BOOKMARKS)
        elif kind is IntentKind.OPEN_PICKER:
            self.picker.open()
            self._open(ModalSurface.LOCATION_PICKER)
        elif kind is IntentKind.OPEN_SETTINGS:
            self.settings_row = 0
            self._open(ModalSurface.SETTINGS)
        elif kind is IntentKind.OPEN_HELP:
            self._open(ModalSurface.HELP)
        elif kind is IntentKind.QUIT:
            self.should_quit = True

    # Continuous navigation

    def advance(self) -> bool:
        """Move to the next verse, rolling into the next chapter or book."""
        if self.location is None or self.chapter is None:
            return False
        loc = self.location
        if loc.verse_index + 1 < len(self.chapter):
            self._set_index(loc.verse_index + 1)
            return True

        if loc.chapter < book_chapters(loc.book):
            chapter = self._try_load(loc.book, loc.chapter + 1)
            if chapter is not None:
                self._enter(chapter, 0)
                return True
        return self._enter_next_book()

    def retreat(self) -> bool:
        """Move to the previous verse, rolling back to the previous chapter's last verse."""
        if self.location is None or self.chapter is None:
            return False
        loc = self.location
        if loc.verse_index > 0:
            self._set_index(loc.verse_index - 1)
            return True

        if loc.chapter > 1:
            chapter = self._try_load(loc.book, loc.chapter - 1)
            if chapter is not None:
                self._enter(chapter, len(chapter) - 1)
                return True
        chapter = self._find_previous_book_tail(loc.book)
        if chapter is None:
            return False
        self._enter(chapter, len(chapter) - 1)
        return True

    def next_chapter(self) -> bool:
        if self.location is None:
            return False
        loc = self.location
        if loc.chapter < book_chapters(loc.book):
            chapter = self._try_load(loc.book, loc.chapter + 1)
            if chapter is not None:
                self._enter(chapter, 0)
                return True
        return self._enter_next_book()

    def prev_chapter(self) -> bool:
        if self.location is None:
            return False
        loc = self.location
        if loc.chapter > 1:
            chapter = self._try_load(loc.book, loc.chapter - 1)
            if chapter is not None:
                self._enter(chapter, 0)
                return True
        chapter = self._find_previous_book_tail(loc.book)
        if chapter is None:
            return False
        self._enter(chapter, 0)
        return True

    def next_book(self) -> bool:
        if self.location is None:
            return False
        return self._enter_next_book()

    def prev_book(self) -> bool:
        if self.location is None:
            return False
        book = prev_book(self.location.book)
        while book is not None:
            chapter = self._try_load(book, 1)
            if chapter is not None:
                self._enter(chapter, 0)
                return True
            book = prev_book(book)
        return False

    def _enter_next_book(self) -> bool:
        book = next_book(self.location.book)
        while book is not None:
            chapter = self._try_load(book, 1)
            if chapter is not None:
                self._enter(chapter, 0)
                return True
            book = next_book(book)
        logger.debug(f"No book after {self.location.book}")
        return False

    def _find_previous_book_tail(self, book: str) -> Optional[Chapter]:
        """Last non-empty chapter of the nearest earlier book that has one."""
        candidate = prev_book(book)
        while candidate is not None:
            for number in range(book_chapters(candidate), 0, -1):
                chapter = self._try_load(candidate, number)
                if chapter is not None:
                    return chapter
            candidate = prev_book(candidate)
        return None

    # Paging within the loaded chapter

    def page_down(self) -> None:
        if self.chapter is not None and self.location is not None:
            self._set_index(min(len(self.chapter) - 1, self.location.verse_index + self.viewport_height))

    def page_up(self) -> None:
        if self.chapter is not None and self.location is not None:
            self._set_index(max(0, self.location.verse_index - self.viewport_height))

    def go_top(self) -> None:
        if self.chapter is not None:
            self._set_index(0)

    def go_bottom(self) -> None:
        if self.chapter is not None:
            self._set_index(len(self.chapter) - 1)

    # Position helpers

    def _load(self, book: str, number: int) -> Chapter:
        chapter = self.provider.load_chapter(book, number)
        if len(chapter) == 0:
            raise EmptyChapter(book, number)
        return chapter

    def _try_load(self, book: str, number: int) -> Optional[Chapter]:
        try:
            return self._load(book, number)
        except (ChapterNotFound, EmptyChapter) as exc:
            logger.debug(f"Skipping {exc}")
            return None

    def _enter(self, chapter: Chapter, verse_index: int) -> None:
        """Make a loaded chapter current and reset the viewport."""
        verse_index = max(0, min(verse_index, len(chapter) - 1))
        self.chapter = chapter
        self.location = Location(chapter.book, chapter.number, verse_index)
        self.offset = 0
        self.follow()

    def _goto(self, book: str, number: int, verse_index: int) -> bool:
        canon = get_book(book)
        if canon is None:
            return False
        chapter = self._try_load(canon.abbr, number)
        if chapter is None:
            return False
        self._enter(chapter, verse_index)
        return True

    def _goto_reference(self, reference: VerseReference) -> bool:
        chapter = self._try_load(reference.book, reference.chapter)
        if chapter is None:
            self.message = f"{reference.book} {reference.chapter} is not available"
            return False
        self._enter(chapter, chapter.index_of(reference.verse))
        return True

    def _set_index(self, verse_index: int) -> None:
        self.location = Location(self.location.book, self.location.chapter, verse_index)
        self.follow()

    def follow(self) -> None:
        """Scroll just enough to keep the current verse inside the viewport."""
        if self.location is None:
            return
        index = self.location.verse_index
        if index < self.offset:
            self.offset = index
        elif index >= self.offset + self.viewport_height:
            self.offset = index - (self.viewport_height - 1)

    def visible_verses(self) -> List[Verse]:
        if self.chapter is None:
            return []
        return list(self.chapter.verses[self.offset:self.offset + self.viewport_height])

    # Reader features

    def toggle_bookmark(self) -> None:
        verse = self.current_verse
        if verse is None:
            return
        added = self.bookmarks.toggle(verse.reference)
        self.message = f"{'Bookmarked' if added else 'Removed bookmark'} {verse.reference}"
        self._save_bookmarks()

    def copy_verse(self) -> None:
        verse = self.current_verse
        if verse is None:
            return
        if self.clipboard(f"{verse.reference} {verse.text}"):
            self.message = f"Copied {verse.reference}"
        else:
            self.message = "Clipboard not available"

    def toggle_input_mode(self) -> None:
        self.settings.toggle_input_mode()
        self.message = f"Input mode: {self.settings.input_mode}"
        self._save_settings()

    def toggle_focus_mode(self) -> None:
        self.settings.toggle_focus_mode()
        self.message = f"Focus mode {'on' if self.settings.focus_mode else 'off'}"
        self._save_settings()

    def cycle_search(self, step: int) -> None:
        """Jump to the next or previous result of the last search."""
        if not self.search_results:
            self.message = "No search results"
            return
        count = len(self.search_results)
        if self.search_cursor < 0:
            self.search_cursor = 0 if step > 0 else count - 1
        else:
            self.search_cursor = (self.search_cursor + step) % count
        verse = self.search_results[self.search_cursor]
        if self._goto_reference(verse.reference):
            self.message = f"Result {self.search_cursor + 1}/{count}: {verse.reference}"

    def _save_settings(self) -> None:
        try:
            self.session.save_settings()
        except PersistenceError as exc:
            logger.warning(f"Could not save settings: {exc}")

    def _save_bookmarks(self) -> None:
        try:
            self.session.save_bookmarks()
        except PersistenceError as exc:
            logger.warning(f"Could not save bookmarks: {exc}")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _handle_search(self, intent: Intent) -> None:
        kind = intent.kind
        if kind is IntentKind.CHAR:
            self.search_query += intent.char
            self._run_search()
        elif kind is IntentKind.BACKSPACE:
            self.search_query = self.search_query[:-1]
            self._run_search()
        elif kind is IntentKind.UP:
            self.search_selection = max(0, self.search_selection - 1)
        elif kind is IntentKind.DOWN:
            self.search_selection = max(0, min(self.search_selection + 1, len(self.search_results) - 1))
        elif kind is IntentKind.CONFIRM:
            if not self.search_results:
                return
            verse = self.search_results[self.search_selection]
            if self._goto_reference(verse.reference):
                self.search_cursor = self.search_selection
                self._open(ModalSurface.READER)
        elif kind is IntentKind.CANCEL:
            self._open(ModalSurface.READER)

    def _run_search(self) -> None:
        self.search_selection = 0
        self.search_cursor = -1
        if len(self.search_query.strip()) < MIN_QUERY_LENGTH:
            self.search_results = []
            return
        self.search_results = self.provider.search(self.search_query, self.settings.search_limit)
        logger.debug(f"Search {self.search_query!r}: {len(self.search_results)} results")

    # ------------------------------------------------------------------
    # Bookmarks
    # ------------------------------------------------------------------

    def _handle_bookmarks(self, intent: Intent) -> None:
        kind = intent.kind
        items = self.bookmarks.all()
        if kind is IntentKind.UP:
            self.bookmark_selection = max(0, self.bookmark_selection - 1)
        elif kind is IntentKind.DOWN:
            self.bookmark_selection = max(0, min(self.bookmark_selection + 1, len(items) - 1))
        elif kind is IntentKind.CONFIRM:
            if items:
                bookmark = items[min(self.bookmark_selection, len(items) - 1)]
                if self._goto_reference(bookmark.reference):
                    self._open(ModalSurface.READER)
        elif kind is IntentKind.TOGGLE_BOOKMARK:
            if items:
                bookmark = items[min(self.bookmark_selection, len(items) - 1)]
                self.bookmarks.remove(bookmark.reference)
                self.message = f"Removed bookmark {bookmark.reference}"
                self.bookmark_selection = max(0, min(self.bookmark_selection, len(self.bookmarks) - 1))
                self._save_bookmarks()
        elif kind is IntentKind.CANCEL:
            self._open(ModalSurface.READER)

    def selected_bookmark(self) -> Optional[Bookmark]:
        items = self.bookmarks.all()
        if not items:
            return None
        return items[min(self.bookmark_selection, len(items) - 1)]

    # ------------------------------------------------------------------
    # Location picker
    # ------------------------------------------------------------------

    def _handle_picker(self, intent: Intent) -> None:
        if intent.kind is IntentKind.CANCEL and self.picker.step is PickerStep.BOOK:
            self.picker.close()
            self._close()
            return

        chosen = self.picker.handle(intent, self.provider)
        if chosen is None:
            return

        preloaded = self.picker.chapter
        if preloaded is not None and len(preloaded) > 0:
            self._enter(preloaded, chosen.verse_index)
        elif not self._goto(chosen.book, chosen.chapter, chosen.verse_index):
            self.message = f"{chosen.book} {chosen.chapter} is not available"
        self.picker.close()
        self._close()

    # ------------------------------------------------------------------
    # Settings and themes
    # ------------------------------------------------------------------

    def _handle_settings(self, intent: Intent) -> None:
        kind = intent.kind
        if kind is IntentKind.UP:
            self.settings_row = max(0, self.settings_row - 1)
        elif kind is IntentKind.DOWN:
            self.settings_row = min(len(SETTINGS_ROWS) - 1, self.settings_row + 1)
        elif kind is IntentKind.CONFIRM:
            self._toggle_setting(SETTINGS_ROWS[self.settings_row])
        elif kind is IntentKind.TOGGLE_INPUT_MODE:
            self.toggle_input_mode()
        elif kind is IntentKind.TOGGLE_FOCUS_MODE:
            self.toggle_focus_mode()
        elif kind is IntentKind.OPEN_THEME_PICKER:
            self._open_theme_picker()
        elif kind is IntentKind.CANCEL:
            self._close()

    def _toggle_setting(self, row: str) -> None:
        if row == "theme":
            self._open_theme_picker()
        elif row == "input_mode":
            self.toggle_input_mode()
        elif row == "focus_mode":
            self.toggle_focus_mode()
        else:
            setattr(self.settings, row, not getattr(self.settings, row))
            self._save_settings()

    def _open_theme_picker(self) -> None:
        themes = available_themes()
        self.theme_selection = themes.index(self.settings.theme) if self.settings.theme in themes else 0
        self.surface = ModalSurface.THEME_PICKER

    def _handle_theme_picker(self, intent: Intent) -> None:
        kind = intent.kind
        themes = available_themes()
        if kind is IntentKind.UP:
            self.theme_selection = max(0, self.theme_selection - 1)
        elif kind is IntentKind.DOWN:
            self.theme_selection = min(len(themes) - 1, self.theme_selection + 1)
        elif kind is IntentKind.CONFIRM:
            self.settings.theme = themes[self.theme_selection]
            self.message = f"Theme: {self.settings.theme}"
            self._save_settings()
            self.surface = ModalSurface.SETTINGS
        elif kind is IntentKind.CANCEL:
            self.surface = ModalSurface.SETTINGS

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def _handle_help(self, intent: Intent) -> None:
        if intent.kind in (IntentKind.CANCEL, IntentKind.OPEN_HELP):
            self._close()
