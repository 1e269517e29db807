"""Tests for the navigation state machine."""

import json

import pytest

from biblios.backend import MemoryProvider
from biblios.data.types import Location, VerseReference
from biblios.keymap import Intent, IntentKind
from biblios.navigator import DEFAULT_LOCATION, SETTINGS_ROWS, ModalSurface, Navigator, Session
from biblios.state import ReadingState
from biblios.themes import available_themes

K = IntentKind


def send(navigator, *kinds):
    for kind in kinds:
        navigator.dispatch(Intent(kind))


def type_text(navigator, text):
    for char in text:
        navigator.dispatch(Intent(K.CHAR, char))


def goto(navigator, book, chapter, verse_index):
    assert navigator._goto(book, chapter, verse_index)


class TestStart:
    """Test the starting position."""

    def test_default_location(self, navigator):
        assert navigator.location == DEFAULT_LOCATION
        assert navigator.surface is ModalSurface.READER

    def test_resume_saved_position(self, provider):
        session = Session.load()
        session.reading.update_position(Location("John", 3, 15))
        navigator = Navigator(provider, session, viewport_height=5)
        navigator.start()
        assert navigator.location == Location("John", 3, 15)
        assert navigator.offset == 11

    def test_saved_position_unavailable(self, provider):
        session = Session.load()
        session.reading.update_position(Location("Job", 7, 2))
        navigator = Navigator(provider, session)
        navigator.start()
        assert navigator.location == DEFAULT_LOCATION

    def test_saved_index_clamped(self, provider):
        session = Session.load()
        session.reading.update_position(Location("Gen", 1, 99))
        navigator = Navigator(provider, session)
        navigator.start()
        assert navigator.location == Location("Gen", 1, 4)

    def test_first_loadable_chapter(self):
        provider = MemoryProvider({("Exod", 2): ["a"], ("Lev", 1): ["b"]})
        navigator = Navigator(provider, Session.load())
        navigator.start()
        assert navigator.location == Location("Exod", 2, 0)

    def test_nothing_loadable(self):
        navigator = Navigator(MemoryProvider({}), Session.load())
        navigator.start()
        assert navigator.location is None
        assert navigator.chapter is None
        send(navigator, K.NEXT_VERSE, K.PREV_VERSE, K.PAGE_DOWN, K.NEXT_BOOK, K.TOGGLE_BOOKMARK)
        assert navigator.location is None


class TestRollover:
    """Test continuous verse, chapter and book navigation."""

    def test_advance_within_chapter(self, navigator):
        send(navigator, K.NEXT_VERSE)
        assert navigator.location == Location("John", 1, 1)

    def test_advance_into_next_chapter(self, navigator):
        goto(navigator, "John", 3, 20)
        send(navigator, K.NEXT_VERSE)
        assert navigator.location == Location("John", 4, 0)
        assert navigator.offset == 0
        assert navigator.chapter.number == 4

    def test_advance_skips_missing_chapter_to_next_book(self, navigator):
        goto(navigator, "Gen", 2, 2)
        send(navigator, K.NEXT_VERSE)
        assert navigator.location == Location("Exod", 1, 0)

    def test_retreat_at_document_start_is_noop(self, navigator, provider):
        goto(navigator, "Gen", 1, 0)
        provider.loads.clear()
        send(navigator, K.PREV_VERSE)
        assert navigator.location == Location("Gen", 1, 0)
        assert provider.loads == []

    def test_advance_at_document_end_is_noop(self, navigator):
        goto(navigator, "Rev", 22, 2)
        send(navigator, K.NEXT_VERSE)
        assert navigator.location == Location("Rev", 22, 2)

    def test_retreat_into_previous_chapter_tail(self, navigator):
        goto(navigator, "John", 4, 0)
        send(navigator, K.PREV_VERSE)
        assert navigator.location == Location("John", 3, 20)
        assert navigator.offset == 16

    def test_retreat_into_previous_book_last_chapter(self, navigator):
        """The last loadable chapter of the previous book is used."""
        goto(navigator, "Exod", 1, 0)
        send(navigator, K.PREV_VERSE)
        assert navigator.location == Location("Gen", 2, 2)

    def test_retreat_skips_missing_previous_chapter(self, navigator):
        goto(navigator, "John", 3, 0)
        send(navigator, K.PREV_VERSE)
        assert navigator.location == Location("Exod", 1, 1)

    @pytest.mark.parametrize("index", range(4))
    def test_round_trip(self, navigator, index):
        goto(navigator, "Gen", 1, index)
        send(navigator, K.NEXT_VERSE, K.PREV_VERSE)
        assert navigator.location == Location("Gen", 1, index)

    def test_round_trip_across_chapters(self, navigator):
        goto(navigator, "John", 3, 20)
        send(navigator, K.NEXT_VERSE, K.PREV_VERSE)
        assert navigator.location == Location("John", 3, 20)

    def test_empty_chapter_ends_the_book(self):
        provider = MemoryProvider({("Gen", 1): ["a"], ("Gen", 2): [], ("Gen", 3): ["c"], ("Exod", 1): ["x"]})
        navigator = Navigator(provider, Session.load())
        navigator.start()
        send(navigator, K.NEXT_VERSE)
        assert navigator.location == Location("Exod", 1, 0)

    def test_retreat_skips_empty_last_chapter_of_previous_book(self):
        """An empty final chapter is passed over for the one before it."""
        gen_49 = [f"Gen 49 verse {i}" for i in range(1, 9)]
        provider = MemoryProvider({("Gen", 49): gen_49, ("Gen", 50): [], ("Exod", 1): ["x", "y"]})
        navigator = Navigator(provider, Session.load(), viewport_height=3)
        navigator.start()
        goto(navigator, "Exod", 1, 0)

        send(navigator, K.PREV_VERSE)

        assert ("Gen", 50) in provider.loads
        assert navigator.location == Location("Gen", 49, 7)
        assert navigator.offset == 5
        assert navigator.current_verse.text == "Gen 49 verse 8"

        send(navigator, K.PREV_VERSE, K.PREV_VERSE)
        assert navigator.location == Location("Gen", 49, 5)
        assert navigator.offset == 5

    def test_retreat_never_leaves_negative_index(self):
        provider = MemoryProvider({("Gen", 49): ["a", "b"], ("Gen", 50): [], ("Exod", 1): ["x"]})
        navigator = Navigator(provider, Session.load(), viewport_height=3)
        navigator.start()
        goto(navigator, "Exod", 1, 0)
        for _ in range(5):
            send(navigator, K.PREV_VERSE)
            assert navigator.location.verse_index >= 0
        assert navigator.location == Location("Gen", 49, 0)

    def test_chapter_and_book_jumps(self, navigator):
        """Jumps land on verse 0; no later book has a loadable first chapter."""
        goto(navigator, "John", 3, 10)
        send(navigator, K.NEXT_CHAPTER)
        assert navigator.location == Location("John", 4, 0)
        send(navigator, K.PREV_CHAPTER)
        assert navigator.location == Location("John", 3, 0)
        send(navigator, K.NEXT_BOOK)
        assert navigator.location == Location("John", 3, 0)
        goto(navigator, "Exod", 1, 1)
        send(navigator, K.PREV_BOOK)
        assert navigator.location == Location("Gen", 1, 0)

    def test_book_jumps_at_boundaries(self, navigator):
        goto(navigator, "Gen", 1, 3)
        send(navigator, K.PREV_BOOK, K.PREV_CHAPTER)
        assert navigator.location == Location("Gen", 1, 3)


class TestViewport:
    """Test viewport follow and paging."""

    def test_follow_scrolls_down(self, navigator):
        goto(navigator, "John", 3, 0)
        for _ in range(5):
            send(navigator, K.NEXT_VERSE)
        assert navigator.location.verse_index == 5
        assert navigator.offset == 1

    def test_follow_scrolls_up(self, navigator):
        goto(navigator, "John", 3, 20)
        navigator.offset = 16
        send(navigator, K.GO_TOP)
        assert navigator.offset == 0

    def test_follow_is_idempotent(self, navigator):
        goto(navigator, "John", 3, 0)
        for index in range(21):
            navigator._set_index(index)
            first = navigator.offset
            navigator.follow()
            assert navigator.offset == first
            assert first <= index < first + navigator.viewport_height

    def test_short_chapter_keeps_offset_zero(self, navigator):
        goto(navigator, "Gen", 2, 2)
        assert navigator.offset == 0

    def test_page_down_and_up(self, navigator):
        goto(navigator, "John", 3, 0)
        send(navigator, K.PAGE_DOWN)
        assert navigator.location.verse_index == 5
        send(navigator, K.PAGE_UP)
        assert navigator.location.verse_index == 0

    def test_page_clamps_without_rollover(self, navigator):
        goto(navigator, "John", 3, 18)
        send(navigator, K.PAGE_DOWN)
        assert navigator.location == Location("John", 3, 20)
        send(navigator, K.PAGE_DOWN)
        assert navigator.location == Location("John", 3, 20)
        goto(navigator, "John", 3, 2)
        send(navigator, K.PAGE_UP)
        assert navigator.location == Location("John", 3, 0)

    def test_top_and_bottom(self, navigator):
        goto(navigator, "John", 3, 7)
        send(navigator, K.GO_BOTTOM)
        assert navigator.location.verse_index == 20
        assert navigator.offset == 16
        send(navigator, K.GO_TOP)
        assert navigator.location.verse_index == 0

    def test_viewport_height_change(self, navigator):
        goto(navigator, "John", 3, 20)
        navigator.set_viewport_height(10)
        assert navigator.offset == 16
        navigator.set_viewport_height(3)
        assert navigator.offset == 18
        navigator.set_viewport_height(0)
        assert navigator.viewport_height == 1

    def test_visible_verses(self, navigator):
        goto(navigator, "John", 3, 20)
        assert [v.number for v in navigator.visible_verses()] == [17, 18, 19, 20, 21]


class TestModalDispatch:
    """Test that only the active surface receives intents."""

    def test_settings_swallows_reader_intents(self, navigator):
        send(navigator, K.OPEN_SETTINGS, K.NEXT_VERSE, K.NEXT_CHAPTER, K.QUIT)
        assert navigator.surface is ModalSurface.SETTINGS
        assert navigator.location == DEFAULT_LOCATION
        assert not navigator.should_quit

    def test_picker_swallows_reader_intents(self, navigator):
        send(navigator, K.OPEN_PICKER, K.NEXT_VERSE, K.OPEN_HELP)
        assert navigator.surface is ModalSurface.LOCATION_PICKER
        assert navigator.location == DEFAULT_LOCATION

    def test_help_closes_to_base_view(self, navigator):
        send(navigator, K.OPEN_HELP, K.NEXT_VERSE)
        assert navigator.location == DEFAULT_LOCATION
        send(navigator, K.OPEN_HELP)
        assert navigator.surface is ModalSurface.READER
        send(navigator, K.OPEN_HELP, K.CANCEL)
        assert navigator.surface is ModalSurface.READER

    def test_theme_picker_returns_to_settings(self, navigator):
        send(navigator, K.OPEN_SETTINGS, K.OPEN_THEME_PICKER)
        assert navigator.surface is ModalSurface.THEME_PICKER
        send(navigator, K.CANCEL)
        assert navigator.surface is ModalSurface.SETTINGS
        send(navigator, K.CANCEL)
        assert navigator.surface is ModalSurface.READER

    def test_quit(self, navigator):
        send(navigator, K.QUIT)
        assert navigator.should_quit


class TestSearch:
    """Test the live search surface."""

    def test_short_query_has_no_results(self, navigator, provider):
        send(navigator, K.OPEN_SEARCH)
        assert navigator.base_view is ModalSurface.SEARCH
        type_text(navigator, "l")
        assert navigator.search_results == []

    def test_live_results(self, navigator):
        send(navigator, K.OPEN_SEARCH)
        type_text(navigator, "loved")
        assert [str(v.reference) for v in navigator.search_results] == ["John 3:16"]
        send(navigator, K.BACKSPACE, K.BACKSPACE, K.BACKSPACE, K.BACKSPACE)
        assert navigator.search_query == "l"
        assert navigator.search_results == []

    def test_typing_reader_keys(self, navigator):
        """Characters are text while searching, not navigation."""
        send(navigator, K.OPEN_SEARCH)
        navigator.dispatch(Intent(K.CHAR, "q"))
        assert not navigator.should_quit
        assert navigator.search_query == "q"

    def test_confirm_jumps(self, navigator):
        send(navigator, K.OPEN_SEARCH)
        type_text(navigator, "John 4")
        assert len(navigator.search_results) == 4
        send(navigator, K.DOWN, K.DOWN, K.DOWN, K.DOWN, K.UP)
        assert navigator.search_selection == 2
        send(navigator, K.CONFIRM)
        assert navigator.surface is ModalSurface.READER
        assert navigator.base_view is ModalSurface.READER
        assert navigator.location == Location("John", 4, 2)

    def test_confirm_without_results(self, navigator):
        send(navigator, K.OPEN_SEARCH, K.CONFIRM)
        assert navigator.surface is ModalSurface.SEARCH

    def test_cycle_after_cancel(self, navigator):
        send(navigator, K.OPEN_SEARCH)
        type_text(navigator, "of Gen")
        send(navigator, K.CANCEL)
        assert navigator.surface is ModalSurface.READER
        assert len(navigator.search_results) == 8

        send(navigator, K.SEARCH_NEXT)
        assert navigator.location == Location("Gen", 1, 0)
        send(navigator, K.SEARCH_PREV)
        assert navigator.location == Location("Gen", 2, 2)
        assert navigator.message.startswith("Result 8/8")

    def test_cycle_without_search(self, navigator):
        send(navigator, K.SEARCH_NEXT)
        assert navigator.location == DEFAULT_LOCATION
        assert navigator.message == "No search results"


class TestBookmarks:
    """Test bookmarking from the reader and the bookmark list."""

    def test_toggle_in_reader(self, navigator, isolated_dirs):
        goto(navigator, "John", 3, 15)
        send(navigator, K.TOGGLE_BOOKMARK)
        assert navigator.bookmarks.is_bookmarked(VerseReference("John", 3, 16))
        assert navigator.message == "Bookmarked John 3:16"

        saved = json.loads((isolated_dirs / "config" / "bookmarks.json").read_text())
        assert saved["bookmarks"][0]["reference"] == {"book": "John", "chapter": 3, "verse": 16}

        send(navigator, K.TOGGLE_BOOKMARK)
        assert len(navigator.bookmarks) == 0

    def test_jump_to_bookmark(self, navigator):
        goto(navigator, "Gen", 1, 3)
        send(navigator, K.TOGGLE_BOOKMARK)
        goto(navigator, "John", 3, 15)
        send(navigator, K.TOGGLE_BOOKMARK)
        goto(navigator, "Exod", 1, 0)

        send(navigator, K.OPEN_BOOKMARKS)
        assert navigator.surface is ModalSurface.BOOKMARKS
        send(navigator, K.DOWN, K.DOWN, K.CONFIRM)
        assert navigator.surface is ModalSurface.READER
        assert navigator.location == Location("John", 3, 15)

    def test_remove_from_list(self, navigator):
        goto(navigator, "Gen", 1, 3)
        send(navigator, K.TOGGLE_BOOKMARK)
        send(navigator, K.OPEN_BOOKMARKS, K.TOGGLE_BOOKMARK)
        assert len(navigator.bookmarks) == 0
        assert navigator.selected_bookmark() is None
        send(navigator, K.CONFIRM, K.CANCEL)
        assert navigator.surface is ModalSurface.READER

    def test_bookmark_to_missing_chapter(self, navigator):
        navigator.bookmarks.toggle(VerseReference("Job", 1, 1))
        send(navigator, K.OPEN_BOOKMARKS, K.CONFIRM)
        assert navigator.surface is ModalSurface.BOOKMARKS
        assert navigator.location == DEFAULT_LOCATION
        assert "not available" in navigator.message


class TestSettings:
    """Test the settings panel and theme picker."""

    def test_rows_clamp(self, navigator):
        send(navigator, K.OPEN_SETTINGS, K.UP)
        assert navigator.settings_row == 0
        send(navigator, *[K.DOWN] * 10)
        assert navigator.settings_row == len(SETTINGS_ROWS) - 1

    def test_toggle_row_saves(self, navigator, isolated_dirs):
        row = SETTINGS_ROWS.index("show_verse_numbers")
        send(navigator, K.OPEN_SETTINGS, *[K.DOWN] * row, K.CONFIRM)
        assert navigator.settings.show_verse_numbers is False
        saved = json.loads((isolated_dirs / "config" / "settings.json").read_text())
        assert saved["show_verse_numbers"] is False

    def test_input_mode_shortcut(self, navigator):
        send(navigator, K.OPEN_SETTINGS, K.TOGGLE_INPUT_MODE)
        assert navigator.settings.input_mode == "vim"
        send(navigator, K.CONFIRM)
        assert navigator.settings.input_mode == "normal"

    def test_focus_mode_from_reader(self, navigator):
        send(navigator, K.TOGGLE_FOCUS_MODE)
        assert navigator.settings.focus_mode
        assert navigator.message == "Focus mode on"

    def test_theme_picker_applies_theme(self, navigator, isolated_dirs):
        row = SETTINGS_ROWS.index("theme")
        send(navigator, K.OPEN_SETTINGS, *[K.DOWN] * row, K.CONFIRM)
        assert navigator.surface is ModalSurface.THEME_PICKER
        assert available_themes()[navigator.theme_selection] == navigator.settings.theme

        send(navigator, K.DOWN, K.DOWN, K.CONFIRM)
        assert navigator.settings.theme == available_themes()[2]
        assert navigator.surface is ModalSurface.SETTINGS
        saved = json.loads((isolated_dirs / "config" / "settings.json").read_text())
        assert saved["theme"] == available_themes()[2]

    def test_theme_picker_cancel_keeps_theme(self, navigator):
        before = navigator.settings.theme
        send(navigator, K.OPEN_SETTINGS, K.OPEN_THEME_PICKER, K.DOWN, K.CANCEL)
        assert navigator.settings.theme == before


class TestPickerIntegration:
    """Test the location picker driven through the navigator."""

    def test_john_3_16(self, navigator):
        send(navigator, K.OPEN_PICKER)
        type_text(navigator, "john")
        send(navigator, K.CONFIRM)
        navigator.dispatch(Intent(K.DIGIT, "3"))
        send(navigator, K.CONFIRM, *[K.DOWN] * 15, K.CONFIRM)

        assert navigator.location == Location("John", 3, 15)
        assert navigator.offset == 11
        assert navigator.surface is ModalSurface.READER
        assert navigator.picker.chosen_book is None
        assert navigator.picker.chosen_chapter is None
        assert navigator.picker.text_filter == ""

    def test_cancel_at_book_step_closes(self, navigator):
        send(navigator, K.OPEN_PICKER)
        type_text(navigator, "ge")
        send(navigator, K.CANCEL)
        assert navigator.surface is ModalSurface.READER
        assert navigator.picker.text_filter == ""

    def test_unavailable_choice(self, navigator):
        send(navigator, K.OPEN_PICKER)
        type_text(navigator, "job")
        send(navigator, K.CONFIRM, K.CONFIRM, K.CONFIRM)
        assert navigator.location == DEFAULT_LOCATION
        assert navigator.surface is ModalSurface.READER
        assert "not available" in navigator.message


class TestPersistence:
    """Test position commits and shutdown."""

    def test_position_written_after_move(self, navigator):
        send(navigator, K.NEXT_VERSE)
        assert ReadingState.load().location == Location("John", 1, 1)

    def test_commit_failure_keeps_state(self, provider, isolated_dirs):
        blocker = isolated_dirs / "blocker"
        blocker.write_text("")
        session = Session(state_file=blocker / "state.json")
        navigator = Navigator(provider, session)
        navigator.start()
        send(navigator, K.NEXT_VERSE)
        assert navigator.location == Location("John", 1, 1)
        assert session.reading.location == Location("John", 1, 1)

    def test_shutdown_flushes_everything(self, navigator, isolated_dirs):
        goto(navigator, "John", 3, 15)
        failures = navigator.shutdown()
        assert failures == []
        config = isolated_dirs / "config"
        assert (config / "settings.json").exists()
        assert (config / "bookmarks.json").exists()
        assert ReadingState.load().location == Location("John", 3, 15)

    def test_shutdown_reports_failures(self, provider, isolated_dirs):
        blocker = isolated_dirs / "blocker"
        blocker.write_text("")
        session = Session(
            settings_file=blocker / "settings.json",
            bookmarks_file=isolated_dirs / "bookmarks.json",
            state_file=blocker / "state.json",
        )
        navigator = Navigator(provider, session)
        navigator.start()
        failures = navigator.shutdown()
        assert len(failures) == 2
        assert (isolated_dirs / "bookmarks.json").exists()

    def test_copy_verse(self, navigator, copied):
        goto(navigator, "John", 3, 15)
        send(navigator, K.COPY_VERSE)
        assert copied == [f"John 3:16 {navigator.current_verse.text}"]
        assert navigator.message == "Copied John 3:16"

    def test_copy_without_clipboard(self, provider):
        navigator = Navigator(provider, Session.load(), clipboard=lambda text: False)
        navigator.start()
        send(navigator, K.COPY_VERSE)
        assert navigator.message == "Clipboard not available"
