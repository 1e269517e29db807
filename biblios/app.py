"""Main Textual application for biblios."""

from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Container

from biblios.data.types import Translation
from biblios.keymap import translate
from biblios.logger import get_logger
from biblios.navigator import ModalSurface, Navigator
from biblios.themes import textual_theme
from biblios.widgets import (
    BookmarkList,
    HelpPanel,
    LocationPickerView,
    ReaderView,
    SearchView,
    SettingsPanel,
    StatusBar,
    ThemePickerView,
)

logger = get_logger(__name__)

_OVERLAY_IDS = {
    ModalSurface.SEARCH: "search-view",
    ModalSurface.BOOKMARKS: "bookmark-list",
    ModalSurface.LOCATION_PICKER: "picker-view",
    ModalSurface.SETTINGS: "settings-panel",
    ModalSurface.THEME_PICKER: "theme-picker",
    ModalSurface.HELP: "help-panel",
}


class BibliosApp(App):
    """Terminal Bible reader.

    Every key goes through :func:`biblios.keymap.translate` and the
    navigator; widgets are redrawn from the navigator afterwards and
    never change state themselves.
    """

    TITLE = "biblios"

    CSS = """
    Screen {
        layers: base overlay;
    }
    #overlay {
        layer: overlay;
        width: 100%;
        height: 100%;
        align: center middle;
        background: transparent;
    }
    """

    def __init__(self, navigator: Navigator, translation: Optional[Translation] = None) -> None:
        super().__init__()
        self.navigator = navigator
        self._translation = translation
        self._applied_theme: Optional[str] = None
        self._reader_rows = 0

    def compose(self) -> ComposeResult:
        """Create the UI layout."""
        yield ReaderView(id="reader-view")
        with Container(id="overlay"):
            yield SearchView(id="search-view")
            yield BookmarkList(id="bookmark-list")
            yield LocationPickerView(id="picker-view")
            yield SettingsPanel(id="settings-panel")
            yield ThemePickerView(id="theme-picker")
            yield HelpPanel(id="help-panel")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        if self._translation is not None:
            self.query_one("#status-bar", StatusBar).set_translation(self._translation.abbreviation)
        self.refresh_views()

    def on_key(self, event) -> None:
        """Translate the key and hand it to the navigator."""
        navigator = self.navigator
        picker_step = None
        if navigator.surface is ModalSurface.LOCATION_PICKER:
            picker_step = navigator.picker.step
        intent = translate(
            event.key,
            event.character,
            navigator.surface.value,
            navigator.settings.input_mode,
            picker_step,
        )
        if intent is None:
            return

        event.stop()
        event.prevent_default()
        navigator.dispatch(intent)
        if navigator.should_quit:
            self.exit()
            return
        self.refresh_views()

    def on_reader_view_resized(self, event: ReaderView.Resized) -> None:
        self._reader_rows = event.rows
        self.refresh_views()

    def _sync_viewport(self) -> None:
        if not self._reader_rows:
            return
        rows = self._reader_rows
        if self.navigator.settings.verse_spacing:
            rows = max(1, rows // 2)
        if rows != self.navigator.viewport_height:
            self.navigator.set_viewport_height(rows)

    def refresh_views(self) -> None:
        """Redraw every widget from the navigator's state."""
        navigator = self.navigator
        self._apply_theme(navigator.settings.theme)
        self._sync_viewport()

        self.query_one("#reader-view", ReaderView).show(navigator)

        status = self.query_one("#status-bar", StatusBar)
        status.display = not navigator.settings.focus_mode or bool(navigator.message)
        status.show(navigator)

        active = _OVERLAY_IDS.get(navigator.surface)
        self.query_one("#overlay").display = active is not None
        for widget_id in _OVERLAY_IDS.values():
            widget = self.query_one(f"#{widget_id}")
            widget.display = widget_id == active
            if widget_id == active:
                widget.show(navigator)

    def _apply_theme(self, name: str) -> None:
        if name == self._applied_theme:
            return
        self._applied_theme = name
        theme = textual_theme(name)
        if theme not in self.available_themes:
            logger.warning(f"Textual theme {theme!r} is not available")
            return
        self.theme = theme
