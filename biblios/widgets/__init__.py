"""Textual widgets for biblios."""

from biblios.widgets.bookmark_list import BookmarkList
from biblios.widgets.help_panel import HelpPanel
from biblios.widgets.location_picker import LocationPickerView
from biblios.widgets.reader_view import ReaderView
from biblios.widgets.search_view import SearchView
from biblios.widgets.settings_panel import SettingsPanel, ThemePickerView
from biblios.widgets.status_bar import StatusBar

__all__ = [
    "BookmarkList",
    "HelpPanel",
    "LocationPickerView",
    "ReaderView",
    "SearchView",
    "SettingsPanel",
    "StatusBar",
    "ThemePickerView",
]
