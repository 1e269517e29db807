"""Settings and theme picker overlays."""

from rich.text import Text

from biblios.navigator import SETTINGS_ROWS
from biblios.themes import available_themes
from biblios.widgets.panel import Panel

_ROW_LABELS = {
    "input_mode": "Input mode",
    "theme": "Theme",
    "focus_mode": "Focus mode",
    "show_verse_numbers": "Verse numbers",
    "verse_spacing": "Verse spacing",
}


def _value(settings, row: str) -> str:
    value = getattr(settings, row)
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


class SettingsPanel(Panel):
    def __init__(self, **kwargs) -> None:
        super().__init__("Settings", **kwargs)

    def render_text(self, navigator) -> Text:
        text = Text()
        for index, row in enumerate(SETTINGS_ROWS):
            label = f"{_ROW_LABELS[row]:<16}{_value(navigator.settings, row)}"
            self.append_row(text, label, index == navigator.settings_row)
        text.append("\n")
        self.append_hint(text, [("Enter", "change"), ("i", "input"), ("f", "focus"), ("t", "theme"), ("Esc", "close")])
        return text


class ThemePickerView(Panel):
    def __init__(self, **kwargs) -> None:
        super().__init__("Theme", **kwargs)

    def render_text(self, navigator) -> Text:
        text = Text()
        for index, name in enumerate(available_themes()):
            current = "(current)" if name == navigator.settings.theme else ""
            self.append_row(text, name, index == navigator.theme_selection, current)
        text.append("\n")
        self.append_hint(text, [("Enter", "apply"), ("Esc", "back")])
        return text
