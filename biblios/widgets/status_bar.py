"""Status bar widget."""

from rich.text import Text
from textual.widgets import Static

_MODE_LABELS = {
    "reader": ("READ", "bold black on green"),
    "search": ("SEARCH", "bold black on yellow"),
    "bookmarks": ("BOOKMARKS", "bold black on magenta"),
    "location_picker": ("GO TO", "bold black on cyan"),
    "settings": ("SETTINGS", "bold black on blue"),
    "theme_picker": ("THEME", "bold black on blue"),
    "help": ("HELP", "bold black on white"),
}


class StatusBar(Static):
    """Status bar showing mode, location and keybinding hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
        color: $text-muted;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._translation = ""

    def set_translation(self, name: str) -> None:
        self._translation = name

    def show(self, navigator) -> None:
        text = Text()

        label, style = _MODE_LABELS.get(navigator.surface.value, ("", ""))
        text.append(f" {label} ", style=style)
        if navigator.settings.vim_mode:
            text.append(" VIM", style="bold")

        verse = navigator.current_verse
        if verse is not None:
            text.append(" | ")
            text.append(str(verse.reference), style="bold")

        if self._translation:
            text.append(" | ")
            text.append(f"[{self._translation}]", style="cyan")
        text.append(f" | {navigator.settings.theme}", style="dim")

        if navigator.message:
            text.append("  ")
            text.append(navigator.message, style="yellow")
        else:
            hints = self._get_hints(navigator.surface.value, navigator.settings.vim_mode)
            if hints:
                text.append("  ")
                for i, (key, desc) in enumerate(hints):
                    if i > 0:
                        text.append(" ", style="dim")
                    text.append(key, style="bold yellow")
                    text.append(f" {desc}", style="dim")

        self.update(text)

    def _get_hints(self, surface: str, vim: bool) -> list[tuple[str, str]]:
        """Get keybinding hints for the surface that owns input."""
        if surface == "reader":
            if vim:
                return [("j/k", "verse"), ("]/[", "chapter"), ("g", "go to"), ("/", "search"), ("?", "help")]
            return [("↑/↓", "verse"), ("^←/^→", "chapter"), ("^G", "go to"), ("^F", "search"), ("F1", "help")]
        if surface == "search":
            return [("type", "query"), ("↑/↓", "select"), ("Enter", "go to"), ("Esc", "close")]
        if surface == "bookmarks":
            return [("↑/↓", "select"), ("Enter", "go to"), ("d", "delete"), ("Esc", "close")]
        if surface == "location_picker":
            return [("type", "filter"), ("1-9", "pick"), ("Enter", "select"), ("Esc", "back")]
        if surface in ("settings", "theme_picker"):
            return [("↑/↓", "select"), ("Enter", "change"), ("Esc", "close")]
        if surface == "help":
            return [("Esc", "close")]
        return []
