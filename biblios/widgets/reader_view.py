"""Verse reader widget."""

from rich.text import Text
from textual.message import Message
from textual.widgets import Static

WELCOME = (
    "Welcome to biblios\n\n"
    "No chapter could be loaded from the Bible database.\n"
    "Import a translation with: biblios --import-json bible.json\n\n"
    "Press ? for help or q to quit."
)


class ReaderView(Static):
    """Shows the verses inside the navigator's viewport."""

    DEFAULT_CSS = """
    ReaderView {
        width: 100%;
        height: 1fr;
        background: $surface;
        padding: 0 2;
    }
    ReaderView.focus-mode {
        padding: 1 8;
    }
    """

    class Resized(Message):
        """Posted when the number of visible rows changes."""

        def __init__(self, rows: int) -> None:
            self.rows = rows
            super().__init__()

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._rows = 0

    def on_resize(self, event) -> None:
        rows = max(1, self.content_size.height - 2)
        if rows != self._rows:
            self._rows = rows
            self.post_message(self.Resized(rows))

    def show(self, navigator) -> None:
        settings = navigator.settings
        self.set_class(settings.focus_mode, "focus-mode")

        if navigator.chapter is None or navigator.location is None:
            self.update(Text(WELCOME, style="dim"))
            return

        text = Text()
        text.append(navigator.chapter.title, style="bold")
        text.append("\n\n")

        current = navigator.location.verse_index
        for offset, verse in enumerate(navigator.visible_verses()):
            index = navigator.offset + offset
            is_current = index == current

            if is_current:
                text.append("▶ ", style="bold cyan")
            else:
                text.append("  ")
            if settings.show_verse_numbers:
                text.append(f"{verse.number}", style="bold black on cyan" if is_current else "bold yellow")
                text.append(" ")
            if navigator.bookmarks.is_bookmarked(verse.reference):
                text.append("* ", style="bold magenta")
            text.append(verse.text, style="bold" if is_current else "")
            text.append("\n")
            if settings.verse_spacing:
                text.append("\n")

        self.update(text)
