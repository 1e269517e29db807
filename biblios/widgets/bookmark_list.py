"""Bookmark list overlay."""

from rich.text import Text

from biblios.widgets.panel import Panel, visible_range


class BookmarkList(Panel):
    def __init__(self, **kwargs) -> None:
        super().__init__("Bookmarks", **kwargs)

    def render_text(self, navigator) -> Text:
        text = Text()
        bookmarks = navigator.bookmarks.all()
        if not bookmarks:
            text.append("No bookmarks yet. Press m in the reader to add one.\n", style="dim")
        else:
            selected = min(navigator.bookmark_selection, len(bookmarks) - 1)
            for index in visible_range(len(bookmarks), selected, self.LIST_HEIGHT):
                bookmark = bookmarks[index]
                self.append_row(text, str(bookmark.reference), index == selected, bookmark.note or "")
        text.append("\n")
        self.append_hint(text, [("Enter", "go to"), ("d", "delete"), ("Esc", "close")])
        return text
