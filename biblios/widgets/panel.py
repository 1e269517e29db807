"""Shared base for the centered overlay panels."""

from rich.text import Text
from textual.widgets import Static


def visible_range(count: int, selected: int, height: int) -> range:
    """Window of list rows to draw so that ``selected`` stays visible."""
    if count <= height:
        return range(count)
    start = max(0, min(selected - height // 2, count - height))
    return range(start, start + height)


class Panel(Static):
    """Bordered overlay that renders itself from the navigator."""

    DEFAULT_CSS = """
    Panel {
        width: 64;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 0 1;
    }
    """

    LIST_HEIGHT = 15

    def __init__(self, title: str = "", **kwargs) -> None:
        super().__init__("", **kwargs)
        self.border_title = title

    def show(self, navigator) -> None:
        """Re-render from the navigator's current state."""
        self.update(self.render_text(navigator))

    def render_text(self, navigator) -> Text:
        raise NotImplementedError

    @staticmethod
    def append_row(text: Text, label: str, selected: bool, detail: str = "") -> None:
        if selected:
            text.append("▶ ", style="bold cyan")
            text.append(label, style="bold black on cyan")
        else:
            text.append("  ")
            text.append(label)
        if detail:
            text.append(f"  {detail}", style="dim")
        text.append("\n")

    @staticmethod
    def append_hint(text: Text, hints: list[tuple[str, str]]) -> None:
        for i, (key, desc) in enumerate(hints):
            if i > 0:
                text.append(" ", style="dim")
            text.append(key, style="bold yellow")
            text.append(f" {desc}", style="dim")
