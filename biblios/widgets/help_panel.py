"""Key binding help overlay."""

from rich.text import Text

from biblios.keymap import help_sections
from biblios.widgets.panel import Panel


class HelpPanel(Panel):
    """Lists the reader key bindings of the active input mode."""

    DEFAULT_CSS = """
    HelpPanel {
        width: 72;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("Help", **kwargs)

    def render_text(self, navigator) -> Text:
        mode = navigator.settings.input_mode
        self.border_title = f"Help ({mode} keys)"
        text = Text()
        for title, rows in help_sections(mode):
            text.append(f"{title}\n", style="bold cyan")
            for keys, description in rows:
                text.append(f"  {keys:<28}", style="bold yellow")
                text.append(f"{description}\n")
            text.append("\n")
        self.append_hint(text, [("Esc", "close")])
        return text
