"""Search overlay."""

import re

from rich.text import Text

from biblios.widgets.panel import Panel, visible_range


class SearchView(Panel):
    """Live search box with the matching verses."""

    DEFAULT_CSS = """
    SearchView {
        width: 90%;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("Search", **kwargs)

    def render_text(self, navigator) -> Text:
        text = Text()
        text.append("Search: ", style="bold")
        text.append(navigator.search_query)
        text.append("█\n", style="blink")

        results = navigator.search_results
        if len(navigator.search_query.strip()) < 2:
            text.append("Type at least 2 characters\n", style="dim")
        elif not results:
            text.append("No matches\n", style="dim")
        else:
            text.append(f"{len(results)} matches\n\n", style="dim")
            pattern = re.compile(re.escape(navigator.search_query.strip()), re.IGNORECASE)
            for index in visible_range(len(results), navigator.search_selection, self.LIST_HEIGHT):
                verse = results[index]
                selected = index == navigator.search_selection
                text.append("▶ " if selected else "  ", style="bold cyan")
                text.append(f"{verse.reference}".ljust(18), style="bold yellow")
                self._append_with_highlight(text, verse.text[:120], pattern)
                text.append("\n")

        text.append("\n")
        self.append_hint(text, [("Enter", "go to"), ("Esc", "close"), ("n/N", "cycle later")])
        return text

    def _append_with_highlight(self, text: Text, content: str, pattern: re.Pattern) -> None:
        """Append text with search term highlighting."""
        last_end = 0
        for match in pattern.finditer(content):
            if match.start() > last_end:
                text.append(content[last_end:match.start()])
            text.append(match.group(), style="bold black on yellow")
            last_end = match.end()
        if last_end < len(content):
            text.append(content[last_end:])
