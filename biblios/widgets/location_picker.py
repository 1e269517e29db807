"""Book/chapter/verse picker overlay."""

from rich.text import Text

from biblios.data.canon import book_name, testament_label
from biblios.picker import PickerStep
from biblios.widgets.panel import Panel, visible_range


class LocationPickerView(Panel):
    """Draws the picker's current step and its candidates."""

    COLUMNS = 10

    def __init__(self, **kwargs) -> None:
        super().__init__("Go to", **kwargs)

    def render_text(self, navigator) -> Text:
        picker = navigator.picker
        text = Text()

        if picker.step is PickerStep.BOOK:
            self.border_title = "Go to: book"
            text.append("Book: ", style="bold")
            text.append(picker.text_filter)
            text.append("█\n\n", style="blink")
            books = picker.candidates()
            if not books:
                text.append("No matching books\n", style="dim")
            selected = picker.selection_index
            for index in visible_range(len(books), selected, self.LIST_HEIGHT):
                book = books[index]
                label = f"{index + 1:>2} {book.abbr.ljust(6)} {book.name}"
                self.append_row(text, label, index == selected, f"{book.chapters} ch, {testament_label(book.abbr)}")
        elif picker.step is PickerStep.CHAPTER:
            self.border_title = f"{book_name(picker.chosen_book)}: chapter"
            self._append_grid(text, picker.candidate_count(), picker.selection_index)
        else:
            self.border_title = f"{book_name(picker.chosen_book)} {picker.chosen_chapter}: verse"
            self._append_grid(text, picker.candidate_count(), picker.selection_index)
            if picker.chapter is None:
                text.append("\nChapter not loaded, verse count is approximate\n", style="dim")

        text.append("\n")
        self.append_hint(text, [("↑/↓", "move"), ("1-9", "jump"), ("Enter", "select"), ("Esc", "back")])
        return text

    def _append_grid(self, text: Text, count: int, selected: int) -> None:
        for number in range(1, count + 1):
            style = "bold black on cyan" if number - 1 == selected else ""
            text.append(f"{number:>4}", style=style)
            if number % self.COLUMNS == 0 or number == count:
                text.append("\n")
