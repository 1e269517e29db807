"""Key to intent mapping with normal and vim presets.

The navigator only understands :class:`Intent` values; this module turns
Textual key events into intents depending on the input mode and on which
surface currently owns input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class IntentKind(Enum):
    """Everything a user can ask the navigator to do."""

    # Reader navigation
    NEXT_VERSE = "next_verse"
    PREV_VERSE = "prev_verse"
    PAGE_DOWN = "page_down"
    PAGE_UP = "page_up"
    GO_TOP = "go_top"
    GO_BOTTOM = "go_bottom"
    NEXT_CHAPTER = "next_chapter"
    PREV_CHAPTER = "prev_chapter"
    NEXT_BOOK = "next_book"
    PREV_BOOK = "prev_book"

    # Surfaces
    OPEN_SEARCH = "open_search"
    OPEN_BOOKMARKS = "open_bookmarks"
    OPEN_SETTINGS = "open_settings"
    OPEN_HELP = "open_help"
    OPEN_PICKER = "open_picker"
    OPEN_THEME_PICKER = "open_theme_picker"

    # Reader features
    TOGGLE_BOOKMARK = "toggle_bookmark"
    SEARCH_NEXT = "search_next"
    SEARCH_PREV = "search_prev"
    TOGGLE_INPUT_MODE = "toggle_input_mode"
    TOGGLE_FOCUS_MODE = "toggle_focus_mode"
    COPY_VERSE = "copy_verse"

    # Lists and text input
    UP = "up"
    DOWN = "down"
    CHAR = "char"
    BACKSPACE = "backspace"
    DIGIT = "digit"
    CONFIRM = "confirm"
    CANCEL = "cancel"

    QUIT = "quit"


@dataclass(frozen=True)
class Intent:
    """An abstract user request; ``char`` carries the typed character or digit."""

    kind: IntentKind
    char: str = ""

    @property
    def digit(self) -> int:
        return int(self.char) if self.char.isdigit() else 0


K = IntentKind

# Reader bindings: key or character -> (intent, help text)
VIM_READER: Dict[str, Tuple[IntentKind, str]] = {
    "j": (K.NEXT_VERSE, "Next verse"),
    "k": (K.PREV_VERSE, "Previous verse"),
    "l": (K.NEXT_VERSE, "Next verse"),
    "h": (K.PREV_VERSE, "Previous verse"),
    "down": (K.NEXT_VERSE, "Next verse"),
    "up": (K.PREV_VERSE, "Previous verse"),
    "ctrl+d": (K.PAGE_DOWN, "Page down"),
    "ctrl+u": (K.PAGE_UP, "Page up"),
    "home": (K.GO_TOP, "First verse of chapter"),
    "G": (K.GO_BOTTOM, "Last verse of chapter"),
    "end": (K.GO_BOTTOM, "Last verse of chapter"),
    "]": (K.NEXT_CHAPTER, "Next chapter"),
    "[": (K.PREV_CHAPTER, "Previous chapter"),
    "}": (K.NEXT_BOOK, "Next book"),
    "{": (K.PREV_BOOK, "Previous book"),
    "g": (K.OPEN_PICKER, "Go to book/chapter/verse"),
    "/": (K.OPEN_SEARCH, "Search"),
    "n": (K.SEARCH_NEXT, "Next search result"),
    "N": (K.SEARCH_PREV, "Previous search result"),
    "m": (K.TOGGLE_BOOKMARK, "Toggle bookmark"),
    "b": (K.OPEN_BOOKMARKS, "Bookmarks"),
    "s": (K.OPEN_SETTINGS, "Settings"),
    "f": (K.TOGGLE_FOCUS_MODE, "Toggle focus mode"),
    "i": (K.TOGGLE_INPUT_MODE, "Toggle vim/normal keys"),
    "y": (K.COPY_VERSE, "Copy verse"),
    "?": (K.OPEN_HELP, "Help"),
    "f1": (K.OPEN_HELP, "Help"),
    "q": (K.QUIT, "Quit"),
}

NORMAL_READER: Dict[str, Tuple[IntentKind, str]] = {
    "down": (K.NEXT_VERSE, "Next verse"),
    "up": (K.PREV_VERSE, "Previous verse"),
    "right": (K.NEXT_VERSE, "Next verse"),
    "left": (K.PREV_VERSE, "Previous verse"),
    "pagedown": (K.PAGE_DOWN, "Page down"),
    "pageup": (K.PAGE_UP, "Page up"),
    "home": (K.GO_TOP, "First verse of chapter"),
    "end": (K.GO_BOTTOM, "Last verse of chapter"),
    "ctrl+right": (K.NEXT_CHAPTER, "Next chapter"),
    "ctrl+left": (K.PREV_CHAPTER, "Previous chapter"),
    "ctrl+down": (K.NEXT_BOOK, "Next book"),
    "ctrl+up": (K.PREV_BOOK, "Previous book"),
    "ctrl+g": (K.OPEN_PICKER, "Go to book/chapter/verse"),
    "g": (K.OPEN_PICKER, "Go to book/chapter/verse"),
    "ctrl+f": (K.OPEN_SEARCH, "Search"),
    "/": (K.OPEN_SEARCH, "Search"),
    "f3": (K.SEARCH_NEXT, "Next search result"),
    "shift+f3": (K.SEARCH_PREV, "Previous search result"),
    "m": (K.TOGGLE_BOOKMARK, "Toggle bookmark"),
    "ctrl+b": (K.TOGGLE_BOOKMARK, "Toggle bookmark"),
    "b": (K.OPEN_BOOKMARKS, "Bookmarks"),
    "s": (K.OPEN_SETTINGS, "Settings"),
    "f2": (K.TOGGLE_FOCUS_MODE, "Toggle focus mode"),
    "i": (K.TOGGLE_INPUT_MODE, "Toggle vim/normal keys"),
    "y": (K.COPY_VERSE, "Copy verse"),
    "?": (K.OPEN_HELP, "Help"),
    "f1": (K.OPEN_HELP, "Help"),
    "q": (K.QUIT, "Quit"),
}

_LIST_KEYS: Dict[str, IntentKind] = {
    "up": K.UP,
    "down": K.DOWN,
    "enter": K.CONFIRM,
    "escape": K.CANCEL,
}

_VIM_LIST_KEYS: Dict[str, IntentKind] = {
    "j": K.DOWN,
    "k": K.UP,
}

_SETTINGS_KEYS: Dict[str, IntentKind] = {
    "i": K.TOGGLE_INPUT_MODE,
    "f": K.TOGGLE_FOCUS_MODE,
    "t": K.OPEN_THEME_PICKER,
    "s": K.CANCEL,
    "q": K.CANCEL,
}

_BOOKMARK_KEYS: Dict[str, IntentKind] = {
    "d": K.TOGGLE_BOOKMARK,
    "m": K.TOGGLE_BOOKMARK,
    "delete": K.TOGGLE_BOOKMARK,
    "b": K.CANCEL,
    "q": K.CANCEL,
}

_HELP_CLOSE_KEYS = {"escape", "?", "q", "f1", "enter"}


def _is_text(character: Optional[str]) -> bool:
    return bool(character) and len(character) == 1 and character.isprintable()


def _lookup(table: Dict, key: str, character: Optional[str]):
    if _is_text(character) and character in table:
        return table[character]
    return table.get(key)


def reader_table(input_mode: str) -> Dict[str, Tuple[IntentKind, str]]:
    return VIM_READER if input_mode == "vim" else NORMAL_READER


def translate(
    key: str,
    character: Optional[str],
    surface: str,
    input_mode: str = "normal",
    picker_step: Optional[str] = None,
) -> Optional[Intent]:
    """Translate a key press into an intent for the given surface.

    Args:
        key: Textual key name ("j", "ctrl+d", "escape"...).
        character: The printable character, if any.
        surface: Value of the ModalSurface currently owning input.
        input_mode: "normal" or "vim".
        picker_step: The picker step when the picker owns input. On the
            book step letters edit the filter instead of navigating.

    Returns:
        The intent, or None when the key means nothing here.
    """
    if surface == "reader":
        entry = _lookup(reader_table(input_mode), key, character)
        return Intent(entry[0]) if entry else None

    if surface == "help":
        if key in _HELP_CLOSE_KEYS or character in _HELP_CLOSE_KEYS:
            return Intent(K.CANCEL)
        return None

    if surface in ("search", "location_picker"):
        if key == "backspace":
            return Intent(K.BACKSPACE)
        if key in _LIST_KEYS:
            return Intent(_LIST_KEYS[key])
        if not _is_text(character):
            return None
        if surface == "location_picker":
            if character in "123456789":
                return Intent(K.DIGIT, character)
            if picker_step not in (None, "book"):
                kind = _VIM_LIST_KEYS.get(character)
                return Intent(kind) if kind else None
        return Intent(K.CHAR, character)

    # settings, theme_picker, bookmarks
    if key in _LIST_KEYS:
        return Intent(_LIST_KEYS[key])
    if _is_text(character) and character in _VIM_LIST_KEYS:
        return Intent(_VIM_LIST_KEYS[character])
    extra = {"settings": _SETTINGS_KEYS, "bookmarks": _BOOKMARK_KEYS}.get(surface, {})
    kind = _lookup(extra, key, character)
    return Intent(kind) if kind else None


HELP_SECTIONS: Dict[str, List[IntentKind]] = {
    "NAVIGATION": [
        K.NEXT_VERSE, K.PREV_VERSE, K.PAGE_DOWN, K.PAGE_UP, K.GO_TOP, K.GO_BOTTOM,
        K.NEXT_CHAPTER, K.PREV_CHAPTER, K.NEXT_BOOK, K.PREV_BOOK, K.OPEN_PICKER,
    ],
    "FEATURES": [
        K.OPEN_SEARCH, K.SEARCH_NEXT, K.SEARCH_PREV, K.TOGGLE_BOOKMARK, K.OPEN_BOOKMARKS,
        K.OPEN_SETTINGS, K.TOGGLE_FOCUS_MODE, K.TOGGLE_INPUT_MODE, K.COPY_VERSE,
    ],
    "GENERAL": [K.OPEN_HELP, K.QUIT],
}

_KEY_LABELS = {
    "ctrl+": "Ctrl+",
    "shift+": "Shift+",
}


def key_label(key: str) -> str:
    """Human readable key name ("ctrl+d" -> "Ctrl+d", "pagedown" -> "PageDown")."""
    pretty = {
        "pagedown": "PageDown",
        "pageup": "PageUp",
        "home": "Home",
        "end": "End",
        "up": "Up",
        "down": "Down",
        "left": "Left",
        "right": "Right",
    }
    label = key
    for prefix, replacement in _KEY_LABELS.items():
        if label.startswith(prefix):
            label = replacement + label[len(prefix):]
    for raw, nice in pretty.items():
        if label.endswith(raw):
            label = label[: -len(raw)] + nice
    if len(label) == 2 and label[0] == "f" and label[1].isdigit():
        label = label.upper()
    if label.startswith("Shift+f") or label.startswith("Ctrl+f"):
        head, _, tail = label.rpartition("+")
        if tail[1:].isdigit():
            label = f"{head}+{tail.upper()}"
    return label


def help_sections(input_mode: str) -> List[Tuple[str, List[Tuple[str, str]]]]:
    """Return (section, [(keys, description)]) rows for the help panel."""
    table = reader_table(input_mode)
    sections: List[Tuple[str, List[Tuple[str, str]]]] = []
    for title, kinds in HELP_SECTIONS.items():
        rows: List[Tuple[str, str]] = []
        for kind in kinds:
            keys = [k for k, (bound, _) in table.items() if bound is kind]
            if not keys:
                continue
            description = table[keys[0]][1]
            rows.append(("/".join(key_label(k) for k in keys), description))
        sections.append((title, rows))
    sections.append(("MODALS", [("Esc", "Close modal / go back"), ("Enter", "Select")]))
    return sections
