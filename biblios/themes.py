"""Theme names and their Textual theme counterparts."""

from typing import Dict, List

DEFAULT_THEME = "default"

# biblios theme name -> Textual built-in theme
TEXTUAL_THEMES: Dict[str, str] = {
    "default": "textual-dark",
    "dark": "textual-ansi",
    "light": "textual-light",
    "nord": "nord",
    "gruvbox": "gruvbox",
    "dracula": "dracula",
    "tokyo-night": "tokyo-night",
    "monokai": "monokai",
}

THEME_NAMES: tuple[str, ...] = tuple(TEXTUAL_THEMES)


def available_themes() -> List[str]:
    """Return the selectable theme names in display order."""
    return list(THEME_NAMES)


def textual_theme(name: str) -> str:
    """Return the Textual theme for a biblios theme name."""
    return TEXTUAL_THEMES.get(name, TEXTUAL_THEMES[DEFAULT_THEME])
