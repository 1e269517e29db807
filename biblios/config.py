"""Configuration management for biblios."""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from biblios.logger import get_logger
from biblios.themes import DEFAULT_THEME, THEME_NAMES

logger = get_logger(__name__)

INPUT_MODES: tuple[str, ...] = ("normal", "vim")
DEFAULT_INPUT_MODE = "normal"

MIN_VERSES_PER_PAGE = 5
DEFAULT_VERSES_PER_PAGE = 20
DEFAULT_SEARCH_LIMIT = 100


def config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    default = Path.home() / ".config" / "biblios"
    path = Path(os.environ.get("BIBLIOS_CONFIG_DIR", str(default))).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path


def data_dir() -> Path:
    """Return the data directory (Bible databases), creating it if needed."""
    default = Path.home() / ".local" / "share" / "biblios"
    path = Path(os.environ.get("BIBLIOS_DATA_DIR", str(default))).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path


def settings_path() -> Path:
    return config_dir() / "settings.json"


@dataclass
class Settings:
    """User-configurable settings stored on disk."""

    translation: str = "KJV"
    input_mode: str = DEFAULT_INPUT_MODE
    theme: str = DEFAULT_THEME
    show_verse_numbers: bool = True
    verse_spacing: bool = False
    focus_mode: bool = False
    verses_per_page: int = DEFAULT_VERSES_PER_PAGE
    search_limit: int = DEFAULT_SEARCH_LIMIT

    @property
    def vim_mode(self) -> bool:
        return self.input_mode == "vim"

    def toggle_input_mode(self) -> None:
        """Switch between normal and vim key bindings."""
        self.input_mode = "normal" if self.vim_mode else "vim"

    def toggle_focus_mode(self) -> None:
        self.focus_mode = not self.focus_mode

    @classmethod
    def from_mapping(cls, data: dict) -> "Settings":
        """Create settings from raw values, applying defaults for invalid ones."""
        defaults = cls()

        translation = data.get("translation")
        if not isinstance(translation, str) or not translation:
            translation = defaults.translation

        input_mode = data.get("input_mode")
        if input_mode not in INPUT_MODES:
            input_mode = defaults.input_mode

        theme = data.get("theme")
        if theme not in THEME_NAMES:
            theme = defaults.theme

        verses_per_page = _coerce_int(data.get("verses_per_page"))
        if verses_per_page is None or verses_per_page < MIN_VERSES_PER_PAGE:
            verses_per_page = defaults.verses_per_page

        search_limit = _coerce_int(data.get("search_limit"))
        if search_limit is None or search_limit < 1:
            search_limit = defaults.search_limit

        return cls(
            translation=translation,
            input_mode=input_mode,
            theme=theme,
            show_verse_numbers=_coerce_bool(data.get("show_verse_numbers"), defaults.show_verse_numbers),
            verse_spacing=_coerce_bool(data.get("verse_spacing"), defaults.verse_spacing),
            focus_mode=_coerce_bool(data.get("focus_mode"), defaults.focus_mode),
            verses_per_page=verses_per_page,
            search_limit=search_limit,
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        """Load settings from file, or return defaults."""
        path = path or settings_path()
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(f"Could not read settings from {path}: {exc}")
            return cls()
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file {path}")
            return cls()
        return cls.from_mapping(data)

    def save(self, path: Optional[Path] = None) -> None:
        """Save settings to file. Raises OSError on failure."""
        path = path or settings_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)


def _coerce_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default
