"""Persisted reading position."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from biblios.config import config_dir
from biblios.data.types import Location
from biblios.logger import get_logger

logger = get_logger(__name__)


def state_path() -> Path:
    return config_dir() / "state.json"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ReadingState:
    """Last reading position.

    ``book`` and ``chapter`` are ``None`` when there is no prior position.
    """

    book: Optional[str] = None
    chapter: Optional[int] = None
    verse_index: int = 0
    last_updated: str = field(default_factory=_now)

    @property
    def location(self) -> Optional[Location]:
        """The stored position, or None when nothing was saved yet."""
        if self.book is None or self.chapter is None:
            return None
        return Location(self.book, self.chapter, self.verse_index)

    def update_position(self, location: Location) -> None:
        """Update current reading position."""
        self.book = location.book
        self.chapter = location.chapter
        self.verse_index = location.verse_index

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "book": self.book,
            "chapter": self.chapter,
            "verse_index": self.verse_index,
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReadingState":
        """Create from dictionary, dropping values of the wrong type."""
        book = data.get("book")
        chapter = data.get("chapter")
        verse_index = data.get("verse_index", 0)
        if not isinstance(book, str):
            book = None
        if not isinstance(chapter, int) or isinstance(chapter, bool) or chapter < 1:
            chapter = None
        if not isinstance(verse_index, int) or isinstance(verse_index, bool) or verse_index < 0:
            verse_index = 0
        return cls(
            book=book,
            chapter=chapter,
            verse_index=verse_index,
            last_updated=data.get("last_updated") or _now(),
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ReadingState":
        """Load state from file, or return an empty position."""
        path = path or state_path()
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(f"Could not read reading position from {path}: {exc}")
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def save(self, path: Optional[Path] = None) -> None:
        """Save state to file. Raises OSError on failure."""
        path = path or state_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        self.last_updated = _now()
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
