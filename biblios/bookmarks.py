"""Bookmark storage."""

import json
from pathlib import Path
from typing import List, Optional

from biblios.config import config_dir
from biblios.data.types import Bookmark, VerseReference
from biblios.logger import get_logger

logger = get_logger(__name__)


def bookmarks_path() -> Path:
    return config_dir() / "bookmarks.json"


class BookmarkManager:
    """Holds the user's bookmarks, at most one per verse reference."""

    def __init__(self, bookmarks: Optional[List[Bookmark]] = None) -> None:
        self._bookmarks: List[Bookmark] = list(bookmarks or [])

    def __len__(self) -> int:
        return len(self._bookmarks)

    def add(self, bookmark: Bookmark) -> None:
        """Add a bookmark, replacing any existing one for the same reference."""
        self.remove(bookmark.reference)
        self._bookmarks.append(bookmark)

    def remove(self, reference: VerseReference) -> bool:
        """Remove a bookmark. Returns True if one was removed."""
        before = len(self._bookmarks)
        self._bookmarks = [b for b in self._bookmarks if b.reference != reference]
        return len(self._bookmarks) != before

    def toggle(self, reference: VerseReference) -> bool:
        """Toggle a bookmark. Returns True if the verse is now bookmarked."""
        if self.remove(reference):
            return False
        self.add(Bookmark(reference))
        return True

    def is_bookmarked(self, reference: VerseReference) -> bool:
        return any(b.reference == reference for b in self._bookmarks)

    def all(self) -> List[Bookmark]:
        """Return a copy of all bookmarks in insertion order."""
        return self._bookmarks.copy()

    def to_list(self) -> List[dict]:
        return [b.to_dict() for b in self._bookmarks]

    @classmethod
    def from_list(cls, data: list) -> "BookmarkManager":
        """Deserialize, skipping malformed entries."""
        bookmarks: List[Bookmark] = []
        for item in data:
            try:
                bookmarks.append(Bookmark.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.debug(f"Skipping malformed bookmark: {item!r}")
        return cls(bookmarks)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "BookmarkManager":
        """Load bookmarks from file, or return an empty manager."""
        path = path or bookmarks_path()
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(f"Could not read bookmarks from {path}: {exc}")
            return cls()
        if not isinstance(data, dict) or not isinstance(data.get("bookmarks"), list):
            return cls()
        return cls.from_list(data["bookmarks"])

    def save(self, path: Optional[Path] = None) -> None:
        """Save bookmarks to file. Raises OSError on failure."""
        path = path or bookmarks_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump({"bookmarks": self.to_list()}, f, indent=2)
