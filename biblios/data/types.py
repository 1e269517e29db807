"""Data types for biblios."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


@dataclass(frozen=True)
class VerseReference:
    """A book/chapter/verse reference (verse numbers are 1-based)."""

    book: str
    chapter: int
    verse: int

    def __str__(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"book": self.book, "chapter": self.chapter, "verse": self.verse}

    @classmethod
    def from_dict(cls, data: dict) -> "VerseReference":
        """Create from dictionary."""
        return cls(
            book=data["book"],
            chapter=int(data["chapter"]),
            verse=int(data["verse"]),
        )


@dataclass(frozen=True)
class Verse:
    """A single verse with its text."""

    reference: VerseReference
    text: str

    @property
    def number(self) -> int:
        return self.reference.verse


@dataclass(frozen=True)
class Chapter:
    """The ordered verses of one chapter."""

    book: str
    number: int
    verses: tuple[Verse, ...] = ()

    def __len__(self) -> int:
        return len(self.verses)

    @property
    def title(self) -> str:
        return f"{self.book} {self.number}"

    def index_of(self, verse_number: int) -> int:
        """Return the index of a verse number, or the nearest preceding one."""
        best = 0
        for idx, verse in enumerate(self.verses):
            if verse.number == verse_number:
                return idx
            if verse.number < verse_number:
                best = idx
        return best


@dataclass(frozen=True)
class Translation:
    """Metadata for a Bible translation stored in the database."""

    id: str
    name: str
    abbreviation: str
    language: str
    description: str = ""


@dataclass(frozen=True)
class Location:
    """The reader's position: book identifier, chapter and 0-based verse index."""

    book: str
    chapter: int
    verse_index: int = 0

    def __str__(self) -> str:
        return f"{self.book} {self.chapter} [{self.verse_index}]"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Bookmark:
    """A saved bookmark with an optional note."""

    reference: VerseReference
    note: Optional[str] = None
    created_at: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "reference": self.reference.to_dict(),
            "note": self.note,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Bookmark":
        """Create from dictionary."""
        return cls(
            reference=VerseReference.from_dict(data["reference"]),
            note=data.get("note"),
            created_at=data.get("created_at") or _now(),
        )


def make_chapter(book: str, number: int, texts: List[str]) -> Chapter:
    """Build a Chapter from plain verse texts, numbering verses from 1."""
    return Chapter(
        book=book,
        number=number,
        verses=tuple(
            Verse(VerseReference(book, number, i + 1), text)
            for i, text in enumerate(texts)
        ),
    )
