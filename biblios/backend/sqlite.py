"""SQLite verse store."""

import json
import sqlite3
from pathlib import Path
from typing import List, Optional, Union

from biblios.data.canon import BOOK_ORDER, book_chapters, get_book, resolve_alias
from biblios.data.types import Chapter, Translation, Verse, VerseReference
from biblios.errors import ChapterNotFound
from biblios.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

_SCHEMA = (
    """CREATE TABLE IF NOT EXISTS translations (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        abbreviation TEXT NOT NULL,
        language TEXT NOT NULL,
        description TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS verses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        book TEXT NOT NULL,
        chapter INTEGER NOT NULL,
        verse INTEGER NOT NULL,
        text TEXT NOT NULL,
        UNIQUE(book, chapter, verse)
    )""",
    "CREATE INDEX IF NOT EXISTS idx_verses_book_chapter ON verses(book, chapter)",
)

# Canonical ordering for search results
_ORDER_CASE = "CASE book " + " ".join(
    f"WHEN '{abbr}' THEN {idx}" for idx, abbr in enumerate(BOOK_ORDER)
) + f" ELSE {len(BOOK_ORDER)} END"


class SqliteProvider:
    """Loads chapters and runs text searches against a Bible database."""

    def __init__(self, db_path: PathLike) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(str(self.db_path))

    def close(self) -> None:
        self._conn.close()

    def load_translation(self) -> Optional[Translation]:
        """Load translation metadata, if the database has any."""
        try:
            row = self._conn.execute(
                "SELECT id, name, abbreviation, language, description FROM translations LIMIT 1"
            ).fetchone()
        except sqlite3.Error as exc:
            logger.warning(f"Could not read translation metadata: {exc}")
            return None
        if row is None:
            return None
        return Translation(row[0], row[1], row[2], row[3], row[4] or "")

    def load_chapter(self, book: str, chapter: int) -> Chapter:
        """Load a chapter.

        Raises:
            ChapterNotFound: unknown book, chapter out of range, or a
                database error. A chapter with no stored verses is returned
                empty.
        """
        canon = get_book(book)
        if canon is None or not 1 <= chapter <= canon.chapters:
            raise ChapterNotFound(book, chapter)

        try:
            rows = self._conn.execute(
                "SELECT verse, text FROM verses WHERE book = ? AND chapter = ? ORDER BY verse",
                (canon.abbr, chapter),
            ).fetchall()
        except sqlite3.Error as exc:
            logger.warning(f"Loading {canon.abbr} {chapter} failed: {exc}")
            raise ChapterNotFound(book, chapter) from exc

        verses = tuple(
            Verse(VerseReference(canon.abbr, chapter, verse), text) for verse, text in rows
        )
        return Chapter(canon.abbr, chapter, verses)

    def search(self, query: str, limit: int = 100) -> List[Verse]:
        """Case-insensitive substring search over verse text, in canonical order."""
        if not query.strip():
            return []
        pattern = "%" + query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
        try:
            rows = self._conn.execute(
                f"SELECT book, chapter, verse, text FROM verses "
                f"WHERE text LIKE ? ESCAPE '\\' "
                f"ORDER BY {_ORDER_CASE}, chapter, verse LIMIT ?",
                (pattern, limit),
            ).fetchall()
        except sqlite3.Error as exc:
            logger.warning(f"Search for {query!r} failed: {exc}")
            return []
        return [Verse(VerseReference(b, c, v), t) for b, c, v, t in rows]


def init_database(db_path: PathLike) -> None:
    """Create the schema in a new or existing database."""
    conn = sqlite3.connect(str(db_path))
    try:
        with conn:
            for statement in _SCHEMA:
                conn.execute(statement)
    finally:
        conn.close()


_SAMPLE_JOHN_1 = [
    "In the beginning was the Word, and the Word was with God, and the Word was God.",
    "The same was in the beginning with God.",
    "All things were made by him; and without him was not any thing made that was made.",
    "In him was life; and the life was the light of men.",
    "And the light shineth in darkness; and the darkness comprehended it not.",
]

_SAMPLE_JOHN_3 = {
    16: "For God so loved the world, that he gave his only begotten Son, that whosoever "
    "believeth in him should not perish, but have everlasting life.",
    17: "For God sent not his Son into the world to condemn the world; but that the world "
    "through him might be saved.",
}


def create_sample_database(db_path: PathLike) -> None:
    """Create a small sample database with John 1:1-5 and John 3:16-17."""
    init_database(db_path)
    conn = sqlite3.connect(str(db_path))
    try:
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO translations (id, name, abbreviation, language, description) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    "KJV",
                    "King James Version",
                    "KJV",
                    "en",
                    "The King James Version (KJV) is an English translation of the Christian Bible.",
                ),
            )
            for i, text in enumerate(_SAMPLE_JOHN_1, start=1):
                conn.execute(
                    "INSERT OR REPLACE INTO verses (book, chapter, verse, text) VALUES (?, ?, ?, ?)",
                    ("John", 1, i, text),
                )
            for verse, text in _SAMPLE_JOHN_3.items():
                conn.execute(
                    "INSERT OR REPLACE INTO verses (book, chapter, verse, text) VALUES (?, ?, ?, ?)",
                    ("John", 3, verse, text),
                )
    finally:
        conn.close()
    logger.info(f"Created sample database at {db_path}")


def import_json_bible(json_path: PathLike, db_path: PathLike) -> int:
    """Import a JSON Bible into the database.

    Expected format::

        {"translation": {"id": ..., "name": ..., ...},
         "books": [{"name": "Gen", "chapters": [["verse 1", ...], ...]}]}

    Book names are resolved as aliases, so long names and abbreviations
    such as "1 Jn." work too.

    Returns:
        Number of verses imported.
    """
    with open(json_path, encoding="utf-8") as f:
        data = json.load(f)

    init_database(db_path)
    conn = sqlite3.connect(str(db_path))
    count = 0
    try:
        with conn:
            translation = data.get("translation")
            if isinstance(translation, dict):
                conn.execute(
                    "INSERT OR REPLACE INTO translations (id, name, abbreviation, language, description) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        translation.get("id", "unknown"),
                        translation.get("name", "Unknown"),
                        translation.get("abbreviation", "UNK"),
                        translation.get("language", "en"),
                        translation.get("description", ""),
                    ),
                )

            for book in data.get("books", []):
                raw_name = book.get("name")
                if not raw_name:
                    raise ValueError("Missing book name")
                abbr = resolve_alias(raw_name, fuzzy=False)
                canon = get_book(abbr) if abbr else None
                if canon is None:
                    logger.warning(f"Skipping unknown book {raw_name!r}")
                    continue
                for chapter_num, chapter in enumerate(book.get("chapters", []), start=1):
                    if chapter_num > book_chapters(canon.abbr):
                        break
                    for verse_num, text in enumerate(chapter, start=1):
                        conn.execute(
                            "INSERT OR REPLACE INTO verses (book, chapter, verse, text) VALUES (?, ?, ?, ?)",
                            (canon.abbr, chapter_num, verse_num, str(text or "")),
                        )
                        count += 1
    finally:
        conn.close()
    logger.info(f"Imported {count} verses from {json_path} into {db_path}")
    return count
