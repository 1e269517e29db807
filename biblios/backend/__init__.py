"""Verse stores that serve chapters and search results."""

from pathlib import Path
from typing import List, Optional, Protocol

from biblios.backend.memory import MemoryProvider
from biblios.backend.sqlite import (
    SqliteProvider,
    create_sample_database,
    import_json_bible,
    init_database,
)
from biblios.config import data_dir
from biblios.data.types import Chapter, Verse
from biblios.logger import get_logger

logger = get_logger(__name__)


class DocumentProvider(Protocol):
    """What the navigator needs from a verse store."""

    def load_chapter(self, book: str, chapter: int) -> Chapter:
        """Return the chapter or raise ChapterNotFound."""
        ...

    def search(self, query: str, limit: int = 100) -> List[Verse]:
        """Return matching verses in canonical order."""
        ...


def default_database() -> Path:
    """Resolve the Bible database, creating the sample one if KJV is missing."""
    kjv_path = data_dir() / "translations" / "kjv.sqlite"
    if kjv_path.exists():
        return kjv_path

    logger.warning(f"KJV Bible not found at {kjv_path}, using the sample database")
    sample_path = data_dir() / "sample.db"
    if not sample_path.exists():
        create_sample_database(sample_path)
    return sample_path


def open_provider(db_path: Optional[Path] = None) -> SqliteProvider:
    """Open the given database, or the default one.

    Raises:
        FileNotFoundError: an explicit database path does not exist.
    """
    if db_path is not None and not Path(db_path).is_file():
        logger.error(f"Bible database {db_path} does not exist")
        raise FileNotFoundError(f"No Bible database at {db_path}")
    path = db_path or default_database()
    logger.info(f"Opening Bible database {path}")
    return SqliteProvider(path)


__all__ = [
    "DocumentProvider",
    "MemoryProvider",
    "SqliteProvider",
    "create_sample_database",
    "default_database",
    "import_json_bible",
    "init_database",
    "open_provider",
]
