"""In-memory verse store."""

from typing import Dict, List, Sequence, Tuple

from biblios.data.canon import BOOK_ORDER, get_book
from biblios.data.types import Chapter, Verse, make_chapter
from biblios.errors import ChapterNotFound


class MemoryProvider:
    """Serves chapters from a dict of ``(book, chapter) -> verse texts``.

    Chapters missing from the dict raise ChapterNotFound, like a database
    without rows for a book the canon does know about.
    """

    def __init__(self, chapters: Dict[Tuple[str, int], Sequence[str]]) -> None:
        self._chapters: Dict[Tuple[str, int], Chapter] = {
            (book, number): make_chapter(book, number, list(texts))
            for (book, number), texts in chapters.items()
        }
        self.loads: List[Tuple[str, int]] = []

    def load_chapter(self, book: str, chapter: int) -> Chapter:
        self.loads.append((book, chapter))
        canon = get_book(book)
        key = (canon.abbr if canon else book, chapter)
        if key not in self._chapters:
            raise ChapterNotFound(book, chapter)
        return self._chapters[key]

    def search(self, query: str, limit: int = 100) -> List[Verse]:
        needle = query.strip().lower()
        if not needle:
            return []
        order = {abbr: i for i, abbr in enumerate(BOOK_ORDER)}
        hits: List[Verse] = []
        for key in sorted(self._chapters, key=lambda k: (order.get(k[0], len(order)), k[1])):
            for verse in self._chapters[key].verses:
                if needle in verse.text.lower():
                    hits.append(verse)
                    if len(hits) >= limit:
                        return hits
        return hits
